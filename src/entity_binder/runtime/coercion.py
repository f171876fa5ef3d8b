"""
Value coercion for the record binder.

Pure functions converting raw payload values into the representation a
property demands, and formatting bound values back into strings.

Two paths never raise on malformed input:
- dates fall back to ``DATE_SENTINEL`` when no configured format matches
- collection-valued foreign keys are split without any validation

Generic conversion to the declared Python type raises ``TypeConversionError``.
"""

from __future__ import annotations

import json
import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any
from uuid import UUID

from entity_binder.runtime.config import Culture, get_current_culture
from entity_binder.runtime.errors import TypeConversionError
from entity_binder.runtime.logging import get_logger, log_with_context
from entity_binder.specs.entity import PropertySpec, ScalarType

logger = get_logger("Coercion")

# Value of a date property whose payload matched neither format.
DATE_SENTINEL = datetime.min


# =============================================================================
# Dates
# =============================================================================


def _parse_exact(text: str, fmt: str) -> datetime:
    try:
        return datetime.strptime(text, fmt)
    except (TypeError, ValueError):
        return DATE_SENTINEL


def coerce_datetime(text: str, prop: PropertySpec, culture: Culture | None = None) -> datetime:
    """
    Parse a date property value.

    The full date-time format is tried first. When the result is the sentinel
    the date-only format is tried. The sentinel is returned when neither
    matches, so a value that legitimately parses to ``datetime.min`` also
    re-triggers the fallback.
    """
    culture = culture or get_current_culture()
    result = _parse_exact(text, prop.datetime_format or culture.datetime_format)
    if result == DATE_SENTINEL:
        result = _parse_exact(text, prop.date_format or culture.date_format)

    if result == DATE_SENTINEL:
        log_with_context(
            logger,
            logging.WARNING,
            "Unparsed date value, keeping sentinel",
            property=prop.name,
            value=text,
        )
    return result


# =============================================================================
# Collections
# =============================================================================


def split_collection(text: str, separator: str = ",") -> list[str]:
    """Split a multi-valued foreign key payload. Empty segments are kept."""
    return text.split(separator)


# =============================================================================
# Generic Conversion
# =============================================================================


def _normalize_number(text: str, culture: Culture) -> str:
    if culture.group_separator:
        text = text.replace(culture.group_separator, "")
    if culture.decimal_separator != ".":
        text = text.replace(culture.decimal_separator, ".")
    return text


def _to_bool(text: str, culture: Culture) -> bool:
    lowered = text.lower()
    if lowered in culture.true_values:
        return True
    if lowered in culture.false_values:
        return False
    raise ValueError(f"'{text}' is not a boolean")


def _to_datetime(text: str, culture: Culture) -> datetime:
    for fmt in (culture.datetime_format, culture.date_format):
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return datetime.fromisoformat(text)


def convert(
    value: Any,
    target_type: type,
    culture: Culture | None = None,
    property_name: str | None = None,
) -> Any:
    """
    Convert an attempted value to ``target_type`` using ``culture``.

    Multi-valued inputs convert their first element. Blank strings convert to
    None for every type but ``str``.

    Raises:
        TypeConversionError: The value is not representable as ``target_type``
    """
    if value is None:
        return None
    culture = culture or get_current_culture()

    if isinstance(value, list | tuple):
        value = value[0] if value else None
        if value is None:
            return None

    if target_type is str:
        return value if isinstance(value, str) else str(value)

    if isinstance(value, bool) and target_type in (int, float, Decimal):
        return target_type(value)
    if isinstance(value, target_type):
        return value

    text = str(value).strip()
    if not text:
        return None

    try:
        if target_type is bool:
            return _to_bool(text, culture)
        if target_type is int:
            return int(_normalize_number(text, culture))
        if target_type is Decimal:
            return Decimal(_normalize_number(text, culture))
        if target_type is float:
            return float(_normalize_number(text, culture))
        if target_type is UUID:
            return UUID(text)
        if target_type is datetime:
            return _to_datetime(text, culture)
        if target_type is date:
            return _to_datetime(text, culture).date()
        if target_type is dict:
            loaded = json.loads(text)
            if not isinstance(loaded, dict):
                raise ValueError("JSON value is not an object")
            return loaded
        if issubclass(target_type, Enum):
            return target_type(text)
        return target_type(text)
    except (ValueError, TypeError, InvalidOperation) as e:
        raise TypeConversionError(value, target_type, property_name) from e


def coerce(raw: Any, prop: PropertySpec, culture: Culture | None = None) -> Any:
    """
    Coerce a raw payload value for ``prop``.

    Collection-valued foreign keys yield a list of tokens, date properties a
    datetime (or the sentinel), everything else the declared Python type.
    File properties are bound by the binder and are not accepted here.
    """
    if prop.is_file:
        raise ValueError(f"File property '{prop.name}' cannot be coerced from a payload value")
    if raw is None:
        return None

    culture = culture or get_current_culture()
    if prop.is_foreign_key and prop.is_collection:
        return split_collection(convert(raw, str, culture, prop.name))
    if prop.is_date:
        return coerce_datetime(convert(raw, str, culture, prop.name), prop, culture)
    return convert(raw, prop.python_type, culture, prop.name)


# =============================================================================
# Formatting
# =============================================================================


def format_value(value: Any, prop: PropertySpec, culture: Culture | None = None) -> str:
    """Format a bound value as the string used in keys and display labels."""
    if value is None:
        return ""
    culture = culture or get_current_culture()

    if isinstance(value, datetime):
        if prop.type.scalar_type == ScalarType.DATE:
            fmt = prop.date_format or culture.date_format
        else:
            fmt = prop.datetime_format or culture.datetime_format
        # strftime does not pad years before 1000 on every platform
        return value.strftime(fmt.replace("%Y", f"{value.year:04d}"))
    if isinstance(value, bool):
        return culture.true_values[0] if value else culture.false_values[0]
    if isinstance(value, Decimal):
        return format(value, "f").replace(".", culture.decimal_separator)
    if isinstance(value, float):
        return str(value).replace(".", culture.decimal_separator)
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, dict):
        return json.dumps(value)
    if isinstance(value, list):
        return ",".join(format_value(v, prop, culture) for v in value)
    if prop.is_file and hasattr(value, "filename"):
        return value.filename or ""
    return str(value)
