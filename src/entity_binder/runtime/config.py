"""
Binding configuration.

Settings are read from the ``[binding]`` table of a TOML file (usually
``binding.toml`` or the project's own config file). The culture used for
conversions is held per context so concurrent requests can bind with
different cultures.
"""

from __future__ import annotations

import contextvars
import tomllib
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# =============================================================================
# Culture
# =============================================================================


class Culture(BaseModel):
    """Formatting conventions used to convert and format payload values."""

    decimal_separator: str = "."
    group_separator: str = ","
    datetime_format: str = "%Y-%m-%d %H:%M"
    date_format: str = "%Y-%m-%d"
    true_values: tuple[str, ...] = ("true", "on", "yes", "1")
    false_values: tuple[str, ...] = ("false", "off", "no", "0")

    model_config = ConfigDict(frozen=True)

    @field_validator("decimal_separator")
    @classmethod
    def validate_decimal_separator(cls, v: str) -> str:
        if len(v) != 1:
            raise ValueError("decimal_separator must be a single character")
        return v


INVARIANT_CULTURE = Culture()

_current_culture: contextvars.ContextVar[Culture | None] = contextvars.ContextVar(
    "current_culture", default=None
)


def get_current_culture(default: Culture | None = None) -> Culture:
    """Get the culture scoped with ``use_culture``, else ``default`` or the invariant culture."""
    return _current_culture.get() or default or INVARIANT_CULTURE


@contextmanager
def use_culture(culture: Culture) -> Iterator[Culture]:
    """Bind with ``culture`` for the duration of the block."""
    token = _current_culture.set(culture)
    try:
        yield culture
    finally:
        _current_culture.reset(token)


# =============================================================================
# Binding Settings
# =============================================================================


class BindingSettings(BaseModel):
    """Binder-wide settings."""

    key_separator: str = Field(default="|", description="Separator of serialized key segments")
    collection_separator: str = Field(
        default=",", description="Separator of multi-valued foreign key payloads"
    )
    delete_suffix: str = Field(
        default="_delete", description="Suffix of the companion field that deletes a file"
    )
    culture: Culture = Field(default_factory=Culture)

    model_config = ConfigDict(frozen=True)

    @field_validator("key_separator", "collection_separator")
    @classmethod
    def validate_separator(cls, v: str) -> str:
        if len(v) != 1:
            raise ValueError("Separators must be a single character")
        return v


DEFAULT_SETTINGS = BindingSettings()


def load_binding_settings(toml_path: Path) -> BindingSettings:
    """
    Load binding settings from a TOML file.

    Args:
        toml_path: Path to the TOML file

    Returns:
        BindingSettings with values from the ``[binding]`` table or defaults
    """
    if not toml_path.exists():
        return BindingSettings()

    with open(toml_path, "rb") as f:
        data = tomllib.load(f)

    section: dict[str, Any] = data.get("binding", {})
    if not section:
        return BindingSettings()

    return BindingSettings.model_validate(section)
