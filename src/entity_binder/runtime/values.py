"""
Bound property values.

A ``PropertyValue`` carries an explicit ``ValueState`` instead of overloading
the raw slot, so "never bound", "bound to None", "cleared" and "replaced by a
default marker" stay distinguishable.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from entity_binder.runtime.coercion import coerce, format_value
from entity_binder.runtime.config import Culture
from entity_binder.specs.entity import PropertySpec


class DataBehavior(StrEnum):
    """What the persistence layer should do with a value."""

    NORMAL = "normal"
    CLEAR = "clear"
    USE_DEFAULT = "use_default"


class ValueState(StrEnum):
    """Which slot of the tagged value is populated."""

    UNSET = "unset"
    VALUE = "value"
    CLEARED = "cleared"
    DEFAULT_OVERRIDE = "default_override"


class ValueBehavior(StrEnum):
    """
    Default markers a default resolver can return.

    A marker always overrides the submitted value and is evaluated when the
    record is persisted, never assigned on materialization.
    """

    NOW = "now"
    UTC_NOW = "utc_now"
    NEW_GUID = "new_guid"


@dataclass
class PropertyValue:
    """One bound value for one property of a record."""

    property: PropertySpec
    raw: Any = None
    values: list[Any] | None = None
    additional: str | None = None
    behavior: DataBehavior = DataBehavior.NORMAL
    state: ValueState = ValueState.UNSET

    def set(self, value: Any) -> None:
        self.raw = value
        self.state = ValueState.VALUE

    def clear(self) -> None:
        self.behavior = DataBehavior.CLEAR
        self.state = ValueState.CLEARED
        self.additional = None

    def override_with_default(self, marker: ValueBehavior) -> None:
        self.raw = marker
        self.behavior = DataBehavior.USE_DEFAULT
        self.state = ValueState.DEFAULT_OVERRIDE

    def set_from_string(self, text: str, culture: Culture | None = None) -> None:
        """Assign a value parsed from its string form (used when parsing keys)."""
        self.set(coerce(text, self.property, culture))

    @property
    def is_set(self) -> bool:
        return self.state != ValueState.UNSET

    @property
    def as_object(self) -> Any:
        if self.values is not None:
            return self.values
        return self.raw

    @property
    def as_string(self) -> str:
        return self.format()

    def format(self, culture: Culture | None = None) -> str:
        if isinstance(self.raw, ValueBehavior):
            return self.raw.value
        return format_value(self.as_object, self.property, culture)

    def __repr__(self) -> str:
        return f"PropertyValue({self.property.name}={self.as_object!r}, {self.state.value})"
