"""
Entity records.

An ``EntityRecord`` holds one ``PropertyValue`` per entity property, in
declaration order. Records are produced by ``RecordBinder``; after binding
only the key may be re-assigned (``parse_key``).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from entity_binder.runtime.config import (
    DEFAULT_SETTINGS,
    BindingSettings,
    Culture,
    get_current_culture,
)
from entity_binder.runtime.errors import KeyArityMismatchError, MissingTargetPropertyError
from entity_binder.runtime.logging import get_logger, log_with_context
from entity_binder.runtime.materialize import get_target_adapter
from entity_binder.runtime.row_formatter import DisplayFormatRowFormatter, RowFormatter
from entity_binder.runtime.values import PropertyValue, ValueState

if TYPE_CHECKING:
    from entity_binder.specs.entity import EntitySpec

logger = get_logger("Record")


class EntityRecord:
    """Bound values for one instance of an entity."""

    def __init__(
        self,
        entity: EntitySpec,
        values: list[PropertyValue],
        settings: BindingSettings = DEFAULT_SETTINGS,
        row_formatter: RowFormatter | None = None,
    ):
        if [v.property.name for v in values] != [p.name for p in entity.properties]:
            raise ValueError(
                f"Record values for '{entity.name}' must match the entity properties in order"
            )
        self.entity = entity
        self.values = values
        self.settings = settings
        self.row_formatter = row_formatter or DisplayFormatRowFormatter(settings.key_separator)

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def culture(self) -> Culture:
        return get_current_culture(default=self.settings.culture)

    @property
    def key(self) -> list[PropertyValue]:
        return [v for v in self.values if v.property.is_key]

    @property
    def concurrency_token(self) -> PropertyValue | None:
        return next((v for v in self.values if v.property.is_concurrency_check), None)

    def lookup(self, name: str) -> PropertyValue | None:
        return next((v for v in self.values if v.property.name == name), None)

    def __getitem__(self, name: str) -> PropertyValue | None:
        return self.lookup(name)

    def __len__(self) -> int:
        return len(self.values)

    @property
    def serialized_key(self) -> str:
        """Key values joined with the key separator, e.g. ``"7"`` or ``"7|2024"``."""
        return self.settings.key_separator.join(v.format(self.culture) for v in self.key)

    @property
    def serialized_key_with_names(self) -> str:
        return self.settings.key_separator.join(
            f"{v.property.name}={v.format(self.culture)}" for v in self.key
        )

    # -------------------------------------------------------------------------
    # Key Parsing
    # -------------------------------------------------------------------------

    def parse_key(self, key: str) -> None:
        """
        Assign a serialized key to the key values, positionally.

        Raises:
            KeyArityMismatchError: Segment count differs from the key property count
        """
        segments = [segment.strip() for segment in key.split(self.settings.key_separator)]
        key_values = self.key
        if len(segments) != len(key_values):
            raise KeyArityMismatchError(key, expected=len(key_values), actual=len(segments))

        for value, segment in zip(key_values, segments, strict=True):
            value.set_from_string(segment, self.culture)

    # -------------------------------------------------------------------------
    # Materialization
    # -------------------------------------------------------------------------

    def _assignable(self, value: PropertyValue) -> bool:
        prop = value.property
        if value.state not in (ValueState.VALUE, ValueState.CLEARED):
            return False
        if value.state == ValueState.VALUE and value.as_object is None:
            return False
        if prop.is_concurrency_check:
            return False
        return not prop.is_foreign_key or prop.is_system_type

    def _instance_value(self, value: PropertyValue) -> Any:
        if value.state == ValueState.CLEARED:
            return None
        prop = value.property
        raw = value.as_object
        if prop.is_file and not prop.is_file_stored_in_db and hasattr(raw, "filename"):
            return raw.filename
        return raw

    def materialize(self) -> Any:
        """
        Build an instance of the entity's target type from the bound values.

        Unset and null values, default markers, concurrency tokens and foreign
        keys to other entities are left at the target's own defaults.

        Raises:
            MissingTargetPropertyError: No target type, or the target lacks a bound property
        """
        if self.entity.target is None:
            raise MissingTargetPropertyError(self.entity.name)

        adapter = get_target_adapter(self.entity.target)
        assignments: dict[str, Any] = {}
        for value in self.values:
            if not self._assignable(value):
                continue
            name = value.property.name
            if not adapter.has_field(name):
                log_with_context(
                    logger,
                    logging.ERROR,
                    "Materialization target is missing a bound property",
                    entity=self.entity.name,
                    property=name,
                )
                raise MissingTargetPropertyError(self.entity.target, name)
            assignments[name] = self._instance_value(value)

        return adapter.build(assignments)

    # -------------------------------------------------------------------------
    # Display
    # -------------------------------------------------------------------------

    def __str__(self) -> str:
        return self.row_formatter.format(self, [v.format(self.culture) for v in self.key])

    def __repr__(self) -> str:
        return f"EntityRecord({self.entity.name}, {self.serialized_key_with_names!r})"
