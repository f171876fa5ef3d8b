"""
Record binder - builds EntityRecords from untyped payloads.

The binder runs one linear pass over an entity's properties per call:
- Form payloads (fields + uploaded files) are coerced per property type
- Row-shaped mappings are bound as-is by storage column
- Query-like collections are bound as raw strings by property name

Binding holds no state between calls; one binder can serve concurrent
requests against the same (immutable) entity metadata.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from entity_binder.runtime.coercion import coerce_datetime, convert, split_collection
from entity_binder.runtime.config import (
    DEFAULT_SETTINGS,
    BindingSettings,
    Culture,
    get_current_culture,
)
from entity_binder.runtime.errors import TypeConversionError
from entity_binder.runtime.logging import get_logger, log_with_context
from entity_binder.runtime.record import EntityRecord
from entity_binder.runtime.row_formatter import RowFormatter
from entity_binder.runtime.sources import FieldSource, FileSource
from entity_binder.runtime.values import PropertyValue, ValueBehavior, ValueState
from entity_binder.specs.entity import EntitySpec, NameCreation, PropertySpec

logger = get_logger("Binder")

DefaultValueResolver = Callable[[PropertySpec], Any]
ValueMutator = Callable[[str | None], Any]


class RecordBinder:
    """
    Binds payloads to entity records.

    Example:
        binder = RecordBinder()
        record = binder.bind_from_form(order_entity, fields, files)
        order = record.materialize()
    """

    def __init__(
        self,
        settings: BindingSettings = DEFAULT_SETTINGS,
        row_formatter: RowFormatter | None = None,
    ):
        self.settings = settings
        self.row_formatter = row_formatter

    def _culture(self) -> Culture:
        return get_current_culture(default=self.settings.culture)

    def _record(self, entity: EntitySpec, values: list[PropertyValue]) -> EntityRecord:
        return EntityRecord(entity, values, self.settings, self.row_formatter)

    # =========================================================================
    # Form Binding
    # =========================================================================

    def bind_from_form(
        self,
        entity: EntitySpec,
        fields: FieldSource,
        files: FileSource,
        default_resolver: DefaultValueResolver | None = None,
        key: str | None = None,
    ) -> EntityRecord:
        """
        Bind a submitted form.

        Args:
            entity: Entity being bound
            fields: Submitted form fields
            files: Uploaded files
            default_resolver: Returns a default (or a ``ValueBehavior`` marker) per property
            key: Serialized key to assign after binding (edit forms)

        Returns:
            EntityRecord with one value per entity property

        Raises:
            TypeConversionError: A field value is not convertible to its property type
            KeyArityMismatchError: ``key`` does not match the entity key
        """
        culture = self._culture()
        seen_columns: set[str] = set()
        values: list[PropertyValue] = []

        for prop in entity.properties:
            value = PropertyValue(prop)
            values.append(value)
            if prop.storage_column in seen_columns:
                continue
            seen_columns.add(prop.storage_column)

            if prop.is_file:
                self._bind_file(value, fields, files, culture)
                continue

            try:
                self._bind_field(value, fields, culture)
            except TypeConversionError:
                log_with_context(
                    logger,
                    logging.ERROR,
                    "Type conversion failed",
                    entity=entity.name,
                    property=prop.name,
                    target_type=prop.python_type.__name__,
                )
                raise

            if default_resolver is not None:
                self._apply_default(value, default_resolver(prop))

        record = self._record(entity, values)
        if key is not None:
            record.parse_key(key)

        log_with_context(
            logger,
            logging.DEBUG,
            "Bound form payload",
            entity=entity.name,
            key=record.serialized_key_with_names,
        )
        return record

    def _bind_file(
        self,
        value: PropertyValue,
        fields: FieldSource,
        files: FileSource,
        culture: Culture,
    ) -> None:
        prop = value.property
        upload = files.get_file(prop.name)
        if upload is not None:
            value.set(upload)

        if not prop.is_file_stored_in_db and prop.file_name_creation == NameCreation.USER_INPUT:
            provided = fields.get_value(prop.name)
            if provided is not None:
                value.additional = provided.convert_to(str, culture)

        if upload is None or upload.content_length > 0:
            return

        delete_key = prop.name + self.settings.delete_suffix
        if delete_key not in fields.keys():
            return
        delete_field = fields.get_value(delete_key)
        if delete_field is not None and delete_field.convert_to(bool, culture):
            value.clear()

    def _bind_field(self, value: PropertyValue, fields: FieldSource, culture: Culture) -> None:
        prop = value.property
        field = fields.get_value(prop.name)
        if field is None:
            return

        if prop.is_foreign_key and prop.is_collection:
            value.values = split_collection(
                field.attempted_value, self.settings.collection_separator
            )
            value.state = ValueState.VALUE
        elif prop.is_date:
            value.set(coerce_datetime(convert(field.raw, str, culture, prop.name), prop, culture))
        else:
            value.set(convert(field.raw, prop.python_type, culture, prop.name))

    def _apply_default(self, value: PropertyValue, default: Any) -> None:
        if isinstance(default, ValueBehavior):
            value.override_with_default(default)
        elif default is not None and value.raw is None:
            value.set(default)

    # =========================================================================
    # Mapping / Query Binding
    # =========================================================================

    def bind_from_mapping(self, entity: EntitySpec, item: Mapping[str, Any]) -> EntityRecord:
        """Bind a row-shaped mapping keyed by undecorated column name."""
        values: list[PropertyValue] = []
        for prop in entity.properties:
            value = PropertyValue(prop)
            column = prop.storage_column
            if column in item:
                value.set(item[column])
            values.append(value)
        return self._record(entity, values)

    def bind_from_query(
        self,
        entity: EntitySpec,
        query: Mapping[str, Any],
        value_mutator: ValueMutator | None = None,
    ) -> EntityRecord:
        """
        Bind a flat name/value collection (query strings, filters) without coercion.

        ``value_mutator`` receives every looked-up value, including None for
        missing names.
        """
        values: list[PropertyValue] = []
        for prop in entity.properties:
            raw = query.get(prop.name)
            if value_mutator is not None:
                raw = value_mutator(raw)
            value = PropertyValue(prop)
            if raw is not None:
                value.set(raw)
            values.append(value)
        return self._record(entity, values)

    def create_empty(self, entity: EntitySpec) -> EntityRecord:
        """Record with every value unset."""
        return self.bind_from_mapping(entity, {})
