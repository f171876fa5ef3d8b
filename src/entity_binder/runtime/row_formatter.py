"""Display labels for bound records."""

from __future__ import annotations

import string
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from entity_binder.runtime.record import EntityRecord


class RowFormatter(Protocol):
    """Renders a record into a human-readable label."""

    def format(self, record: EntityRecord, key_values: list[str]) -> str: ...


class DisplayFormatRowFormatter:
    """
    Fills the entity's ``display_format`` with the record's values.

    ``"{FirstName} {LastName}"`` renders the two properties' string forms.
    Without a display format the label is ``"<entity label> #<key>"``.
    Unknown placeholders render empty.
    """

    def __init__(self, key_separator: str = "|"):
        self.key_separator = key_separator

    def format(self, record: EntityRecord, key_values: list[str]) -> str:
        entity = record.entity
        if entity.display_format:
            names = {
                field_name
                for _, field_name, _, _ in string.Formatter().parse(entity.display_format)
                if field_name
            }
            values = {}
            for name in names:
                value = record.lookup(name)
                values[name] = value.format(record.culture) if value is not None else ""
            return entity.display_format.format_map(values)
        return f"{entity.display_label} #{self.key_separator.join(key_values)}"
