"""
Binder runtime.

Coercion, payload sources, records and the binder itself.
"""

from entity_binder.runtime.binder import DefaultValueResolver, RecordBinder, ValueMutator
from entity_binder.runtime.coercion import (
    DATE_SENTINEL,
    coerce,
    coerce_datetime,
    convert,
    format_value,
    split_collection,
)
from entity_binder.runtime.config import (
    BindingSettings,
    Culture,
    get_current_culture,
    load_binding_settings,
    use_culture,
)
from entity_binder.runtime.errors import (
    BindingError,
    KeyArityMismatchError,
    MissingTargetPropertyError,
    TypeConversionError,
)
from entity_binder.runtime.materialize import TargetAdapter, get_target_adapter, register_target
from entity_binder.runtime.record import EntityRecord
from entity_binder.runtime.row_formatter import DisplayFormatRowFormatter, RowFormatter
from entity_binder.runtime.sources import (
    FieldSource,
    FieldValue,
    FileSource,
    FormDataSource,
    InMemoryFile,
    MappingFieldSource,
    MappingFileSource,
    UploadedFile,
    UploadFileAdapter,
    form_sources,
)
from entity_binder.runtime.values import DataBehavior, PropertyValue, ValueBehavior, ValueState

__all__ = [
    # Binder
    "RecordBinder",
    "DefaultValueResolver",
    "ValueMutator",
    # Records
    "EntityRecord",
    "PropertyValue",
    "DataBehavior",
    "ValueState",
    "ValueBehavior",
    # Coercion
    "DATE_SENTINEL",
    "coerce",
    "coerce_datetime",
    "convert",
    "format_value",
    "split_collection",
    # Configuration
    "BindingSettings",
    "Culture",
    "get_current_culture",
    "load_binding_settings",
    "use_culture",
    # Errors
    "BindingError",
    "TypeConversionError",
    "KeyArityMismatchError",
    "MissingTargetPropertyError",
    # Materialization
    "TargetAdapter",
    "get_target_adapter",
    "register_target",
    # Display
    "RowFormatter",
    "DisplayFormatRowFormatter",
    # Payload sources
    "FieldSource",
    "FieldValue",
    "FileSource",
    "UploadedFile",
    "MappingFieldSource",
    "MappingFileSource",
    "InMemoryFile",
    "FormDataSource",
    "UploadFileAdapter",
    "form_sources",
]
