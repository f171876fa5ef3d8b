"""
Entity Binder - typed records from untyped payloads.

This package provides:
- Specs: entity and property metadata (pydantic models)
- RecordBinder: binds form fields, uploaded files, rows and query values
- EntityRecord: key handling, concurrency token access and materialization
"""

from entity_binder._version import get_version as _get_version

__version__ = _get_version()

from entity_binder.runtime.binder import RecordBinder  # noqa: E402
from entity_binder.runtime.record import EntityRecord  # noqa: E402
from entity_binder.specs.entity import EntitySpec, PropertySpec  # noqa: E402

__all__ = ["EntityRecord", "EntitySpec", "PropertySpec", "RecordBinder"]
