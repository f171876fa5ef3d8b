"""
Entity metadata type definitions.

This module exports all specification types the binder is driven by.
"""

from entity_binder.specs.entity import (
    EntitySpec,
    FieldType,
    FileFieldConfig,
    FileStorage,
    NameCreation,
    PropertySpec,
    ScalarType,
    scalar,
    undecorate,
)

__all__ = [
    "EntitySpec",
    "PropertySpec",
    "FieldType",
    "ScalarType",
    "FileFieldConfig",
    "FileStorage",
    "NameCreation",
    "scalar",
    "undecorate",
]
