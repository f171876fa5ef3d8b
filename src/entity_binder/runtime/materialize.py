"""
Materialization targets.

Each target class gets a field-setter table: the field names it accepts and a
constructor that applies them. Tables are derived once per class for pydantic
models, dataclasses and plain annotated classes, or registered explicitly with
``register_target``.
"""

from __future__ import annotations

import dataclasses
import threading
from collections.abc import Callable
from dataclasses import dataclass
from functools import cache
from typing import Any

from pydantic import BaseModel


@dataclass(frozen=True)
class TargetAdapter:
    """Field-setter table for one target class."""

    target: type
    fields: frozenset[str]
    build: Callable[[dict[str, Any]], Any]

    def has_field(self, name: str) -> bool:
        return name in self.fields


def _pydantic_adapter(target: type[BaseModel]) -> TargetAdapter:
    return TargetAdapter(
        target=target,
        fields=frozenset(target.model_fields),
        build=target.model_validate,
    )


def _dataclass_adapter(target: type) -> TargetAdapter:
    names = frozenset(f.name for f in dataclasses.fields(target) if f.init)
    return TargetAdapter(target=target, fields=names, build=lambda values: target(**values))


def _plain_adapter(target: type) -> TargetAdapter:
    names: set[str] = set()
    for klass in reversed(target.__mro__):
        names.update(getattr(klass, "__annotations__", {}))

    def build(values: dict[str, Any]) -> Any:
        instance = target()
        for name, value in values.items():
            setattr(instance, name, value)
        return instance

    return TargetAdapter(target=target, fields=frozenset(names), build=build)


@cache
def _derive_adapter(target: type) -> TargetAdapter:
    if isinstance(target, type) and issubclass(target, BaseModel):
        return _pydantic_adapter(target)
    if dataclasses.is_dataclass(target):
        return _dataclass_adapter(target)
    return _plain_adapter(target)


_registry: dict[type, TargetAdapter] = {}
_registry_lock = threading.Lock()


def register_target(
    target: type,
    fields: set[str] | frozenset[str],
    build: Callable[[dict[str, Any]], Any],
) -> TargetAdapter:
    """Register an explicit field-setter table for ``target``."""
    adapter = TargetAdapter(target=target, fields=frozenset(fields), build=build)
    with _registry_lock:
        _registry[target] = adapter
    return adapter


def get_target_adapter(target: type) -> TargetAdapter:
    """Registered table for ``target``, or one derived from its declared fields."""
    adapter = _registry.get(target)
    if adapter is not None:
        return adapter
    return _derive_adapter(target)
