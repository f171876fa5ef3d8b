"""
Binding errors.

Malformed dates and collection strings never raise; they are signalled with
sentinel values. Everything below is fatal to the current call.
"""

from __future__ import annotations

from typing import Any


class BindingError(Exception):
    """Base exception for record binding errors."""

    pass


class TypeConversionError(BindingError):
    """Raised when a payload value cannot be converted to a property's declared type."""

    def __init__(
        self,
        value: Any,
        target_type: type,
        property_name: str | None = None,
        message: str | None = None,
    ):
        self.value = value
        self.target_type = target_type
        self.property_name = property_name
        if message:
            super().__init__(message)
        elif property_name:
            super().__init__(
                f"Cannot convert {value!r} to {target_type.__name__} for property '{property_name}'"
            )
        else:
            super().__init__(f"Cannot convert {value!r} to {target_type.__name__}")


class KeyArityMismatchError(BindingError):
    """Raised when a serialized key has a different number of segments than the entity key."""

    def __init__(self, key: str, expected: int, actual: int):
        self.key = key
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Key '{key}' has {actual} segment(s) but the entity key has {expected} propert"
            f"{'y' if expected == 1 else 'ies'}"
        )


class MissingTargetPropertyError(BindingError):
    """Raised when a materialization target has no field for a bound property."""

    def __init__(self, target: Any, property_name: str | None = None):
        self.target = target
        self.property_name = property_name
        target_name = getattr(target, "__name__", repr(target))
        if property_name is None:
            super().__init__(f"No materialization target for entity ({target_name})")
        else:
            super().__init__(f"Target type '{target_name}' has no field '{property_name}'")
