"""
Payload sources consumed by the record binder.

The binder only needs narrow capabilities from a transport: field lookup by
name, enumeration of field names and uploaded-file lookup. Any object
satisfying ``FieldSource`` / ``FileSource`` can be bound, whether it wraps an
HTTP form, a test fixture or a plain dict.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from io import BytesIO
from typing import TYPE_CHECKING, Any, BinaryIO, Protocol, runtime_checkable

from entity_binder.runtime.coercion import convert
from entity_binder.runtime.config import Culture

if TYPE_CHECKING:
    from starlette.datastructures import FormData, UploadFile


# =============================================================================
# Field Values
# =============================================================================


@dataclass(frozen=True)
class FieldValue:
    """One submitted field: the raw value and its string form."""

    raw: Any
    attempted_value: str

    def convert_to(self, target_type: type, culture: Culture | None = None) -> Any:
        return convert(self.raw, target_type, culture)

    @classmethod
    def of(cls, raw: Any, separator: str = ",") -> FieldValue:
        if isinstance(raw, list | tuple):
            attempted = separator.join("" if v is None else str(v) for v in raw)
        else:
            attempted = "" if raw is None else str(raw)
        return cls(raw=raw, attempted_value=attempted)


# =============================================================================
# Protocols
# =============================================================================


@runtime_checkable
class FieldSource(Protocol):
    """Form-like collection of submitted fields."""

    def get_value(self, name: str) -> FieldValue | None: ...

    def keys(self) -> Iterable[str]: ...


@runtime_checkable
class UploadedFile(Protocol):
    """An uploaded file. The binder reads only its name and length."""

    @property
    def filename(self) -> str: ...

    @property
    def content_length(self) -> int: ...

    @property
    def stream(self) -> BinaryIO: ...


@runtime_checkable
class FileSource(Protocol):
    """Collection of uploaded files keyed by field name."""

    def get_file(self, name: str) -> UploadedFile | None: ...


# =============================================================================
# Mapping Adapters
# =============================================================================


class MappingFieldSource:
    """Field source over a plain mapping; list values are multi-valued fields."""

    def __init__(self, data: Mapping[str, Any] | None = None):
        self._data = dict(data or {})

    def get_value(self, name: str) -> FieldValue | None:
        if name not in self._data:
            return None
        return FieldValue.of(self._data[name])

    def keys(self) -> Iterable[str]:
        return self._data.keys()


@dataclass
class InMemoryFile:
    """Uploaded file held in memory."""

    filename: str
    content: bytes = b""
    stream: BinaryIO = field(init=False)

    def __post_init__(self) -> None:
        self.stream = BytesIO(self.content)

    @property
    def content_length(self) -> int:
        return len(self.content)


class MappingFileSource:
    """File source over a plain mapping of field name to uploaded file."""

    def __init__(self, files: Mapping[str, UploadedFile] | None = None):
        self._files = dict(files or {})

    def get_file(self, name: str) -> UploadedFile | None:
        return self._files.get(name)


# =============================================================================
# Starlette Adapters
# =============================================================================


class UploadFileAdapter:
    """Exposes a Starlette ``UploadFile`` as an ``UploadedFile``."""

    def __init__(self, upload: UploadFile):
        self.upload = upload

    @property
    def filename(self) -> str:
        return self.upload.filename or ""

    @property
    def content_length(self) -> int:
        return self.upload.size or 0

    @property
    def stream(self) -> BinaryIO:
        return self.upload.file


class FormDataSource:
    """
    Field and file source over a parsed Starlette ``FormData``.

    Repeated fields (multi-selects) are multi-valued; file parts are only
    visible through ``get_file``.
    """

    def __init__(self, form: FormData):
        self._form = form

    def _values(self, name: str) -> list[Any]:
        return [v for v in self._form.getlist(name) if isinstance(v, str)]

    def get_value(self, name: str) -> FieldValue | None:
        values = self._values(name)
        if not values:
            return None
        return FieldValue.of(values if len(values) > 1 else values[0])

    def keys(self) -> Iterable[str]:
        return [k for k in self._form.keys() if self._values(k)]

    def get_file(self, name: str) -> UploadedFile | None:
        for value in self._form.getlist(name):
            if not isinstance(value, str):
                return UploadFileAdapter(value)
        return None


def form_sources(form: FormData) -> tuple[FieldSource, FileSource]:
    """Field and file sources for one parsed request form."""
    source = FormDataSource(form)
    return source, source
