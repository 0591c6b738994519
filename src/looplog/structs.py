"""Struct descriptors -- fixed-layout binary encoders attached to record types.

A type is *struct-serializable* when it exposes a class attribute named
``struct`` that satisfies the :class:`Struct` protocol.  Sinks receive the
descriptor alongside the value so that binary backends can pack it and
register its schema once.
"""

from __future__ import annotations

import inspect
import struct as _struct
from collections.abc import Sequence
from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

T = TypeVar("T")


@runtime_checkable
class Struct(Protocol[T]):
    """Binary layout for values of one record type."""

    type_name: str
    size: int
    schema: str

    def pack(self, value: T) -> bytes: ...

    def unpack(self, data: bytes) -> T: ...


class PackedStruct(Generic[T]):
    """Struct descriptor backed by a :mod:`struct` format string.

    ``fields`` is an ordered sequence of ``(attribute, format_code)`` pairs,
    e.g. ``(("x", "d"), ("y", "d"))``.  Values are little-endian.
    """

    _SCHEMA_TYPES = {
        "b": "int8",
        "h": "int16",
        "i": "int32",
        "q": "int64",
        "f": "float",
        "d": "double",
        "?": "bool",
    }

    def __init__(
        self,
        record_type: type[T],
        type_name: str,
        fields: Sequence[tuple[str, str]],
    ) -> None:
        if not fields:
            raise ValueError("PackedStruct requires at least one field")
        for name, code in fields:
            if code not in self._SCHEMA_TYPES:
                raise ValueError(f"Unsupported struct format code {code!r} for field {name!r}")
        self.record_type = record_type
        self.type_name = type_name
        self._names = tuple(name for name, _ in fields)
        self._format = _struct.Struct("<" + "".join(code for _, code in fields))
        self.size = self._format.size
        self.schema = ";".join(
            f"{self._SCHEMA_TYPES[code]} {name}" for name, code in fields
        )

    def pack(self, value: T) -> bytes:
        return self._format.pack(*(getattr(value, name) for name in self._names))

    def unpack(self, data: bytes) -> T:
        values = self._format.unpack(data)
        return self.record_type(**dict(zip(self._names, values)))

    def __repr__(self) -> str:
        return f"PackedStruct({self.type_name!r}, {self.schema!r})"


def struct_for(tp: Any) -> Struct[Any] | None:
    """Return the struct descriptor declared on *tp*, or None."""
    if not inspect.isclass(tp):
        return None
    descriptor = getattr(tp, "struct", None)
    if descriptor is not None and isinstance(descriptor, Struct):
        return descriptor
    return None
