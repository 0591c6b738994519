"""Primitive value kinds and the ``Annotated`` aliases that declare them.

Python has one ``int`` and one ``float``; narrower on-the-wire widths are
declared by annotating a member with one of the aliases below::

    @loggable
    @dataclass
    class Encoder:
        ticks: Int32
        rate: Float32
        raw: bytes
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated


class PrimitiveKind(str, Enum):
    INT8 = "int8"
    INT16 = "int16"
    CHAR = "char"
    INT32 = "int32"
    INT64 = "int64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    BOOLEAN = "boolean"


# Kinds that may appear as the element of an array or a container.
# INT16 and CHAR are scalar-only.
ARRAY_ELIGIBLE_KINDS = frozenset({
    PrimitiveKind.INT8,
    PrimitiveKind.INT32,
    PrimitiveKind.INT64,
    PrimitiveKind.FLOAT32,
    PrimitiveKind.FLOAT64,
    PrimitiveKind.BOOLEAN,
})

# Python base type each kind must be declared on.
KIND_BASE_TYPES: dict[PrimitiveKind, type] = {
    PrimitiveKind.INT8: int,
    PrimitiveKind.INT16: int,
    PrimitiveKind.CHAR: str,
    PrimitiveKind.INT32: int,
    PrimitiveKind.INT64: int,
    PrimitiveKind.FLOAT32: float,
    PrimitiveKind.FLOAT64: float,
    PrimitiveKind.BOOLEAN: bool,
}

INTEGER_KINDS = frozenset({
    PrimitiveKind.INT8,
    PrimitiveKind.INT16,
    PrimitiveKind.INT32,
    PrimitiveKind.INT64,
})

Int8 = Annotated[int, PrimitiveKind.INT8]
Int16 = Annotated[int, PrimitiveKind.INT16]
Int32 = Annotated[int, PrimitiveKind.INT32]
Int64 = Annotated[int, PrimitiveKind.INT64]
Float32 = Annotated[float, PrimitiveKind.FLOAT32]
Float64 = Annotated[float, PrimitiveKind.FLOAT64]
Char = Annotated[str, PrimitiveKind.CHAR]


def default_kind(tp: type) -> PrimitiveKind | None:
    """Kind used for an unannotated builtin, or None for non-primitives."""
    # bool is a subclass of int, so it must be checked first
    if issubclass(tp, bool):
        return PrimitiveKind.BOOLEAN
    if issubclass(tp, int):
        return PrimitiveKind.INT64
    if issubclass(tp, float):
        return PrimitiveKind.FLOAT64
    return None
