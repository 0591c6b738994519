"""LoggableShape -- how a value of a declared type is written to a sink.

Shapes are frozen, hashable records.  Every shape carries a ``tag``
discriminator so diagnostics and plan dumps can name it without isinstance
checks.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal, Union

from looplog.primitives import PrimitiveKind

if TYPE_CHECKING:
    from looplog.runtime.record_logger import RecordLogger
    from looplog.structs import Struct


@dataclass(frozen=True)
class Primitive:
    kind: PrimitiveKind
    tag: Literal["primitive"] = "primitive"


@dataclass(frozen=True)
class PrimitiveArray:
    kind: PrimitiveKind
    tag: Literal["primitive_array"] = "primitive_array"


@dataclass(frozen=True)
class Text:
    tag: Literal["text"] = "text"


@dataclass(frozen=True)
class TextArray:
    tag: Literal["text_array"] = "text_array"


@dataclass(frozen=True)
class EnumName:
    """Enumeration member, written as its symbolic name."""

    tag: Literal["enum"] = "enum"


@dataclass(frozen=True)
class Measurement:
    """Dimensional quantity, written as its magnitude in the base unit."""

    tag: Literal["measurement"] = "measurement"


@dataclass(frozen=True)
class StructRecord:
    struct: Struct[Any]
    tag: Literal["struct"] = "struct"


@dataclass(frozen=True)
class StructArray:
    struct: Struct[Any]
    tag: Literal["struct_array"] = "struct_array"


@dataclass(frozen=True)
class NestedLoggable:
    """A type with its own logging contract; logged under a sub-namespace."""

    logged_type: type
    tag: Literal["nested"] = "nested"


@dataclass(frozen=True)
class CustomEncoded:
    """A type handled by a registered custom encoder."""

    encoder: RecordLogger[Any]
    tag: Literal["custom"] = "custom"


@dataclass(frozen=True)
class Container:
    """Homogeneous collection; written like an array of its element shape."""

    element: Primitive | Text | StructRecord
    tag: Literal["container"] = "container"


@dataclass(frozen=True)
class PropertyBag:
    """Inspectable object logged through a property builder."""

    tag: Literal["property_bag"] = "property_bag"


@dataclass(frozen=True)
class Suppressed:
    """Recognized but deliberately not logged. Produces no entry and no diagnostic."""

    tag: Literal["suppressed"] = "suppressed"


@dataclass(frozen=True)
class Unsupported:
    reason: str
    tag: Literal["unsupported"] = "unsupported"


LoggableShape = Union[
    Primitive,
    PrimitiveArray,
    Text,
    TextArray,
    EnumName,
    Measurement,
    StructRecord,
    StructArray,
    NestedLoggable,
    CustomEncoded,
    Container,
    PropertyBag,
    Suppressed,
]

ClassifiedShape = Union[LoggableShape, Unsupported]
