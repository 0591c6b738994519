"""Type handlers -- one per family of loggable shapes.

Each handler answers two questions about a declared type: does it apply,
and which shape does it produce.  The classifier asks handlers in priority
order and the first match wins, so a ``@loggable`` subclass of ``list`` is
logged as a nested record rather than as a container.
"""

from __future__ import annotations

import inspect
from collections.abc import Collection, Mapping
from enum import Enum
from typing import TYPE_CHECKING, Protocol

from looplog.annotations import is_loggable
from looplog.classify.shapes import (
    ClassifiedShape,
    Container,
    CustomEncoded,
    EnumName,
    Measurement,
    NestedLoggable,
    Primitive,
    PrimitiveArray,
    PropertyBag,
    StructArray,
    StructRecord,
    Suppressed,
    Text,
    TextArray,
)
from looplog.classify.typeinfo import Declared, declare, type_name
from looplog.inspectable import Inspectable, denylisted
from looplog.measure import Measure
from looplog.primitives import ARRAY_ELIGIBLE_KINDS, KIND_BASE_TYPES, PrimitiveKind, default_kind
from looplog.structs import struct_for

if TYPE_CHECKING:
    from looplog.classify.classifier import ClassifierContext

_RAW_BYTES = (bytes, bytearray)
_NOT_CONTAINERS = (tuple, str, bytes, bytearray, Mapping)


class TypeHandler(Protocol):
    def matches(self, declared: Declared, context: ClassifierContext) -> bool: ...

    def shape_for(self, declared: Declared, context: ClassifierContext) -> ClassifiedShape: ...


# ── element helpers ──────────────────────────────────────────────


def scalar_kind(declared: Declared) -> PrimitiveKind | None:
    """Primitive kind of a plain class, honoring an explicit width marker."""
    cls = declared.plain_class
    if cls is None or issubclass(cls, Enum):
        return None
    kind = declared.kind
    if kind is None:
        if declared.kinds:
            return None  # conflicting markers
        return default_kind(cls)
    if not issubclass(cls, KIND_BASE_TYPES[kind]):
        return None
    if kind is PrimitiveKind.CHAR:
        return kind
    # bool is an int but an int is not a bool
    if kind is not PrimitiveKind.BOOLEAN and issubclass(cls, bool):
        return None
    return kind


def element_shape(tp: object) -> Primitive | Text | StructRecord | None:
    """Shape of one element of an array or container, or None if not allowed.

    Elements must be array-eligible primitives, strings or struct records.
    Nested arrays, containers and enumerations are rejected.
    """
    declared = declare(tp)
    if declared.nullable:
        return None
    cls = declared.plain_class
    if cls is None or issubclass(cls, (Enum, *_RAW_BYTES)):
        return None
    kind = scalar_kind(declared)
    if kind is not None:
        return Primitive(kind) if kind in ARRAY_ELIGIBLE_KINDS else None
    if issubclass(cls, str) and not declared.kinds:
        return Text()
    struct = struct_for(cls)
    if struct is not None:
        return StructRecord(struct)
    return None


def _array_element(declared: Declared) -> object:
    """Element type of ``tuple[X, ...]``; None for anything else."""
    if declared.origin is not tuple:
        return None
    args = declared.args
    if len(args) == 2 and args[1] is Ellipsis:
        return args[0]
    return None


def _container_origin(declared: Declared) -> type | None:
    origin = declared.origin
    if not inspect.isclass(origin):
        return None
    if not issubclass(origin, Collection) or issubclass(origin, _NOT_CONTAINERS):
        return None
    return origin


# ── handlers, in priority order ──────────────────────────────────


class LoggableTypeHandler:
    """Types carrying their own ``@loggable`` contract."""

    def matches(self, declared: Declared, context: ClassifierContext) -> bool:
        cls = declared.runtime_class
        return cls is not None and is_loggable(cls)

    def shape_for(self, declared: Declared, context: ClassifierContext) -> ClassifiedShape:
        return NestedLoggable(declared.runtime_class)


class CustomEncoderHandler:
    def matches(self, declared: Declared, context: ClassifierContext) -> bool:
        cls = declared.runtime_class
        return cls is not None and cls in context.encoders

    def shape_for(self, declared: Declared, context: ClassifierContext) -> ClassifiedShape:
        return CustomEncoded(context.encoders.get(declared.runtime_class))


class ArrayHandler:
    """``bytes``, ``bytearray`` and homogeneous ``tuple[X, ...]``."""

    def matches(self, declared: Declared, context: ClassifierContext) -> bool:
        cls = declared.plain_class
        if cls is not None:
            return issubclass(cls, _RAW_BYTES) and not declared.kinds
        element = _array_element(declared)
        return element is not None and element_shape(element) is not None

    def shape_for(self, declared: Declared, context: ClassifierContext) -> ClassifiedShape:
        if declared.plain_class is not None:
            return PrimitiveArray(PrimitiveKind.INT8)
        element = element_shape(_array_element(declared))
        if isinstance(element, Primitive):
            return PrimitiveArray(element.kind)
        if isinstance(element, StructRecord):
            return StructArray(element.struct)
        return TextArray()


class ContainerHandler:
    """Single-parameter collections such as ``list[float]`` or ``Sequence[Pose]``."""

    def matches(self, declared: Declared, context: ClassifierContext) -> bool:
        if _container_origin(declared) is None:
            return False
        args = declared.args
        return len(args) == 1 and element_shape(args[0]) is not None

    def shape_for(self, declared: Declared, context: ClassifierContext) -> ClassifiedShape:
        return Container(element_shape(declared.args[0]))


class EnumHandler:
    def matches(self, declared: Declared, context: ClassifierContext) -> bool:
        cls = declared.plain_class
        return cls is not None and issubclass(cls, Enum) and not declared.kinds

    def shape_for(self, declared: Declared, context: ClassifierContext) -> ClassifiedShape:
        return EnumName()


class MeasureHandler:
    def matches(self, declared: Declared, context: ClassifierContext) -> bool:
        cls = declared.plain_class
        return cls is not None and issubclass(cls, Measure)

    def shape_for(self, declared: Declared, context: ClassifierContext) -> ClassifiedShape:
        return Measurement()


class PrimitiveHandler:
    """Builtin scalars and strings, with optional ``Annotated`` width markers."""

    def matches(self, declared: Declared, context: ClassifierContext) -> bool:
        cls = declared.plain_class
        if cls is None:
            return False
        if scalar_kind(declared) is not None:
            return True
        return issubclass(cls, str) and not declared.kinds

    def shape_for(self, declared: Declared, context: ClassifierContext) -> ClassifiedShape:
        kind = scalar_kind(declared)
        if kind is None:
            return Text()
        return Primitive(kind)


class StructHandler:
    def matches(self, declared: Declared, context: ClassifierContext) -> bool:
        return struct_for(declared.plain_class) is not None

    def shape_for(self, declared: Declared, context: ClassifierContext) -> ClassifiedShape:
        return StructRecord(struct_for(declared.plain_class))


class InspectableHandler:
    """Self-describing objects; denylisted categories are suppressed."""

    def matches(self, declared: Declared, context: ClassifierContext) -> bool:
        cls = declared.plain_class
        return cls is not None and issubclass(cls, Inspectable)

    def shape_for(self, declared: Declared, context: ClassifierContext) -> ClassifiedShape:
        if denylisted(declared.plain_class, context.inspectable_denylist):
            return Suppressed()
        return PropertyBag()


DEFAULT_HANDLERS: tuple[TypeHandler, ...] = (
    LoggableTypeHandler(),
    CustomEncoderHandler(),
    ArrayHandler(),
    ContainerHandler(),
    EnumHandler(),
    MeasureHandler(),
    PrimitiveHandler(),
    StructHandler(),
    InspectableHandler(),
)


# ── diagnostics ──────────────────────────────────────────────────


def explain_unsupported(declared: Declared) -> str:
    """Human-readable reason no handler accepted *declared*."""
    name = type_name(declared.tp)
    if len(declared.kinds) > 1:
        kinds = ", ".join(k.value for k in declared.kinds)
        return f"conflicting primitive markers ({kinds}) on {name}"
    if declared.kind is not None:
        return f"{declared.kind.value} cannot be declared on {name}"
    if declared.origin is tuple:
        element = _array_element(declared)
        if element is None:
            return f"{name} is a fixed-size tuple; use tuple[X, ...] for arrays"
        return f"{type_name(element)} is not a valid array element in {name}"
    if _container_origin(declared) is not None:
        if len(declared.args) != 1:
            return f"{name} must have exactly one type parameter"
        return f"{type_name(declared.args[0])} is not a valid container element in {name}"
    origin = declared.origin
    if origin is not None and not inspect.isclass(origin):
        return f"{name} is not a concrete type"
    cls = declared.runtime_class
    if cls is not None and issubclass(cls, Mapping):
        return f"mappings such as {name} are not loggable"
    if cls is not None and issubclass(cls, (tuple, Collection)) and not declared.args and cls is not str:
        return f"{name} is missing its element type"
    return f"no handler accepts {name}"
