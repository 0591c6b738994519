"""Helpers for taking declared Python types apart."""

from __future__ import annotations

import inspect
import types
from dataclasses import dataclass, field
from typing import Annotated, Any, Union, get_args, get_origin

from looplog.primitives import PrimitiveKind

_NONE_TYPE = type(None)


@dataclass(frozen=True)
class Declared:
    """A declared type with ``Annotated`` metadata and ``Optional`` peeled off."""

    tp: Any
    kinds: tuple[PrimitiveKind, ...] = ()
    nullable: bool = False
    metadata: tuple[Any, ...] = field(default=(), compare=False)

    @property
    def kind(self) -> PrimitiveKind | None:
        return self.kinds[0] if len(self.kinds) == 1 else None

    @property
    def origin(self) -> Any:
        return get_origin(self.tp)

    @property
    def args(self) -> tuple[Any, ...]:
        return get_args(self.tp)

    @property
    def plain_class(self) -> type | None:
        """The type itself when it is an unparameterized class."""
        if self.origin is None and inspect.isclass(self.tp):
            return self.tp
        return None

    @property
    def runtime_class(self) -> type | None:
        """The class a value of this type is an instance of, generics included."""
        if self.plain_class is not None:
            return self.plain_class
        origin = self.origin
        if inspect.isclass(origin):
            return origin
        return None


def _is_union(tp: Any) -> bool:
    origin = get_origin(tp)
    return origin is Union or origin is getattr(types, "UnionType", None)


def declare(tp: Any) -> Declared:
    """Split *tp* into its core type, primitive width markers and nullability.

    ``X | None`` becomes ``X`` with ``nullable=True``.  Unions of more than
    one non-None member are left intact (and classify as unsupported).
    """
    kinds: list[PrimitiveKind] = []
    metadata: list[Any] = []
    nullable = False
    # Annotated and Optional can wrap each other in either order
    for _ in range(4):
        if get_origin(tp) is Annotated:
            base, *extra = get_args(tp)
            for item in extra:
                if isinstance(item, PrimitiveKind):
                    kinds.append(item)
                else:
                    metadata.append(item)
            tp = base
            continue
        if _is_union(tp):
            members = [arg for arg in get_args(tp) if arg is not _NONE_TYPE]
            if len(members) == 1 and len(members) != len(get_args(tp)):
                nullable = True
                tp = members[0]
                continue
        break
    return Declared(tp=tp, kinds=tuple(dict.fromkeys(kinds)), nullable=nullable, metadata=tuple(metadata))


def type_name(tp: Any) -> str:
    """Readable name for diagnostics."""
    if inspect.isclass(tp) and get_origin(tp) is None:
        module = tp.__module__
        if module == "builtins":
            return tp.__qualname__
        return f"{module}.{tp.__qualname__}"
    return repr(tp).replace("typing.", "")
