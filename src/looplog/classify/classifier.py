"""TypeClassifier -- maps any declared type to a loggable shape.

Classification is total: every input produces either a shape or an
``Unsupported`` carrying a reason.  It never raises.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Annotated, Any

from looplog.classify.handlers import DEFAULT_HANDLERS, TypeHandler, explain_unsupported
from looplog.classify.registry import EncoderRegistry
from looplog.classify.shapes import ClassifiedShape, Unsupported
from looplog.classify.typeinfo import Declared, declare, type_name
from looplog.inspectable import DEFAULT_INSPECTABLE_DENYLIST

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassifierContext:
    """Read-only inputs shared by every handler."""

    encoders: EncoderRegistry = field(default_factory=EncoderRegistry)
    inspectable_denylist: tuple[Callable[[type], bool], ...] = DEFAULT_INSPECTABLE_DENYLIST


class TypeClassifier:
    """Asks each handler in turn; the first that matches decides the shape."""

    def __init__(
        self,
        context: ClassifierContext | None = None,
        handlers: Sequence[TypeHandler] = DEFAULT_HANDLERS,
    ) -> None:
        self.context = context or ClassifierContext()
        self.handlers = tuple(handlers)

    def classify(self, tp: Any) -> ClassifiedShape:
        """Classify a declared type. ``X | None`` classifies as ``X``."""
        return self.classify_declared(declare(tp))

    def classify_declared(self, declared: Declared) -> ClassifiedShape:
        try:
            for handler in self.handlers:
                if handler.matches(declared, self.context):
                    return handler.shape_for(declared, self.context)
            return Unsupported(explain_unsupported(declared))
        except Exception as exc:
            # issubclass() rejects some exotic classes, and metaclass hooks may raise anything
            logger.debug("Classification of %r failed: %s", declared.tp, exc)
            return Unsupported(f"{type_name(declared.tp)} cannot be inspected: {exc}")


def is_optional(tp: Any) -> bool:
    return declare(tp).nullable


def unwrap_optional(tp: Any) -> Any:
    """``X | None`` -> ``X``; anything else is returned unchanged."""
    declared = declare(tp)
    if not declared.nullable:
        return tp
    core = declared.tp
    extras = tuple(declared.kinds) + declared.metadata
    if extras:
        return Annotated[(core, *extras)]
    return core
