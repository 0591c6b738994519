"""Member discovery -- turns a ``@loggable`` class into a LoggedTypeDescriptor.

Candidates are annotated attributes (dataclass fields included) followed by
public properties with a return annotation, in declaration order.  Base
classes contribute before subclasses.
"""

from __future__ import annotations

import inspect
import logging
import operator
from typing import Annotated, Any, ClassVar, get_args, get_origin, get_type_hints

from looplog.annotations import Log, LoggableOptions, loggable_options
from looplog.errors import PlanBuildError
from looplog.plan.models import LoggedTypeDescriptor, MemberDescriptor

logger = logging.getLogger(__name__)


def split_marker(hint: Any) -> tuple[Any, Log | None]:
    """Remove the ``Log`` marker from an ``Annotated`` hint.

    Other metadata (primitive width markers) stays on the returned hint.
    """
    if get_origin(hint) is not Annotated:
        return hint, None
    base, *metadata = get_args(hint)
    marker: Log | None = None
    kept: list[Any] = []
    for item in metadata:
        if isinstance(item, Log):
            marker = item
        else:
            kept.append(item)
    if marker is None:
        return hint, None
    if kept:
        return Annotated[(base, *kept)], marker
    return base, marker


def _resolve_hints(target: Any, owner: type) -> dict[str, Any]:
    try:
        return get_type_hints(target, include_extras=True)
    except (NameError, TypeError) as exc:
        raise PlanBuildError(owner, [f"cannot resolve type annotations: {exc}"]) from exc


def _is_dunder(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")


def _attribute_members(cls: type) -> list[MemberDescriptor]:
    members: list[MemberDescriptor] = []
    for name, hint in _resolve_hints(cls, cls).items():
        if _is_dunder(name):
            continue
        declared, marker = split_marker(hint)
        readable = get_origin(declared) is not ClassVar and declared is not ClassVar
        members.append(
            MemberDescriptor(
                attribute=name,
                declared_type=declared,
                accessor=operator.attrgetter(name),
                marker=marker,
                readable=readable,
            )
        )
    return members


def _property_members(cls: type, seen: set[str]) -> list[MemberDescriptor]:
    members: list[MemberDescriptor] = []
    found: dict[str, property] = {}
    for klass in reversed(cls.__mro__):
        for name, value in vars(klass).items():
            if isinstance(value, property):
                found[name] = value
            else:
                found.pop(name, None)
    for name, prop in found.items():
        if name in seen or prop.fget is None:
            continue
        hint = _resolve_hints(prop.fget, cls).get("return")
        if hint is None:
            logger.debug("Skipping property %s.%s without a return annotation", cls.__qualname__, name)
            continue
        declared, marker = split_marker(hint)
        members.append(
            MemberDescriptor(
                attribute=name,
                declared_type=declared,
                accessor=operator.attrgetter(name),
                marker=marker,
                readable=not name.startswith("_"),
            )
        )
    return members


def describe_type(cls: type, options: LoggableOptions | None = None) -> LoggedTypeDescriptor:
    """Collect the candidate members of *cls*.

    *options* defaults to the ones given to ``@loggable``; plain classes get
    the opt-out strategy at DEBUG importance.
    """
    if not inspect.isclass(cls):
        raise TypeError(f"describe_type() expects a class, got {cls!r}")
    options = options or loggable_options(cls) or LoggableOptions()
    attributes = _attribute_members(cls)
    properties = _property_members(cls, {m.attribute for m in attributes})
    return LoggedTypeDescriptor(
        logged_type=cls,
        members=tuple(attributes + properties),
        strategy=options.strategy,
        default_importance=options.importance,
    )
