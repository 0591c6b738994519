"""Opt-in markers: the ``@loggable`` class decorator and the ``Log`` member marker.

Members are annotated with ``typing.Annotated`` to override their logged
name or importance::

    @loggable(importance=Importance.INFO)
    @dataclass
    class Arm:
        angle: float
        target: Annotated[float, Log(name="Target Angle", importance=Importance.CRITICAL)]
        scratch: Annotated[list[str], NOT_LOGGED]

Public properties take part too, through their return annotation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, TypeVar, overload

from looplog.importance import Importance, Strategy

C = TypeVar("C", bound=type)

LOGGABLE_ATTR = "__looplog__"


@dataclass(frozen=True)
class Log:
    """Per-member override.

    Attributes:
        name: Logged name; defaults to the attribute name.
        importance: Member tier; defaults to the class tier.  ``NONE``
            excludes the member.
    """

    name: str = ""
    importance: Importance | None = None


NOT_LOGGED = Log(importance=Importance.NONE)


@dataclass(frozen=True)
class LoggableOptions:
    strategy: Strategy = Strategy.OPT_OUT
    importance: Importance = Importance.DEBUG


@overload
def loggable(cls: C) -> C: ...


@overload
def loggable(
    *, strategy: Strategy = ..., importance: Importance = ...
) -> Callable[[C], C]: ...


def loggable(
    cls: Any = None,
    *,
    strategy: Strategy = Strategy.OPT_OUT,
    importance: Importance = Importance.DEBUG,
) -> Any:
    """Give a class a logging contract. Usable bare or with options."""
    options = LoggableOptions(strategy=strategy, importance=importance)

    def decorate(target: C) -> C:
        setattr(target, LOGGABLE_ATTR, options)
        return target

    if cls is None:
        return decorate
    return decorate(cls)


def loggable_options(cls: Any) -> LoggableOptions | None:
    options = getattr(cls, LOGGABLE_ATTR, None)
    return options if isinstance(options, LoggableOptions) else None


def is_loggable(cls: Any) -> bool:
    return loggable_options(cls) is not None
