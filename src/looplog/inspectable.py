"""Inspectable objects -- types that describe their own properties.

An inspectable object implements ``init_inspectable(builder)`` and registers
getters for the properties it wants to expose.  The logger calls
``init_inspectable`` once per object and then replays the registered getters
on every tick.

Two categories of inspectable objects are recognized but never logged:
scheduled actions and subsystems.  Both tend to be present on every control
object and would otherwise flood the log.  The categories are plain
predicates so hosts can supply their own (see ``ClassifierContext``).
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from looplog.sinks.base import DataSink

Getter = Callable[[], Any]
Setter = Callable[[Any], None]


@runtime_checkable
class Inspectable(Protocol):
    def init_inspectable(self, builder: PropertyBuilder) -> None: ...


@runtime_checkable
class Action(Protocol):
    """A schedulable unit of work (command-style object)."""

    def initialize(self) -> None: ...

    def execute(self) -> None: ...

    def end(self, interrupted: bool) -> None: ...

    def is_finished(self) -> bool: ...


@runtime_checkable
class Subsystem(Protocol):
    """A stateful mechanism that runs its own periodic hook."""

    def periodic(self) -> None: ...


def is_action(tp: type) -> bool:
    return inspect.isclass(tp) and issubclass(tp, Action)


def is_subsystem(tp: type) -> bool:
    return inspect.isclass(tp) and issubclass(tp, Subsystem)


DEFAULT_INSPECTABLE_DENYLIST: tuple[Callable[[type], bool], ...] = (is_action, is_subsystem)


class PropertyBuilder(Protocol):
    """Surface handed to ``Inspectable.init_inspectable``.

    Setters are accepted for API compatibility with interactive dashboards
    and are ignored by log-backed builders.
    """

    def set_type_name(self, name: str) -> None: ...

    def add_boolean_property(self, key: str, getter: Getter | None, setter: Setter | None = None) -> None: ...

    def add_integer_property(self, key: str, getter: Getter | None, setter: Setter | None = None) -> None: ...

    def add_float_property(self, key: str, getter: Getter | None, setter: Setter | None = None) -> None: ...

    def add_double_property(self, key: str, getter: Getter | None, setter: Setter | None = None) -> None: ...

    def add_string_property(self, key: str, getter: Getter | None, setter: Setter | None = None) -> None: ...

    def add_boolean_array_property(self, key: str, getter: Getter | None, setter: Setter | None = None) -> None: ...

    def add_integer_array_property(self, key: str, getter: Getter | None, setter: Setter | None = None) -> None: ...

    def add_double_array_property(self, key: str, getter: Getter | None, setter: Setter | None = None) -> None: ...

    def add_string_array_property(self, key: str, getter: Getter | None, setter: Setter | None = None) -> None: ...


class SinkBackedPropertyBuilder:
    """PropertyBuilder that replays registered getters into a DataSink."""

    def __init__(self, sink: DataSink) -> None:
        self.sink = sink
        self._updates: list[Callable[[], None]] = []

    def _add(self, write: Callable[[str, Any], None], key: str, getter: Getter | None) -> None:
        if getter is None:
            return
        self._updates.append(lambda: write(key, getter()))

    def set_type_name(self, name: str) -> None:
        self.sink.log_string(".type", name)

    def add_boolean_property(self, key: str, getter: Getter | None, setter: Setter | None = None) -> None:
        self._add(self.sink.log_boolean, key, getter)

    def add_integer_property(self, key: str, getter: Getter | None, setter: Setter | None = None) -> None:
        self._add(self.sink.log_integer, key, getter)

    def add_float_property(self, key: str, getter: Getter | None, setter: Setter | None = None) -> None:
        self._add(self.sink.log_float, key, getter)

    def add_double_property(self, key: str, getter: Getter | None, setter: Setter | None = None) -> None:
        self._add(self.sink.log_double, key, getter)

    def add_string_property(self, key: str, getter: Getter | None, setter: Setter | None = None) -> None:
        self._add(self.sink.log_string, key, getter)

    def add_boolean_array_property(self, key: str, getter: Getter | None, setter: Setter | None = None) -> None:
        self._add(self.sink.log_boolean_array, key, getter)

    def add_integer_array_property(self, key: str, getter: Getter | None, setter: Setter | None = None) -> None:
        self._add(self.sink.log_integer_array, key, getter)

    def add_double_array_property(self, key: str, getter: Getter | None, setter: Setter | None = None) -> None:
        self._add(self.sink.log_double_array, key, getter)

    def add_string_array_property(self, key: str, getter: Getter | None, setter: Setter | None = None) -> None:
        self._add(self.sink.log_string_array, key, getter)

    @property
    def property_count(self) -> int:
        return len(self._updates)

    def update(self) -> None:
        for update in self._updates:
            update()


def denylisted(tp: type, predicates: Sequence[Callable[[type], bool]]) -> bool:
    return any(predicate(tp) for predicate in predicates)
