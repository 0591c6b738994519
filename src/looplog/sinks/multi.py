"""MultiSink -- fan-out to several sinks at once."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any

from looplog.sinks.base import DataSink, normalize_path

if TYPE_CHECKING:
    from looplog.structs import Struct


class MultiSink(DataSink):
    """Forwards every write to each child, in the order given.

    Useful for simultaneous logging to a persistent store and a live
    dashboard.  Sub-sinks fan out too: ``get_sub_sink(path)`` is a MultiSink
    over each child's own sub-sink for *path*.
    """

    def __init__(self, *sinks: DataSink) -> None:
        super().__init__()
        self.sinks: tuple[DataSink, ...] = tuple(sinks)

    @classmethod
    def of(cls, sinks: Iterable[DataSink]) -> MultiSink:
        return cls(*sinks)

    def get_sub_sink(self, path: str) -> DataSink:
        key = normalize_path(path)
        if not key:
            return self
        sub = self._sub_sinks.get(key)
        if sub is None:
            sub = MultiSink(*(sink.get_sub_sink(key) for sink in self.sinks))
            self._sub_sinks[key] = sub
        return sub

    def log_integer(self, identifier: str, value: int) -> None:
        for sink in self.sinks:
            sink.log_integer(identifier, value)

    def log_float(self, identifier: str, value: float) -> None:
        for sink in self.sinks:
            sink.log_float(identifier, value)

    def log_double(self, identifier: str, value: float) -> None:
        for sink in self.sinks:
            sink.log_double(identifier, value)

    def log_boolean(self, identifier: str, value: bool) -> None:
        for sink in self.sinks:
            sink.log_boolean(identifier, value)

    def log_string(self, identifier: str, value: str) -> None:
        for sink in self.sinks:
            sink.log_string(identifier, value)

    def log_raw(self, identifier: str, value: bytes) -> None:
        for sink in self.sinks:
            sink.log_raw(identifier, value)

    def log_integer_array(self, identifier: str, value: Sequence[int]) -> None:
        for sink in self.sinks:
            sink.log_integer_array(identifier, value)

    def log_float_array(self, identifier: str, value: Sequence[float]) -> None:
        for sink in self.sinks:
            sink.log_float_array(identifier, value)

    def log_double_array(self, identifier: str, value: Sequence[float]) -> None:
        for sink in self.sinks:
            sink.log_double_array(identifier, value)

    def log_boolean_array(self, identifier: str, value: Sequence[bool]) -> None:
        for sink in self.sinks:
            sink.log_boolean_array(identifier, value)

    def log_string_array(self, identifier: str, value: Sequence[str]) -> None:
        for sink in self.sinks:
            sink.log_string_array(identifier, value)

    def log_struct(self, identifier: str, value: Any, struct: Struct[Any]) -> None:
        for sink in self.sinks:
            sink.log_struct(identifier, value, struct)

    def log_struct_array(self, identifier: str, value: Sequence[Any], struct: Struct[Any]) -> None:
        for sink in self.sinks:
            sink.log_struct_array(identifier, value, struct)
