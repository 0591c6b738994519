"""In-memory sink that records every write, for tests and diagnostics."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from looplog.sinks.base import DataSink

if TYPE_CHECKING:
    from looplog.structs import Struct


@dataclass(frozen=True)
class LogEntry:
    identifier: str
    value: Any


class RecordingSink(DataSink):
    """Test-friendly sink that stores ``LogEntry(identifier, value)`` in order.

    Sequences are recorded as lists so assertions can compare against list
    literals regardless of the sequence type that was written.
    """

    def __init__(self) -> None:
        super().__init__()
        self.entries: list[LogEntry] = []

    def _record(self, identifier: str, value: Any) -> None:
        self.entries.append(LogEntry(identifier, value))

    def identifiers(self) -> list[str]:
        return [entry.identifier for entry in self.entries]

    def last(self, identifier: str) -> Any:
        """Most recent value written under *identifier*."""
        for entry in reversed(self.entries):
            if entry.identifier == identifier:
                return entry.value
        raise KeyError(identifier)

    def clear(self) -> None:
        self.entries.clear()

    def log_integer(self, identifier: str, value: int) -> None:
        self._record(identifier, value)

    def log_float(self, identifier: str, value: float) -> None:
        self._record(identifier, value)

    def log_double(self, identifier: str, value: float) -> None:
        self._record(identifier, value)

    def log_boolean(self, identifier: str, value: bool) -> None:
        self._record(identifier, value)

    def log_string(self, identifier: str, value: str) -> None:
        self._record(identifier, value)

    def log_raw(self, identifier: str, value: bytes) -> None:
        self._record(identifier, bytes(value))

    def log_integer_array(self, identifier: str, value: Sequence[int]) -> None:
        self._record(identifier, list(value))

    def log_float_array(self, identifier: str, value: Sequence[float]) -> None:
        self._record(identifier, list(value))

    def log_double_array(self, identifier: str, value: Sequence[float]) -> None:
        self._record(identifier, list(value))

    def log_boolean_array(self, identifier: str, value: Sequence[bool]) -> None:
        self._record(identifier, list(value))

    def log_string_array(self, identifier: str, value: Sequence[str]) -> None:
        self._record(identifier, list(value))

    def log_struct(self, identifier: str, value: Any, struct: Struct[Any]) -> None:
        self._record(identifier, value)

    def log_struct_array(self, identifier: str, value: Sequence[Any], struct: Struct[Any]) -> None:
        self._record(identifier, list(value))
