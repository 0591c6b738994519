"""CachingSink -- forwards a value only when it differs from the last one.

Keeps file size and bandwidth in check at the price of remembering the
most recent value of every identifier.  It cannot avoid the cost of reading
the value in the first place; the cheapest way to log less is to raise the
minimum importance or opt members out.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from looplog.sinks.base import DataSink

if TYPE_CHECKING:
    from looplog.structs import Struct

_MISSING = object()


class CachingSink(DataSink):
    """Change-suppressing view over a parent sink.

    Each identifier remembers ``(write kind, snapshot)``.  A write is
    suppressed when both match; arrays are snapshotted as tuples so
    element-wise equal but distinct sequences compare equal, and later
    mutation of a logged list cannot corrupt the cache.  The cache entry is
    updated only after the parent accepted the write.
    """

    def __init__(self, parent: DataSink) -> None:
        super().__init__()
        self.parent = parent
        self._previous: dict[str, tuple[str, Any]] = {}

    def cached(self) -> DataSink:
        return self

    def clear(self) -> None:
        """Forget all previous values; the next write of every identifier forwards."""
        self._previous.clear()

    def _changed(self, kind: str, identifier: str, snapshot: Any) -> bool:
        previous = self._previous.get(identifier, _MISSING)
        return previous is _MISSING or previous != (kind, snapshot)

    def _remember(self, kind: str, identifier: str, snapshot: Any) -> None:
        self._previous[identifier] = (kind, snapshot)

    def log_integer(self, identifier: str, value: int) -> None:
        if self._changed("integer", identifier, value):
            self.parent.log_integer(identifier, value)
            self._remember("integer", identifier, value)

    def log_float(self, identifier: str, value: float) -> None:
        if self._changed("float", identifier, value):
            self.parent.log_float(identifier, value)
            self._remember("float", identifier, value)

    def log_double(self, identifier: str, value: float) -> None:
        if self._changed("double", identifier, value):
            self.parent.log_double(identifier, value)
            self._remember("double", identifier, value)

    def log_boolean(self, identifier: str, value: bool) -> None:
        if self._changed("boolean", identifier, value):
            self.parent.log_boolean(identifier, value)
            self._remember("boolean", identifier, value)

    def log_string(self, identifier: str, value: str) -> None:
        if self._changed("string", identifier, value):
            self.parent.log_string(identifier, value)
            self._remember("string", identifier, value)

    def log_raw(self, identifier: str, value: bytes) -> None:
        snapshot = bytes(value)
        if self._changed("raw", identifier, snapshot):
            self.parent.log_raw(identifier, value)
            self._remember("raw", identifier, snapshot)

    def log_integer_array(self, identifier: str, value: Sequence[int]) -> None:
        snapshot = tuple(value)
        if self._changed("integer[]", identifier, snapshot):
            self.parent.log_integer_array(identifier, value)
            self._remember("integer[]", identifier, snapshot)

    def log_float_array(self, identifier: str, value: Sequence[float]) -> None:
        snapshot = tuple(value)
        if self._changed("float[]", identifier, snapshot):
            self.parent.log_float_array(identifier, value)
            self._remember("float[]", identifier, snapshot)

    def log_double_array(self, identifier: str, value: Sequence[float]) -> None:
        snapshot = tuple(value)
        if self._changed("double[]", identifier, snapshot):
            self.parent.log_double_array(identifier, value)
            self._remember("double[]", identifier, snapshot)

    def log_boolean_array(self, identifier: str, value: Sequence[bool]) -> None:
        snapshot = tuple(value)
        if self._changed("boolean[]", identifier, snapshot):
            self.parent.log_boolean_array(identifier, value)
            self._remember("boolean[]", identifier, snapshot)

    def log_string_array(self, identifier: str, value: Sequence[str]) -> None:
        snapshot = tuple(value)
        if self._changed("string[]", identifier, snapshot):
            self.parent.log_string_array(identifier, value)
            self._remember("string[]", identifier, snapshot)

    def log_struct(self, identifier: str, value: Any, struct: Struct[Any]) -> None:
        # compare packed bytes so in-place mutation of a logged record is still seen
        kind = f"struct:{struct.type_name}"
        snapshot = struct.pack(value)
        if self._changed(kind, identifier, snapshot):
            self.parent.log_struct(identifier, value, struct)
            self._remember(kind, identifier, snapshot)

    def log_struct_array(self, identifier: str, value: Sequence[Any], struct: Struct[Any]) -> None:
        kind = f"struct[]:{struct.type_name}"
        snapshot = tuple(struct.pack(item) for item in value)
        if self._changed(kind, identifier, snapshot):
            self.parent.log_struct_array(identifier, value, struct)
            self._remember(kind, identifier, snapshot)
