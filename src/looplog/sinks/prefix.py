"""PrefixSink -- namespaced view over a parent sink."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from looplog.sinks.base import DataSink, normalize_path

if TYPE_CHECKING:
    from looplog.structs import Struct


class PrefixSink(DataSink):
    """Rewrites every identifier to ``prefix/identifier`` before forwarding.

    Sub-sinks are resolved against the parent with the composed prefix, so
    ``s.get_sub_sink("A").get_sub_sink("B")`` is the same object as
    ``s.get_sub_sink("A/B")`` and chains never grow deeper than one wrapper.
    """

    def __init__(self, parent: DataSink, prefix: str) -> None:
        super().__init__()
        prefix = normalize_path(prefix)
        if not prefix:
            raise ValueError("PrefixSink requires a non-empty prefix")
        self.parent = parent
        self.prefix = prefix

    def _qualify(self, identifier: str) -> str:
        return f"{self.prefix}/{identifier}"

    def get_sub_sink(self, path: str) -> DataSink:
        key = normalize_path(path)
        if not key:
            return self
        return self.parent.get_sub_sink(self._qualify(key))

    def log_integer(self, identifier: str, value: int) -> None:
        self.parent.log_integer(self._qualify(identifier), value)

    def log_float(self, identifier: str, value: float) -> None:
        self.parent.log_float(self._qualify(identifier), value)

    def log_double(self, identifier: str, value: float) -> None:
        self.parent.log_double(self._qualify(identifier), value)

    def log_boolean(self, identifier: str, value: bool) -> None:
        self.parent.log_boolean(self._qualify(identifier), value)

    def log_string(self, identifier: str, value: str) -> None:
        self.parent.log_string(self._qualify(identifier), value)

    def log_raw(self, identifier: str, value: bytes) -> None:
        self.parent.log_raw(self._qualify(identifier), value)

    def log_integer_array(self, identifier: str, value: Sequence[int]) -> None:
        self.parent.log_integer_array(self._qualify(identifier), value)

    def log_float_array(self, identifier: str, value: Sequence[float]) -> None:
        self.parent.log_float_array(self._qualify(identifier), value)

    def log_double_array(self, identifier: str, value: Sequence[float]) -> None:
        self.parent.log_double_array(self._qualify(identifier), value)

    def log_boolean_array(self, identifier: str, value: Sequence[bool]) -> None:
        self.parent.log_boolean_array(self._qualify(identifier), value)

    def log_string_array(self, identifier: str, value: Sequence[str]) -> None:
        self.parent.log_string_array(self._qualify(identifier), value)

    def log_struct(self, identifier: str, value: Any, struct: Struct[Any]) -> None:
        self.parent.log_struct(self._qualify(identifier), value, struct)

    def log_struct_array(self, identifier: str, value: Sequence[Any], struct: Struct[Any]) -> None:
        self.parent.log_struct_array(self._qualify(identifier), value, struct)

    def __repr__(self) -> str:
        return f"PrefixSink({self.prefix!r}, parent={type(self.parent).__name__})"
