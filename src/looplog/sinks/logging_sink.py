"""Sink that emits writes through Python logging."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from looplog.sinks.base import DataSink

if TYPE_CHECKING:
    from looplog.structs import Struct


class LoggingSink(DataSink):
    """Emits one structured log record per write.

    The identifier, value and write kind travel in ``extra`` so that a JSON
    formatter (or any handler reading record attributes) can reconstruct
    the stream.  Struct values are emitted as their packed bytes in hex.
    """

    def __init__(self, logger_name: str = "looplog.data", level: int = logging.DEBUG) -> None:
        super().__init__()
        self.logger = logging.getLogger(logger_name)
        self.level = level

    def _emit(self, kind: str, identifier: str, value: Any) -> None:
        if not self.logger.isEnabledFor(self.level):
            return
        self.logger.log(
            self.level,
            "telemetry_write",
            extra={
                "telemetry_identifier": identifier,
                "telemetry_kind": kind,
                "telemetry_value": value,
            },
        )

    def log_integer(self, identifier: str, value: int) -> None:
        self._emit("integer", identifier, value)

    def log_float(self, identifier: str, value: float) -> None:
        self._emit("float", identifier, value)

    def log_double(self, identifier: str, value: float) -> None:
        self._emit("double", identifier, value)

    def log_boolean(self, identifier: str, value: bool) -> None:
        self._emit("boolean", identifier, value)

    def log_string(self, identifier: str, value: str) -> None:
        self._emit("string", identifier, value)

    def log_raw(self, identifier: str, value: bytes) -> None:
        self._emit("raw", identifier, bytes(value).hex())

    def log_integer_array(self, identifier: str, value: Sequence[int]) -> None:
        self._emit("integer[]", identifier, list(value))

    def log_float_array(self, identifier: str, value: Sequence[float]) -> None:
        self._emit("float[]", identifier, list(value))

    def log_double_array(self, identifier: str, value: Sequence[float]) -> None:
        self._emit("double[]", identifier, list(value))

    def log_boolean_array(self, identifier: str, value: Sequence[bool]) -> None:
        self._emit("boolean[]", identifier, list(value))

    def log_string_array(self, identifier: str, value: Sequence[str]) -> None:
        self._emit("string[]", identifier, list(value))

    def log_struct(self, identifier: str, value: Any, struct: Struct[Any]) -> None:
        self._emit(f"struct:{struct.type_name}", identifier, struct.pack(value).hex())

    def log_struct_array(self, identifier: str, value: Sequence[Any], struct: Struct[Any]) -> None:
        self._emit(
            f"struct[]:{struct.type_name}",
            identifier,
            [struct.pack(item).hex() for item in value],
        )
