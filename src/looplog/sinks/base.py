"""DataSink -- the write surface every backend and decorator implements.

A sink receives fully-qualified string identifiers and one write method per
leaf encoding.  Backends implement the ``log_*`` methods; namespacing and
change suppression come for free from :meth:`DataSink.get_sub_sink` and
:meth:`DataSink.cached`.

Sinks are not thread-safe.  The sub-sink memo (and the previous-value store
of :class:`~looplog.sinks.caching.CachingSink`) assume a single logging
thread per sink tree; hosts that drive logging from several timer threads
must give each thread its own tree.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from looplog.measure import Measure
    from looplog.structs import Struct


def normalize_path(path: str) -> str:
    """Strip surrounding separators and collapse empty segments."""
    return "/".join(part for part in path.split("/") if part)


class DataSink:
    """Base class for telemetry destinations."""

    def __init__(self) -> None:
        self._sub_sinks: dict[str, DataSink] = {}

    # ── namespacing ───────────────────────────────────────────────

    def get_sub_sink(self, path: str) -> DataSink:
        """Return a view that prefixes every identifier with *path*.

        Repeated calls with the same path return the same instance.  An
        empty path returns this sink.
        """
        key = normalize_path(path)
        if not key:
            return self
        sub = self._sub_sinks.get(key)
        if sub is None:
            from looplog.sinks.prefix import PrefixSink

            sub = PrefixSink(self, key)
            self._sub_sinks[key] = sub
        return sub

    def cached(self) -> DataSink:
        """Return a view that only forwards values that changed."""
        from looplog.sinks.caching import CachingSink

        return CachingSink(self)

    # ── scalar writes ─────────────────────────────────────────────

    def log_integer(self, identifier: str, value: int) -> None:
        raise NotImplementedError

    def log_float(self, identifier: str, value: float) -> None:
        """Write a single-precision float."""
        raise NotImplementedError

    def log_double(self, identifier: str, value: float) -> None:
        raise NotImplementedError

    def log_boolean(self, identifier: str, value: bool) -> None:
        raise NotImplementedError

    def log_string(self, identifier: str, value: str) -> None:
        raise NotImplementedError

    # ── array writes ──────────────────────────────────────────────

    def log_raw(self, identifier: str, value: bytes) -> None:
        raise NotImplementedError

    def log_integer_array(self, identifier: str, value: Sequence[int]) -> None:
        raise NotImplementedError

    def log_float_array(self, identifier: str, value: Sequence[float]) -> None:
        raise NotImplementedError

    def log_double_array(self, identifier: str, value: Sequence[float]) -> None:
        raise NotImplementedError

    def log_boolean_array(self, identifier: str, value: Sequence[bool]) -> None:
        raise NotImplementedError

    def log_string_array(self, identifier: str, value: Sequence[str]) -> None:
        raise NotImplementedError

    # ── struct writes ─────────────────────────────────────────────

    def log_struct(self, identifier: str, value: Any, struct: Struct[Any]) -> None:
        raise NotImplementedError

    def log_struct_array(self, identifier: str, value: Sequence[Any], struct: Struct[Any]) -> None:
        raise NotImplementedError

    # ── conveniences ──────────────────────────────────────────────

    def log_measure(self, identifier: str, value: Measure) -> None:
        """Log a measurement as its magnitude in the base unit."""
        self.log_double(identifier, value.base_unit_magnitude())


class NullSink(DataSink):
    """Sink that discards everything. The default destination."""

    def log_integer(self, identifier: str, value: int) -> None:
        pass

    def log_float(self, identifier: str, value: float) -> None:
        pass

    def log_double(self, identifier: str, value: float) -> None:
        pass

    def log_boolean(self, identifier: str, value: bool) -> None:
        pass

    def log_string(self, identifier: str, value: str) -> None:
        pass

    def log_raw(self, identifier: str, value: bytes) -> None:
        pass

    def log_integer_array(self, identifier: str, value: Sequence[int]) -> None:
        pass

    def log_float_array(self, identifier: str, value: Sequence[float]) -> None:
        pass

    def log_double_array(self, identifier: str, value: Sequence[float]) -> None:
        pass

    def log_boolean_array(self, identifier: str, value: Sequence[bool]) -> None:
        pass

    def log_string_array(self, identifier: str, value: Sequence[str]) -> None:
        pass

    def log_struct(self, identifier: str, value: Any, struct: Struct[Any]) -> None:
        pass

    def log_struct_array(self, identifier: str, value: Sequence[Any], struct: Struct[Any]) -> None:
        pass
