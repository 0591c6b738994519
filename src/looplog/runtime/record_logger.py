"""RecordLogger -- writes one instance of a type to a sink, once per tick.

``try_update`` is the fault boundary: any exception raised while reading
members or writing to the sink aborts the rest of that update and is handed
to the configured error handler.  It never reaches the control loop unless
the handler chooses to raise.
"""

from __future__ import annotations

import weakref
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Callable, Generic, TypeVar

from looplog.classify.shapes import (
    Container,
    CustomEncoded,
    EnumName,
    LoggableShape,
    Measurement,
    NestedLoggable,
    Primitive,
    PrimitiveArray,
    PropertyBag,
    StructArray,
    StructRecord,
    Text,
    TextArray,
)
from looplog.inspectable import SinkBackedPropertyBuilder
from looplog.primitives import INTEGER_KINDS, PrimitiveKind

if TYPE_CHECKING:
    from looplog.plan.models import LogPlan
    from looplog.runtime.faults import ErrorHandler
    from looplog.runtime.telemetry import Telemetry
    from looplog.sinks.base import DataSink

T = TypeVar("T")

# per-object attribute holding id(sink) -> builder
_BUILDERS_ATTR = "_looplog_builders"


class RecordLogger(Generic[T]):
    """Base class for per-type loggers.

    Custom encoders subclass this, take no constructor arguments and
    implement :meth:`update`.
    """

    def __init__(self, logged_type: type[T]) -> None:
        self.logged_type = logged_type
        self._disabled = False
        # builders live on the object so getters closing over it do not pin it here
        self._tracked: weakref.WeakSet[Any] = weakref.WeakSet()
        self._pinned: dict[int, tuple[Any, dict[int, SinkBackedPropertyBuilder]]] = {}

    def update(self, sink: DataSink, obj: T) -> None:
        raise NotImplementedError

    def try_update(self, sink: DataSink, obj: T, error_handler: ErrorHandler) -> None:
        """Run :meth:`update`, routing any failure to *error_handler*.

        Does nothing while the logger is disabled.
        """
        if self._disabled:
            return
        try:
            self.update(sink, obj)
        except Exception as exc:
            error_handler.handle(exc, self)

    # ── enable / disable ──────────────────────────────────────────

    @property
    def disabled(self) -> bool:
        return self._disabled

    def disable(self) -> None:
        self._disabled = True

    def reenable(self) -> None:
        self._disabled = False

    # ── helpers ───────────────────────────────────────────────────

    def bind(self, obj: T) -> BoundRecord[T]:
        """Close over one live instance."""
        return BoundRecord(self, obj)

    def log_inspectable(self, sink: DataSink, obj: Any) -> None:
        """Log an inspectable object through a property builder.

        ``init_inspectable`` runs once per (object, sink) pair; later calls
        replay the registered getters.
        """
        per_sink = self._builders_of(obj)
        builder = per_sink.get(id(sink))
        if builder is None:
            builder = SinkBackedPropertyBuilder(sink)
            obj.init_inspectable(builder)
            per_sink[id(sink)] = builder
        builder.update()

    def _builders_of(self, obj: Any) -> dict[int, SinkBackedPropertyBuilder]:
        try:
            per_sink = vars(obj).setdefault(_BUILDERS_ATTR, {})
        except TypeError:
            # no __dict__; keep the object alive so its id is never reused
            return self._pinned.setdefault(id(obj), (obj, {}))[1]
        try:
            self._tracked.add(obj)
        except TypeError:
            pass  # not weak-referenceable, only affects inspectable_count
        return per_sink

    @property
    def inspectable_count(self) -> int:
        """Number of live inspectable objects with cached builders."""
        return len(self._tracked) + len(self._pinned)

    def __repr__(self) -> str:
        state = " disabled" if self._disabled else ""
        return f"<{type(self).__name__} for {self.logged_type.__qualname__}{state}>"


class BoundRecord(Generic[T]):
    """A RecordLogger paired with the instance it logs."""

    def __init__(self, record_logger: RecordLogger[T], instance: T) -> None:
        self.logger = record_logger
        self.instance = instance

    def try_update(self, sink: DataSink, error_handler: ErrorHandler) -> None:
        self.logger.try_update(sink, self.instance, error_handler)

    __call__ = try_update


class PlannedRecordLogger(RecordLogger[T]):
    """Executes a LogPlan.

    Tiers are visited in ascending order and skipped when below the
    dispatcher's current minimum importance, which is read on every update
    so threshold changes apply from the next tick.  ``None`` values are not
    written.
    """

    def __init__(self, plan: LogPlan, telemetry: Telemetry) -> None:
        super().__init__(plan.logged_type)
        self.plan = plan
        self.telemetry = telemetry
        self._writers: dict[str, Callable[[DataSink, str, Any, Any], None]] = {
            "primitive": self._write_primitive,
            "primitive_array": self._write_primitive_array,
            "text": self._write_text,
            "text_array": self._write_text_array,
            "enum": self._write_enum,
            "measurement": self._write_measurement,
            "struct": self._write_struct,
            "struct_array": self._write_struct_array,
            "nested": self._write_nested,
            "custom": self._write_custom,
            "container": self._write_container,
            "property_bag": self._write_property_bag,
        }

    def update(self, sink: DataSink, obj: T) -> None:
        for tier, entries in self.plan.iter_tiers():
            if not self.telemetry.should_log(tier):
                continue
            for entry in entries:
                value = entry.read(obj)
                if value is None:
                    continue
                self.write(sink, entry.name, entry.shape, value)

    def write(self, sink: DataSink, name: str, shape: LoggableShape, value: Any) -> None:
        self._writers[shape.tag](sink, name, shape, value)

    # ── leaf writers ──────────────────────────────────────────────

    @staticmethod
    def _write_primitive(sink: DataSink, name: str, shape: Primitive, value: Any) -> None:
        kind = shape.kind
        if kind in INTEGER_KINDS:
            sink.log_integer(name, int(value))
        elif kind is PrimitiveKind.CHAR:
            sink.log_integer(name, ord(value))
        elif kind is PrimitiveKind.FLOAT32:
            sink.log_float(name, float(value))
        elif kind is PrimitiveKind.FLOAT64:
            sink.log_double(name, float(value))
        else:
            sink.log_boolean(name, bool(value))

    @staticmethod
    def _write_primitive_array(sink: DataSink, name: str, shape: PrimitiveArray, value: Sequence[Any]) -> None:
        kind = shape.kind
        if kind is PrimitiveKind.INT8:
            if isinstance(value, (bytes, bytearray)):
                sink.log_raw(name, bytes(value))
            else:
                sink.log_raw(name, bytes(int(v) & 0xFF for v in value))
        elif kind in INTEGER_KINDS:
            sink.log_integer_array(name, [int(v) for v in value])
        elif kind is PrimitiveKind.FLOAT32:
            sink.log_float_array(name, [float(v) for v in value])
        elif kind is PrimitiveKind.FLOAT64:
            sink.log_double_array(name, [float(v) for v in value])
        else:
            sink.log_boolean_array(name, [bool(v) for v in value])

    @staticmethod
    def _write_text(sink: DataSink, name: str, shape: Text, value: str) -> None:
        sink.log_string(name, str(value))

    @staticmethod
    def _write_text_array(sink: DataSink, name: str, shape: TextArray, value: Sequence[str]) -> None:
        sink.log_string_array(name, [str(v) for v in value])

    @staticmethod
    def _write_enum(sink: DataSink, name: str, shape: EnumName, value: Any) -> None:
        sink.log_string(name, value.name)

    @staticmethod
    def _write_measurement(sink: DataSink, name: str, shape: Measurement, value: Any) -> None:
        sink.log_measure(name, value)

    @staticmethod
    def _write_struct(sink: DataSink, name: str, shape: StructRecord, value: Any) -> None:
        sink.log_struct(name, value, shape.struct)

    @staticmethod
    def _write_struct_array(sink: DataSink, name: str, shape: StructArray, value: Sequence[Any]) -> None:
        sink.log_struct_array(name, list(value), shape.struct)

    def _write_container(self, sink: DataSink, name: str, shape: Container, value: Any) -> None:
        element = shape.element
        if isinstance(element, Primitive):
            self._write_primitive_array(sink, name, PrimitiveArray(element.kind), list(value))
        elif isinstance(element, StructRecord):
            sink.log_struct_array(name, list(value), element.struct)
        else:
            sink.log_string_array(name, [str(v) for v in value])

    # ── recursive writers ─────────────────────────────────────────

    def _write_nested(self, sink: DataSink, name: str, shape: NestedLoggable, value: Any) -> None:
        nested = self.telemetry.logger_for(shape.logged_type)
        nested.try_update(sink.get_sub_sink(name), value, self.telemetry.config.error_handler)

    def _write_custom(self, sink: DataSink, name: str, shape: CustomEncoded, value: Any) -> None:
        shape.encoder.try_update(sink.get_sub_sink(name), value, self.telemetry.config.error_handler)

    def _write_property_bag(self, sink: DataSink, name: str, shape: PropertyBag, value: Any) -> None:
        self.log_inspectable(sink.get_sub_sink(name), value)
