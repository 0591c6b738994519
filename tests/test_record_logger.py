"""Tests for plan execution -- writes per shape, tiers, nesting, fault boundaries."""

import enum
import gc
from collections import deque
from dataclasses import dataclass, field
from typing import Annotated, Optional

import pytest
from conftest import make_test_telemetry

from looplog.annotations import Log, loggable
from looplog.classify.registry import EncoderRegistry
from looplog.errors import LoggingFault
from looplog.importance import Importance
from looplog.measure import INCH, Quantity
from looplog.primitives import Char, Float32, Int8, Int32
from looplog.runtime.faults import ErrorPrinter
from looplog.runtime.record_logger import BoundRecord, PlannedRecordLogger, RecordLogger
from looplog.sinks import LogEntry, RecordingSink
from looplog.structs import PackedStruct


@dataclass
class Pose:
    x: float
    y: float


Pose.struct = PackedStruct(Pose, "Pose", (("x", "d"), ("y", "d")))


class Mode(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"


class Motor:
    def __init__(self) -> None:
        self.speed = 0.0
        self.init_calls = 0

    def init_inspectable(self, builder) -> None:
        self.init_calls += 1
        builder.set_type_name("Motor")
        builder.add_double_property("speed", lambda: self.speed)
        builder.add_boolean_property("stalled", None)


class Gauge:
    __slots__ = ("value",)

    def __init__(self) -> None:
        self.value = 1.5

    def init_inspectable(self, builder) -> None:
        builder.add_double_property("value", lambda: self.value)


class VendorMotor:
    def __init__(self, output: float = 0.0) -> None:
        self.output = output


class VendorMotorLogger(RecordLogger[VendorMotor]):
    def __init__(self) -> None:
        super().__init__(VendorMotor)

    def update(self, sink, motor) -> None:
        sink.log_double("output", motor.output)


@loggable
@dataclass
class Point:
    x: float = 1.0
    y: float = 4.0
    dim: Int32 = 2


@loggable
@dataclass
class Everything:
    flag: bool = True
    small: Int8 = -3
    letter: Char = "A"
    ratio: Float32 = 0.5
    name: str = "arm"
    mode: Mode = Mode.RUNNING
    blob: bytes = b"\x01\x02"
    signed: tuple[Int8, ...] = (-1, 2)
    gains: tuple[Float32, ...] = (1.0, 2.0)
    ids: tuple[int, ...] = (7, 8)
    switches: tuple[bool, ...] = (True, False)
    labels: tuple[str, ...] = ("a", "b")
    history: deque[float] = field(default_factory=lambda: deque([1.0, 2.0]))
    tags: list[str] = field(default_factory=lambda: ["x"])
    height: Quantity = field(default_factory=lambda: INCH.of(10))
    pose: Pose = field(default_factory=lambda: Pose(1.0, 2.0))
    path: tuple[Pose, ...] = field(default_factory=lambda: (Pose(0.0, 0.0),))
    waypoints: list[Pose] = field(default_factory=lambda: [Pose(3.0, 4.0)])
    target: Optional[float] = None


@loggable
@dataclass
class Tiered:
    detail: Annotated[float, Log(importance=Importance.DEBUG)] = 1.0
    summary: Annotated[float, Log(importance=Importance.INFO)] = 2.0
    alarm: Annotated[bool, Log(importance=Importance.CRITICAL)] = False


@loggable
class Faulty:
    before: int

    def __init__(self) -> None:
        self.before = 1

    @property
    def boom(self) -> float:
        raise RuntimeError("sensor unplugged")


@loggable
@dataclass
class Holder:
    faulty: Faulty = field(default_factory=Faulty)
    after: int = 5


@loggable
@dataclass
class Drivetrain:
    left: Motor = field(default_factory=Motor)
    vendor: VendorMotor = field(default_factory=lambda: VendorMotor(0.75))
    tip: Point = field(default_factory=Point)


class TestEndToEnd:
    def test_point_under_root_namespace(self):
        telemetry, sink = make_test_telemetry(root="Point")
        telemetry.update(Point())
        assert sink.entries == [
            LogEntry("Point/x", 1.0),
            LogEntry("Point/y", 4.0),
            LogEntry("Point/dim", 2),
        ]

    def test_explicit_identifier(self):
        telemetry, sink = make_test_telemetry()
        telemetry.update(Point(), "Shoulder")
        assert sink.identifiers()[0] == "Shoulder/x"

    def test_two_instances_share_plan_and_logger(self):
        telemetry, sink = make_test_telemetry()
        telemetry.update(Point(x=1.0), "A")
        telemetry.update(Point(x=2.0), "B")
        assert sink.last("A/x") == 1.0
        assert sink.last("B/x") == 2.0
        assert len(telemetry.loggers()) == 1


class TestShapes:
    @pytest.fixture
    def logged(self):
        telemetry, sink = make_test_telemetry(root="E")
        telemetry.update(Everything())
        return sink

    def test_scalars(self, logged):
        assert logged.last("E/flag") is True
        assert logged.last("E/small") == -3
        assert logged.last("E/letter") == ord("A")
        assert logged.last("E/ratio") == 0.5
        assert logged.last("E/name") == "arm"

    def test_enum_logs_name(self, logged):
        assert logged.last("E/mode") == "RUNNING"

    def test_arrays(self, logged):
        assert logged.last("E/blob") == b"\x01\x02"
        assert logged.last("E/signed") == b"\xff\x02"
        assert logged.last("E/gains") == [1.0, 2.0]
        assert logged.last("E/ids") == [7, 8]
        assert logged.last("E/switches") == [True, False]
        assert logged.last("E/labels") == ["a", "b"]

    def test_containers(self, logged):
        assert logged.last("E/history") == [1.0, 2.0]
        assert logged.last("E/tags") == ["x"]
        assert logged.last("E/waypoints") == [Pose(3.0, 4.0)]

    def test_measurement_in_base_unit(self, logged):
        assert logged.last("E/height") == pytest.approx(0.254)

    def test_structs(self, logged):
        assert logged.last("E/pose") == Pose(1.0, 2.0)
        assert logged.last("E/path") == [Pose(0.0, 0.0)]

    def test_none_writes_nothing(self, logged):
        assert "E/target" not in logged.identifiers()

    def test_float32_uses_float_write(self):
        calls = []

        class Spy(RecordingSink):
            def log_float(self, identifier, value):
                calls.append(identifier)
                super().log_float(identifier, value)

        telemetry, _ = make_test_telemetry()
        telemetry.config.sink = Spy()
        telemetry.update(Everything(), "E")
        assert calls == ["E/ratio"]


class TestTiers:
    def test_minimum_importance_filters(self):
        telemetry, sink = make_test_telemetry(minimum_importance=Importance.INFO)
        telemetry.update(Tiered(), "T")
        assert sink.identifiers() == ["T/summary", "T/alarm"]

    def test_threshold_change_applies_next_tick(self):
        telemetry, sink = make_test_telemetry(minimum_importance=Importance.INFO)
        plan = telemetry.plan_for(Tiered)
        telemetry.update(Tiered(), "T")
        telemetry.configure(lambda c: setattr(c, "minimum_importance", Importance.CRITICAL))
        sink.clear()
        telemetry.update(Tiered(), "T")
        assert sink.identifiers() == ["T/alarm"]
        telemetry.configure(lambda c: setattr(c, "minimum_importance", Importance.DEBUG))
        sink.clear()
        telemetry.update(Tiered(), "T")
        assert sink.identifiers() == ["T/detail", "T/summary", "T/alarm"]
        assert telemetry.plan_for(Tiered) is plan


class TestRecursion:
    def test_nested_inspectable_and_custom(self):
        registry = EncoderRegistry()
        registry.register(VendorMotor, VendorMotorLogger)
        telemetry, sink = make_test_telemetry(encoders=registry)
        drivetrain = Drivetrain()
        drivetrain.left.speed = 3.0
        telemetry.update(drivetrain, "Drive")
        assert sink.entries == [
            LogEntry("Drive/left/.type", "Motor"),
            LogEntry("Drive/left/speed", 3.0),
            LogEntry("Drive/vendor/output", 0.75),
            LogEntry("Drive/tip/x", 1.0),
            LogEntry("Drive/tip/y", 4.0),
            LogEntry("Drive/tip/dim", 2),
        ]

    def test_inspectable_initialized_once(self):
        registry = EncoderRegistry()
        registry.register(VendorMotor, VendorMotorLogger)
        telemetry, sink = make_test_telemetry(encoders=registry)
        drivetrain = Drivetrain()
        telemetry.update(drivetrain, "Drive")
        drivetrain.left.speed = 9.0
        sink.clear()
        telemetry.update(drivetrain, "Drive")
        assert drivetrain.left.init_calls == 1
        assert sink.last("Drive/left/speed") == 9.0
        assert "Drive/left/.type" not in sink.identifiers()

    def test_failure_aborts_rest_of_update(self):
        handled = []

        class Recorder:
            def handle(self, exc, record_logger):
                handled.append((exc, record_logger.logged_type))

        telemetry, sink = make_test_telemetry(error_handler=Recorder())
        telemetry.update(Faulty(), "F")
        assert sink.entries == [LogEntry("F/before", 1)]
        assert len(handled) == 1
        assert isinstance(handled[0][0], RuntimeError)
        assert handled[0][1] is Faulty

    def test_nested_failure_is_isolated(self):
        telemetry, sink = make_test_telemetry(error_handler=ErrorPrinter())
        telemetry.update(Holder(), "H")
        assert sink.entries == [LogEntry("H/faulty/before", 1), LogEntry("H/after", 5)]

    def test_crash_policy_propagates_from_nested(self):
        telemetry, _ = make_test_telemetry()
        with pytest.raises(LoggingFault, match="Faulty") as excinfo:
            telemetry.update(Holder(), "H")
        assert isinstance(excinfo.value.__cause__, RuntimeError)


class TestRecordLoggerBase:
    def test_disabled_logger_is_a_no_op(self):
        telemetry, sink = make_test_telemetry()
        record_logger = telemetry.logger_for(Point)
        record_logger.disable()
        telemetry.update(Point())
        assert sink.entries == []
        assert record_logger.disabled
        record_logger.reenable()
        telemetry.update(Point())
        assert len(sink.entries) == 3

    def test_bind_closes_over_instance(self):
        telemetry, sink = make_test_telemetry()
        record_logger = telemetry.logger_for(Point)
        assert isinstance(record_logger, PlannedRecordLogger)
        bound = record_logger.bind(Point(x=7.0))
        assert isinstance(bound, BoundRecord)
        bound(sink.get_sub_sink("P"), telemetry.config.error_handler)
        assert sink.last("P/x") == 7.0

    def test_base_update_is_abstract(self):
        with pytest.raises(NotImplementedError):
            RecordLogger(Point).update(RecordingSink(), Point())

    def test_repr_mentions_state(self):
        record_logger = RecordLogger(Point)
        record_logger.disable()
        assert repr(record_logger) == "<RecordLogger for Point disabled>"


class TestInspectableCache:
    def test_builders_are_per_sink(self):
        record_logger = RecordLogger(Motor)
        motor = Motor()
        first, second = RecordingSink(), RecordingSink()
        record_logger.log_inspectable(first, motor)
        record_logger.log_inspectable(second, motor)
        record_logger.log_inspectable(first, motor)
        assert motor.init_calls == 2
        assert first.identifiers() == [".type", "speed", "speed"]
        assert record_logger.inspectable_count == 1

    def test_collected_objects_are_forgotten(self):
        record_logger = RecordLogger(Motor)
        sink = RecordingSink()
        for _ in range(5):
            record_logger.log_inspectable(sink, Motor())
        gc.collect()
        assert record_logger.inspectable_count == 0

    def test_replacement_object_is_initialized(self):
        record_logger = RecordLogger(Motor)
        sink = RecordingSink()
        record_logger.log_inspectable(sink, Motor())
        gc.collect()
        replacement = Motor()
        record_logger.log_inspectable(sink, replacement)
        assert replacement.init_calls == 1

    def test_object_without_dict_is_kept_alive(self):
        record_logger = RecordLogger(Gauge)
        sink = RecordingSink()
        record_logger.log_inspectable(sink, Gauge())
        record_logger.log_inspectable(sink, Gauge())
        gc.collect()
        assert record_logger.inspectable_count == 2
        assert sink.entries == [LogEntry("value", 1.5), LogEntry("value", 1.5)]
