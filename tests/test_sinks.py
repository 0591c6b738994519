"""Tests for sinks and sink decorators -- namespacing, fan-out, caching."""

import logging
from dataclasses import dataclass

import pytest

from looplog.measure import CENTIMETER
from looplog.sinks import CachingSink, LogEntry, LoggingSink, MultiSink, NullSink, PrefixSink, RecordingSink
from looplog.structs import PackedStruct


@dataclass
class Pose:
    x: float
    y: float


POSE_STRUCT = PackedStruct(Pose, "Pose", (("x", "d"), ("y", "d")))


class ExplodingSink(RecordingSink):
    def __init__(self) -> None:
        super().__init__()
        self.fail = True

    def log_double(self, identifier, value):
        if self.fail:
            raise OSError("disk full")
        super().log_double(identifier, value)


class TestSubSinks:
    def test_sub_sink_prefixes_identifiers(self):
        sink = RecordingSink()
        sink.get_sub_sink("Arm").log_double("angle", 0.5)
        assert sink.entries == [LogEntry("Arm/angle", 0.5)]

    def test_sub_sink_is_memoized(self):
        sink = RecordingSink()
        assert sink.get_sub_sink("Arm") is sink.get_sub_sink("Arm")

    def test_nested_sub_sinks_compose(self):
        sink = RecordingSink()
        nested = sink.get_sub_sink("A").get_sub_sink("B")
        assert nested is sink.get_sub_sink("A/B")
        nested.log_integer("k", 1)
        sink.get_sub_sink("A/B").log_integer("k", 2)
        assert sink.identifiers() == ["A/B/k", "A/B/k"]

    def test_composed_sub_sink_wraps_root_directly(self):
        sink = RecordingSink()
        nested = sink.get_sub_sink("A").get_sub_sink("B").get_sub_sink("C")
        assert isinstance(nested, PrefixSink)
        assert nested.parent is sink
        assert nested.prefix == "A/B/C"

    def test_empty_path_returns_same_sink(self):
        sink = RecordingSink()
        assert sink.get_sub_sink("") is sink
        sub = sink.get_sub_sink("A")
        assert sub.get_sub_sink("/") is sub

    def test_surrounding_separators_are_ignored(self):
        sink = RecordingSink()
        assert sink.get_sub_sink("/A/") is sink.get_sub_sink("A")

    def test_prefix_sink_rejects_empty_prefix(self):
        with pytest.raises(ValueError, match="non-empty"):
            PrefixSink(RecordingSink(), "")

    def test_measure_logged_in_base_unit(self):
        sink = RecordingSink()
        sink.log_measure("height", CENTIMETER.of(50))
        assert sink.last("height") == pytest.approx(0.5)


class TestMultiSink:
    def test_forwards_to_every_child_in_order(self):
        first, second = RecordingSink(), RecordingSink()
        multi = MultiSink(first, second)
        multi.log_string("mode", "auto")
        multi.log_double_array("xs", (1.0, 2.0))
        assert first.entries == second.entries == [
            LogEntry("mode", "auto"),
            LogEntry("xs", [1.0, 2.0]),
        ]

    def test_sub_sink_fans_out(self):
        first, second = RecordingSink(), RecordingSink()
        multi = MultiSink.of([first, second])
        sub = multi.get_sub_sink("Drive")
        assert isinstance(sub, MultiSink)
        assert sub.sinks == (first.get_sub_sink("Drive"), second.get_sub_sink("Drive"))
        sub.log_boolean("enabled", True)
        assert first.entries == [LogEntry("Drive/enabled", True)]
        assert second.entries == [LogEntry("Drive/enabled", True)]

    def test_sub_sink_is_memoized(self):
        multi = MultiSink(RecordingSink())
        assert multi.get_sub_sink("A") is multi.get_sub_sink("A")


class TestCachingSink:
    def test_same_value_twice_forwards_once(self):
        inner = RecordingSink()
        sink = inner.cached()
        sink.log_double("x", 1.0)
        sink.log_double("x", 1.0)
        assert inner.entries == [LogEntry("x", 1.0)]

    def test_different_values_forward_twice(self):
        inner = RecordingSink()
        sink = inner.cached()
        sink.log_integer("x", 1)
        sink.log_integer("x", 2)
        assert [e.value for e in inner.entries] == [1, 2]

    def test_equal_but_distinct_arrays_forward_once(self):
        inner = RecordingSink()
        sink = inner.cached()
        sink.log_double_array("xs", [1.0, 2.0])
        sink.log_double_array("xs", [1.0, 2.0])
        sink.log_double_array("xs", (1.0, 2.0))
        assert len(inner.entries) == 1

    def test_mutating_logged_list_is_detected(self):
        inner = RecordingSink()
        sink = inner.cached()
        values = [1, 2]
        sink.log_integer_array("xs", values)
        values.append(3)
        sink.log_integer_array("xs", values)
        assert [e.value for e in inner.entries] == [[1, 2], [1, 2, 3]]

    def test_kind_change_forwards(self):
        inner = RecordingSink()
        sink = inner.cached()
        sink.log_integer("x", 1)
        sink.log_double("x", 1.0)
        assert len(inner.entries) == 2

    def test_identifiers_are_independent(self):
        inner = RecordingSink()
        sink = inner.cached()
        sink.log_boolean("a", True)
        sink.log_boolean("b", True)
        assert inner.identifiers() == ["a", "b"]

    def test_struct_compared_by_packed_value(self):
        inner = RecordingSink()
        sink = inner.cached()
        pose = Pose(1.0, 2.0)
        sink.log_struct("pose", pose, POSE_STRUCT)
        sink.log_struct("pose", Pose(1.0, 2.0), POSE_STRUCT)
        pose.x = 5.0
        sink.log_struct("pose", pose, POSE_STRUCT)
        assert len(inner.entries) == 2

    def test_struct_arrays_compared_element_wise(self):
        inner = RecordingSink()
        sink = inner.cached()
        sink.log_struct_array("poses", [Pose(1.0, 2.0)], POSE_STRUCT)
        sink.log_struct_array("poses", [Pose(1.0, 2.0)], POSE_STRUCT)
        assert len(inner.entries) == 1

    def test_caching_is_idempotent(self):
        sink = RecordingSink().cached()
        assert isinstance(sink, CachingSink)
        assert sink.cached() is sink

    def test_failed_write_is_not_cached(self):
        inner = ExplodingSink()
        sink = inner.cached()
        with pytest.raises(OSError):
            sink.log_double("x", 1.0)
        inner.fail = False
        sink.log_double("x", 1.0)
        assert inner.entries == [LogEntry("x", 1.0)]

    def test_clear_forgets_previous_values(self):
        inner = RecordingSink()
        sink = inner.cached()
        sink.log_string("s", "a")
        sink.clear()
        sink.log_string("s", "a")
        assert len(inner.entries) == 2

    def test_sub_sinks_share_cache(self):
        inner = RecordingSink()
        sink = inner.cached()
        sink.get_sub_sink("A").log_integer("k", 1)
        sink.get_sub_sink("A").log_integer("k", 1)
        assert inner.entries == [LogEntry("A/k", 1)]


class TestLeafSinks:
    def test_null_sink_accepts_everything(self):
        sink = NullSink()
        sink.log_integer("a", 1)
        sink.log_raw("b", b"\x00")
        sink.log_struct("c", Pose(0.0, 0.0), POSE_STRUCT)
        assert sink.get_sub_sink("A").parent is sink

    def test_recording_sink_last_missing_raises(self):
        with pytest.raises(KeyError):
            RecordingSink().last("nope")

    def test_logging_sink_emits_structured_records(self, caplog):
        sink = LoggingSink(logger_name="looplog.test_data")
        with caplog.at_level(logging.DEBUG, logger="looplog.test_data"):
            sink.get_sub_sink("Arm").log_double("angle", 0.25)
            sink.log_raw("blob", b"\x01\xff")
        first, second = caplog.records
        assert first.getMessage() == "telemetry_write"
        assert first.telemetry_identifier == "Arm/angle"
        assert first.telemetry_kind == "double"
        assert first.telemetry_value == 0.25
        assert second.telemetry_value == "01ff"

    def test_logging_sink_skips_disabled_level(self, caplog):
        sink = LoggingSink(logger_name="looplog.test_quiet", level=logging.DEBUG)
        with caplog.at_level(logging.INFO, logger="looplog.test_quiet"):
            sink.log_integer("a", 1)
        assert caplog.records == []
