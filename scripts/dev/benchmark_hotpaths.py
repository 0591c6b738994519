"""Microbenchmarks for looplog per-tick hot paths (baseline vs optimized)."""

from __future__ import annotations

import statistics
import time
from dataclasses import dataclass, field

from looplog import Int32, loggable
from looplog.classify.registry import EncoderRegistry
from looplog.plan import describe_type
from looplog.runtime import LoggingConfig, Telemetry, crash_on_error
from looplog.sinks import DataSink, NullSink, PrefixSink


class _CountingSink(NullSink):
    def __init__(self) -> None:
        super().__init__()
        self.writes = 0

    def log_double(self, identifier: str, value: float) -> None:
        self.writes += 1

    def log_integer(self, identifier: str, value: int) -> None:
        self.writes += 1

    def log_double_array(self, identifier, value) -> None:
        self.writes += 1


@loggable
@dataclass
class _Joint:
    position: float = 0.0
    velocity: float = 0.0
    current: float = 0.0
    faults: Int32 = 0


@loggable
@dataclass
class _Arm:
    shoulder: _Joint = field(default_factory=_Joint)
    elbow: _Joint = field(default_factory=_Joint)
    wrist: _Joint = field(default_factory=_Joint)
    trajectory: tuple[float, ...] = tuple(float(i) for i in range(32))


class _NestedPrefixSink(PrefixSink):
    """Old-style sub-sink that wraps itself instead of composing prefixes."""

    def get_sub_sink(self, path: str) -> DataSink:
        return _NestedPrefixSink(self, path)


def _time(label: str, fn, iterations: int) -> tuple[str, float]:
    samples: list[float] = []
    for _ in range(5):
        start = time.perf_counter()
        for _ in range(iterations):
            fn()
        elapsed = time.perf_counter() - start
        samples.append(elapsed / iterations)
    mean = statistics.mean(samples)
    print(f"{label:48s} {mean * 1_000_000:.2f} us/op")
    return label, mean


def _telemetry(sink: DataSink) -> Telemetry:
    return Telemetry(
        LoggingConfig(sink=sink, error_handler=crash_on_error()),
        encoders=EncoderRegistry(),
    )


def bench_caching_sink() -> None:
    print("\n[1] Steady-state tick: direct writes vs change-suppressing cache")
    arm = _Arm()
    direct_backend = _CountingSink()
    cached_backend = _CountingSink()
    direct = _telemetry(direct_backend)
    cached = _telemetry(cached_backend.cached())

    def baseline() -> None:
        direct.update(arm, "Arm")

    def optimized() -> None:
        cached.update(arm, "Arm")

    _, baseline_mean = _time("baseline_uncached_tick", baseline, iterations=2000)
    _, optimized_mean = _time("optimized_cached_tick", optimized, iterations=2000)
    print(f"backend writes: direct={direct_backend.writes} cached={cached_backend.writes}")
    print(f"speedup: {baseline_mean / optimized_mean:.2f}x")


def bench_plan_cache() -> None:
    print("\n[2] Plan lookup: rebuild every tick vs cached plan")
    telemetry = _telemetry(NullSink())

    def baseline() -> int:
        return len(telemetry.builder.build(describe_type(_Arm)))

    def optimized() -> int:
        return len(telemetry.plan_for(_Arm))

    if baseline() != optimized():
        raise RuntimeError("Plan mismatch between rebuilt and cached plan")

    _, baseline_mean = _time("baseline_rebuild_plan", baseline, iterations=500)
    _, optimized_mean = _time("optimized_cached_plan", optimized, iterations=500)
    print(f"speedup: {baseline_mean / optimized_mean:.2f}x")


def bench_sub_sink_composition() -> None:
    print("\n[3] Deep namespaces: nested wrappers vs composed, memoized prefixes")
    depth = 8
    backend = _CountingSink()
    naive_root = _NestedPrefixSink(backend, "Robot")

    def baseline() -> None:
        sink: DataSink = naive_root
        for level in range(depth):
            sink = sink.get_sub_sink(f"L{level}")
        sink.log_double("value", 1.0)

    def optimized() -> None:
        sink: DataSink = backend
        for level in range(depth):
            sink = sink.get_sub_sink(f"L{level}")
        sink.log_double("value", 1.0)

    _, baseline_mean = _time("baseline_nested_prefix_wrappers", baseline, iterations=5000)
    _, optimized_mean = _time("optimized_composed_prefixes", optimized, iterations=5000)
    print(f"speedup: {baseline_mean / optimized_mean:.2f}x")


def main() -> None:
    print("looplog Hot Path Benchmarks")
    bench_caching_sink()
    bench_plan_cache()
    bench_sub_sink_composition()


if __name__ == "__main__":
    main()
