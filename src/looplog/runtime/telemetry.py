"""Telemetry -- the dispatcher that ties plans, loggers and configuration together.

One Telemetry per process is typical, but nothing is global: tests build
their own with a recording sink.

    telemetry = Telemetry(LoggingConfig(sink=backend, root="Robot"))
    telemetry.bind(robot_host, robot)   # logs ``robot`` once per loop period
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from typing import Any, Protocol, TypeVar

from looplog.annotations import is_loggable
from looplog.classify.classifier import ClassifierContext, TypeClassifier
from looplog.classify.registry import EncoderRegistry
from looplog.classify.shapes import NestedLoggable
from looplog.errors import PlanBuildError
from looplog.importance import Importance
from looplog.inspectable import DEFAULT_INSPECTABLE_DENYLIST
from looplog.plan.builder import LogPlanBuilder
from looplog.plan.discovery import describe_type
from looplog.plan.models import LogPlan
from looplog.runtime.config import LoggingConfig
from looplog.runtime.record_logger import PlannedRecordLogger, RecordLogger

logger = logging.getLogger(__name__)

T = TypeVar("T")

STATS_LAST_RUN = "LoopLog/Stats/LastRun"


class PeriodicHost(Protocol):
    """A control loop that can run extra callbacks at a fixed period."""

    period: float

    def add_periodic(self, callback: Callable[[], None], period: float, offset: float) -> None: ...


class Telemetry:
    """Builds plans on first use, hands out one logger per type, drives updates."""

    def __init__(
        self,
        config: LoggingConfig | None = None,
        encoders: EncoderRegistry | None = None,
        inspectable_denylist: Sequence[Callable[[type], bool]] = DEFAULT_INSPECTABLE_DENYLIST,
    ) -> None:
        self.config = config or LoggingConfig()
        self.encoders = encoders if encoders is not None else EncoderRegistry.scan()
        self.context = ClassifierContext(
            encoders=self.encoders,
            inspectable_denylist=tuple(inspectable_denylist),
        )
        self.classifier = TypeClassifier(self.context)
        self.builder = LogPlanBuilder(self.classifier)
        self._plans: dict[type, LogPlan] = {}
        self._loggers: dict[type, RecordLogger[Any]] = {}

    # ── configuration ─────────────────────────────────────────────

    def configure(self, fn: Callable[[LoggingConfig], None]) -> LoggingConfig:
        """Mutate the live configuration in place, e.g. ``t.configure(lambda c: setattr(c, "root", "Arm"))``."""
        fn(self.config)
        return self.config

    def should_log(self, importance: Importance) -> bool:
        return importance >= self.config.minimum_importance

    # ── plans and loggers ─────────────────────────────────────────

    def plan_for(self, cls: type) -> LogPlan:
        """The LogPlan of *cls*, built on first request and shared afterwards.

        Plans of nested loggable members are built along with it, so a broken
        nested type fails here instead of on every tick.
        """
        return self._plan_for(cls, set())

    def _plan_for(self, cls: type, in_progress: set[type]) -> LogPlan:
        plan = self._plans.get(cls)
        if plan is not None:
            return plan
        if not is_loggable(cls):
            raise PlanBuildError(cls, [f"{cls.__qualname__} is not decorated with @loggable"])
        plan = self.builder.build(describe_type(cls))
        in_progress.add(cls)
        for entry in plan.entries():
            nested = entry.shape
            if not isinstance(nested, NestedLoggable) or nested.logged_type in in_progress:
                continue
            if self.encoders.get(nested.logged_type) is not None:
                continue
            try:
                self._plan_for(nested.logged_type, in_progress)
            except PlanBuildError as exc:
                raise PlanBuildError(cls, [f"{cls.__qualname__}.{entry.attribute}: {exc}"]) from exc
        self._plans[cls] = plan
        return plan

    def logger_for(self, cls: type[T]) -> RecordLogger[T]:
        """Custom encoder for *cls* if one is registered, else a plan-driven logger."""
        encoder = self.encoders.get(cls)
        if encoder is not None:
            return encoder
        record_logger = self._loggers.get(cls)
        if record_logger is None:
            record_logger = PlannedRecordLogger(self.plan_for(cls), self)
            self._loggers[cls] = record_logger
        return record_logger

    def loggers(self) -> list[RecordLogger[Any]]:
        return list(self._loggers.values())

    # ── updates ───────────────────────────────────────────────────

    def update(self, obj: Any, identifier: str | None = None) -> None:
        """Log *obj* once under *identifier* (the configured root by default)."""
        sink = self.config.sink.get_sub_sink(identifier if identifier is not None else self.config.root)
        self.logger_for(type(obj)).try_update(sink, obj, self.config.error_handler)

    def bind(self, host: PeriodicHost, obj: Any = None) -> Callable[[], None]:
        """Log *obj* (default: *host*) once per host period.

        The callback runs half a period after the host's own loop.  It reads
        the sink and root from the live configuration on every call, so
        ``configure`` changes apply from the next tick.  Returns the
        installed callback.
        """
        target = host if obj is None else obj
        record_logger = self.logger_for(type(target))

        def log_once() -> None:
            start = time.perf_counter()
            sink = self.config.sink
            handler = self.config.error_handler
            try:
                root = sink.get_sub_sink(self.config.root)
            except Exception as exc:
                handler.handle(exc, record_logger)
                return
            record_logger.try_update(root, target, handler)
            elapsed_ms = (time.perf_counter() - start) * 1000.0
            try:
                sink.log_double(STATS_LAST_RUN, elapsed_ms)
            except Exception as exc:
                handler.handle(exc, record_logger)

        period = host.period
        host.add_periodic(log_once, period, period / 2)
        logger.debug(
            "Bound %s logging at %.3fs period",
            type(target).__qualname__,
            period,
        )
        return log_once
