"""Runtime: record loggers, error policies, configuration and the dispatcher."""

from looplog.runtime.config import LoggingConfig, LoggingSettings, load_settings
from looplog.runtime.faults import (
    CrashOnError,
    ErrorHandler,
    ErrorPrinter,
    LoggerDisabler,
    crash_on_error,
    create_error_handler,
    disabling,
    print_errors,
)
from looplog.runtime.record_logger import BoundRecord, PlannedRecordLogger, RecordLogger
from looplog.runtime.telemetry import STATS_LAST_RUN, PeriodicHost, Telemetry

__all__ = [
    "STATS_LAST_RUN",
    "BoundRecord",
    "CrashOnError",
    "ErrorHandler",
    "ErrorPrinter",
    "LoggerDisabler",
    "LoggingConfig",
    "LoggingSettings",
    "PeriodicHost",
    "PlannedRecordLogger",
    "RecordLogger",
    "Telemetry",
    "crash_on_error",
    "create_error_handler",
    "disabling",
    "load_settings",
    "print_errors",
]
