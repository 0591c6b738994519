"""looplog -- structured telemetry for periodic control loops.

Types opt in with ``@loggable``; the framework works out how each member is
written, builds one shared plan per type, and writes live instances to a
composable sink once per tick.

Public API::

    from looplog import Log, Importance, LoggingConfig, Telemetry, loggable
    from looplog.sinks import CachingSink, MultiSink, RecordingSink
    from looplog.classify import TypeClassifier, custom_logger_for
"""

from looplog.annotations import NOT_LOGGED, Log, loggable
from looplog.classify.registry import custom_logger_for
from looplog.errors import ConfigurationError, LoggingFault, LoopLogError, PlanBuildError
from looplog.importance import Importance, Strategy
from looplog.primitives import Char, Float32, Float64, Int8, Int16, Int32, Int64
from looplog.runtime import LoggingConfig, LoggingSettings, RecordLogger, Telemetry, load_settings

__all__ = [
    "NOT_LOGGED",
    "Char",
    "ConfigurationError",
    "Float32",
    "Float64",
    "Importance",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "Log",
    "LoggingConfig",
    "LoggingFault",
    "LoggingSettings",
    "LoopLogError",
    "PlanBuildError",
    "RecordLogger",
    "Strategy",
    "Telemetry",
    "custom_logger_for",
    "load_settings",
    "loggable",
]
__version__ = "0.1.0"
