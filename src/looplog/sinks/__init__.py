"""Telemetry sinks and sink decorators."""

from looplog.sinks.base import DataSink, NullSink
from looplog.sinks.caching import CachingSink
from looplog.sinks.logging_sink import LoggingSink
from looplog.sinks.multi import MultiSink
from looplog.sinks.prefix import PrefixSink
from looplog.sinks.recording import LogEntry, RecordingSink

__all__ = [
    "CachingSink",
    "DataSink",
    "LogEntry",
    "LoggingSink",
    "MultiSink",
    "NullSink",
    "PrefixSink",
    "RecordingSink",
]
