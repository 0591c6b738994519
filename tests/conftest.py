"""Test fixtures for looplog tests."""

from __future__ import annotations

import pytest

from looplog.classify.registry import EncoderRegistry, clear_registered_encoders
from looplog.importance import Importance
from looplog.runtime.config import LoggingConfig
from looplog.runtime.faults import CrashOnError, ErrorHandler
from looplog.runtime.telemetry import Telemetry
from looplog.sinks.recording import RecordingSink


@pytest.fixture(autouse=True)
def _clear_registered_encoders():
    """Forget encoder registrations made by earlier tests."""
    clear_registered_encoders()
    yield
    clear_registered_encoders()


def make_test_config(
    sink: RecordingSink | None = None,
    minimum_importance: Importance = Importance.DEBUG,
    error_handler: ErrorHandler | None = None,
    root: str = "Robot",
) -> LoggingConfig:
    """Create a LoggingConfig writing to a fresh RecordingSink."""
    return LoggingConfig(
        sink=sink if sink is not None else RecordingSink(),
        minimum_importance=minimum_importance,
        error_handler=error_handler if error_handler is not None else CrashOnError(),
        root=root,
    )


def make_test_telemetry(
    encoders: EncoderRegistry | None = None,
    **config_kwargs,
) -> tuple[Telemetry, RecordingSink]:
    """Create a Telemetry with a recording sink. Errors crash by default."""
    sink = config_kwargs.pop("sink", None)
    if sink is None:
        sink = RecordingSink()
    config = make_test_config(sink=sink, **config_kwargs)
    telemetry = Telemetry(config, encoders=encoders if encoders is not None else EncoderRegistry())
    return telemetry, sink
