"""Logging configuration.

``LoggingConfig`` is the live object the dispatcher reads on every tick.
``LoggingSettings`` is its file-backed counterpart: a strict pydantic model
loaded from YAML, turned into a LoggingConfig once a sink is available::

    # looplog.yaml
    minimum_importance: info
    root: Robot
    error_handler: disable
    max_errors: 5
    lazy: true
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from looplog.errors import ConfigurationError
from looplog.importance import Importance
from looplog.runtime.faults import ErrorHandler, ErrorPrinter, create_error_handler
from looplog.sinks.base import DataSink, NullSink

logger = logging.getLogger(__name__)

DEFAULT_ROOT = "Robot"


@dataclass
class LoggingConfig:
    """Mutable runtime configuration held by :class:`~looplog.runtime.telemetry.Telemetry`.

    Attributes:
        sink: Destination of every write.  Discards everything by default.
        minimum_importance: Entries below this tier are skipped.  Read on
            every update, so changes apply from the next tick.
        error_handler: Policy for failures inside a logger update.
        root: Namespace the bound root object is logged under.
    """

    sink: DataSink = field(default_factory=NullSink)
    minimum_importance: Importance = Importance.DEBUG
    error_handler: ErrorHandler = field(default_factory=ErrorPrinter)
    root: str = DEFAULT_ROOT


class _StrictModel(BaseModel):
    model_config = ConfigDict(extra="forbid", validate_assignment=True)


class LoggingSettings(_StrictModel):
    """Settings file contents."""

    minimum_importance: Importance = Importance.DEBUG
    root: str = DEFAULT_ROOT
    error_handler: Literal["print", "crash", "disable"] = "print"
    max_errors: int = Field(default=10, ge=0)
    lazy: bool = False

    @field_validator("minimum_importance", mode="before")
    @classmethod
    def parse_importance(cls, value: Any) -> Importance:
        return Importance.parse(value)

    @field_validator("root")
    @classmethod
    def normalize_root(cls, value: str) -> str:
        cleaned = value.strip().strip("/")
        if not cleaned:
            raise ValueError("root must not be empty")
        return cleaned

    def to_config(self, sink: DataSink | None = None) -> LoggingConfig:
        """Build a LoggingConfig writing to *sink* (a NullSink if omitted)."""
        sink = sink if sink is not None else NullSink()
        if self.lazy:
            sink = sink.cached()
        return LoggingConfig(
            sink=sink,
            minimum_importance=self.minimum_importance,
            error_handler=create_error_handler(self.error_handler, self.max_errors),
            root=self.root,
        )


def load_settings(path: str | Path) -> LoggingSettings:
    """Read LoggingSettings from a YAML file. An empty file yields the defaults."""
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        data: dict[str, Any] | None = yaml.safe_load(f)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path}: expected a mapping at the top level")
    try:
        settings = LoggingSettings(**data)
    except ValidationError as exc:
        raise ConfigurationError(f"{path}: invalid logging settings\n{exc}") from exc
    logger.debug("Loaded logging settings from %s", path)
    return settings
