"""Error handlers -- what happens when a RecordLogger fails mid-update."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol

from looplog.errors import ConfigurationError, LoggingFault

if TYPE_CHECKING:
    from looplog.runtime.record_logger import RecordLogger

logger = logging.getLogger(__name__)


def _describe(record_logger: RecordLogger[Any]) -> str:
    return record_logger.logged_type.__qualname__


class ErrorHandler(Protocol):
    def handle(self, exc: Exception, record_logger: RecordLogger[Any]) -> None: ...


class ErrorPrinter:
    """Log the failure and carry on. The default policy."""

    def handle(self, exc: Exception, record_logger: RecordLogger[Any]) -> None:
        logger.error(
            "An error occurred while logging an instance of %s: %s",
            _describe(record_logger),
            exc,
        )


class CrashOnError:
    """Re-raise every failure as a LoggingFault. Meant for tests and simulation."""

    def handle(self, exc: Exception, record_logger: RecordLogger[Any]) -> None:
        if isinstance(exc, LoggingFault):
            raise exc
        raise LoggingFault(
            f"An error occurred while logging an instance of {_describe(record_logger)}: {exc}"
        ) from exc


class LoggerDisabler:
    """Disable a logger once it has failed more than *threshold* times.

    Counts are per logger.  A disabled logger stays silent until
    :meth:`reset` re-enables every logger this handler has seen.
    """

    def __init__(self, threshold: int) -> None:
        if threshold < 0:
            raise ConfigurationError(f"threshold must be >= 0, got {threshold}")
        self.threshold = threshold
        self._error_counts: dict[RecordLogger[Any], int] = {}

    def handle(self, exc: Exception, record_logger: RecordLogger[Any]) -> None:
        count = self._error_counts.get(record_logger, 0) + 1
        self._error_counts[record_logger] = count
        if count > self.threshold:
            record_logger.disable()
            logger.error(
                "Too many errors while logging instances of %s (%d); disabling its logger",
                _describe(record_logger),
                count,
                exc_info=exc,
            )

    def error_count(self, record_logger: RecordLogger[Any]) -> int:
        return self._error_counts.get(record_logger, 0)

    def reset(self) -> None:
        for record_logger in self._error_counts:
            record_logger.reenable()
        self._error_counts.clear()


def print_errors() -> ErrorHandler:
    return ErrorPrinter()


def crash_on_error() -> ErrorHandler:
    return CrashOnError()


def disabling(threshold: int) -> ErrorHandler:
    return LoggerDisabler(threshold)


def create_error_handler(name: str, max_errors: int = 0) -> ErrorHandler:
    """Build an error handler by name.

    Args:
        name: "print", "crash", or "disable".
        max_errors: Failure threshold for the "disable" policy.

    Raises:
        ConfigurationError: If *name* is not recognised.
    """
    if name == "print":
        return print_errors()
    elif name == "crash":
        return crash_on_error()
    elif name == "disable":
        return disabling(max_errors)
    raise ConfigurationError(f"Unknown error handler {name!r}. Use print, crash, or disable.")
