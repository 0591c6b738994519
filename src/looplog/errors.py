"""Exception types raised by looplog."""

from __future__ import annotations

from typing import Any


class LoopLogError(Exception):
    pass


class ConfigurationError(LoopLogError, ValueError):
    """Invalid encoder registration or settings. Raised at startup, never per tick."""


class PlanBuildError(LoopLogError):
    """A logged type could not be turned into a LogPlan.

    Carries every diagnostic collected for the type so that all offending
    members are reported at once.
    """

    def __init__(self, logged_type: Any, diagnostics: list[str]) -> None:
        self.logged_type = logged_type
        self.diagnostics = list(diagnostics)
        name = getattr(logged_type, "__qualname__", repr(logged_type))
        lines = "\n".join(f"  - {d}" for d in self.diagnostics)
        super().__init__(f"Cannot build log plan for {name}:\n{lines}")


class LoggingFault(LoopLogError, RuntimeError):
    """Raised by the crash-on-error policy when a logger fails during an update."""
