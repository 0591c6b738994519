"""Importance tiers and member-selection strategies."""

from __future__ import annotations

from enum import Enum, IntEnum


class Importance(IntEnum):
    """Ordered tier controlling whether an entry is emitted.

    Entries below the configured minimum importance are skipped at runtime.
    ``NONE`` entries are never logged and are dropped when a plan is built.
    """

    NONE = 0
    DEBUG = 1
    INFO = 2
    CRITICAL = 3

    @classmethod
    def parse(cls, value: str | int | Importance) -> Importance:
        """Accept a tier, its integer value, or its case-insensitive name."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                known = ", ".join(m.name.lower() for m in cls)
                raise ValueError(f"Unknown importance '{value}'. Use one of: {known}.") from None
        return cls(value)


class Strategy(str, Enum):
    """Which members of a loggable type are considered."""

    OPT_OUT = "opt_out"  # everything except members excluded with Importance.NONE
    OPT_IN = "opt_in"  # only members carrying an explicit Log marker
