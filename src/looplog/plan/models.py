"""Plan data models -- what a type exposes and how each member is written."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from looplog.annotations import Log
from looplog.classify.shapes import LoggableShape
from looplog.importance import Importance, Strategy

Accessor = Callable[[Any], Any]


@dataclass(frozen=True)
class MemberDescriptor:
    """One candidate member found on a logged type."""

    attribute: str
    declared_type: Any
    accessor: Accessor = field(compare=False)
    marker: Log | None = None
    readable: bool = True


@dataclass(frozen=True)
class LoggedTypeDescriptor:
    logged_type: type
    members: tuple[MemberDescriptor, ...]
    strategy: Strategy = Strategy.OPT_OUT
    default_importance: Importance = Importance.DEBUG


@dataclass(frozen=True)
class LogPlanEntry:
    """One member as it will be written on every update."""

    name: str
    attribute: str
    shape: LoggableShape
    importance: Importance
    accessor: Accessor = field(compare=False, repr=False)
    nullable: bool = False

    def read(self, obj: Any) -> Any:
        return self.accessor(obj)


@dataclass(frozen=True)
class LogPlan:
    """Entries of one logged type, grouped by importance tier.

    ``tiers`` is read-only; iterate it with :meth:`iter_tiers` to get
    ascending tier order regardless of insertion order.
    """

    logged_type: type
    tiers: Mapping[Importance, tuple[LogPlanEntry, ...]]

    @classmethod
    def from_entries(cls, logged_type: type, entries: list[LogPlanEntry]) -> LogPlan:
        grouped: dict[Importance, list[LogPlanEntry]] = {}
        for entry in entries:
            grouped.setdefault(entry.importance, []).append(entry)
        tiers = {tier: tuple(grouped[tier]) for tier in sorted(grouped)}
        return cls(logged_type=logged_type, tiers=MappingProxyType(tiers))

    def iter_tiers(self):
        for tier in sorted(self.tiers):
            yield tier, self.tiers[tier]

    def entries(self) -> list[LogPlanEntry]:
        return [entry for _, group in self.iter_tiers() for entry in group]

    def names(self) -> list[str]:
        return [entry.name for entry in self.entries()]

    def entry(self, name: str) -> LogPlanEntry | None:
        for entry in self.entries():
            if entry.name == name:
                return entry
        return None

    def __len__(self) -> int:
        return sum(len(group) for group in self.tiers.values())
