"""LogPlanBuilder -- filters, classifies and groups the members of one type.

Build problems are collected across all members and raised together, so a
single run reports every offending member instead of the first one.
"""

from __future__ import annotations

import logging

from looplog.classify.classifier import TypeClassifier
from looplog.classify.shapes import Suppressed, Unsupported
from looplog.classify.typeinfo import declare, type_name
from looplog.errors import PlanBuildError
from looplog.importance import Importance, Strategy
from looplog.plan.models import LoggedTypeDescriptor, LogPlan, LogPlanEntry, MemberDescriptor

logger = logging.getLogger(__name__)


class LogPlanBuilder:
    def __init__(self, classifier: TypeClassifier | None = None) -> None:
        self.classifier = classifier or TypeClassifier()

    def build(self, descriptor: LoggedTypeDescriptor) -> LogPlan:
        """Turn *descriptor* into a LogPlan.

        Raises PlanBuildError if an explicitly marked member cannot be
        logged or two members share a logged name.
        """
        owner = descriptor.logged_type.__qualname__
        errors: list[str] = []
        entries: list[LogPlanEntry] = []
        names: dict[str, str] = {}

        for member in descriptor.members:
            if not self._selected(member, descriptor.strategy):
                continue

            declared = declare(member.declared_type)
            shape = self.classifier.classify_declared(declared)
            if isinstance(shape, Suppressed):
                continue
            if isinstance(shape, Unsupported):
                message = (
                    f"{owner}.{member.attribute} ({type_name(member.declared_type)}): {shape.reason}"
                )
                if member.marker is not None:
                    errors.append(message)
                else:
                    logger.warning("Not logging %s", message)
                continue

            importance = self._importance(member, descriptor.default_importance)
            if importance == Importance.NONE:
                continue

            name = (member.marker.name if member.marker else "") or member.attribute
            if name in names:
                errors.append(
                    f"{owner}.{member.attribute} and {owner}.{names[name]} "
                    f"are both logged as {name!r}"
                )
                continue
            names[name] = member.attribute

            entries.append(
                LogPlanEntry(
                    name=name,
                    attribute=member.attribute,
                    shape=shape,
                    importance=importance,
                    accessor=member.accessor,
                    nullable=declared.nullable,
                )
            )

        if errors:
            raise PlanBuildError(descriptor.logged_type, errors)
        logger.debug("Built log plan for %s with %d entries", owner, len(entries))
        return LogPlan.from_entries(descriptor.logged_type, entries)

    @staticmethod
    def _selected(member: MemberDescriptor, strategy: Strategy) -> bool:
        if not member.readable:
            return False
        marker = member.marker
        if marker is not None and marker.importance == Importance.NONE:
            return False
        if strategy is Strategy.OPT_IN and marker is None:
            return False
        return True

    @staticmethod
    def _importance(member: MemberDescriptor, default: Importance) -> Importance:
        if member.marker is not None and member.marker.importance is not None:
            return member.marker.importance
        return default
