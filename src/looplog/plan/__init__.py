"""Log plans: which members of a type are logged, and how."""

from looplog.plan.builder import LogPlanBuilder
from looplog.plan.discovery import describe_type, split_marker
from looplog.plan.models import LoggedTypeDescriptor, LogPlan, LogPlanEntry, MemberDescriptor

__all__ = [
    "LogPlan",
    "LogPlanBuilder",
    "LogPlanEntry",
    "LoggedTypeDescriptor",
    "MemberDescriptor",
    "describe_type",
    "split_marker",
]
