"""Change proposal models and decision helpers."""

from .lib import (
    DEFAULT_REASONING,
    DEFAULT_SECTION,
    ChangeProposal,
    ChangeType,
    Severity,
    UserDecision,
    apply_decision,
    bulk_decide,
    count_decisions,
    count_pending_by_severity,
    has_decisions,
)

__all__ = [
    "DEFAULT_SECTION",
    "DEFAULT_REASONING",
    "ChangeType",
    "Severity",
    "UserDecision",
    "ChangeProposal",
    "apply_decision",
    "bulk_decide",
    "count_decisions",
    "count_pending_by_severity",
    "has_decisions",
]
