"""box3-review: change proposals from AI reviewer feedback on Box 3 reports."""

from box3review.feedback import FeedbackParser, parse_feedback_to_proposals
from box3review.proposals import (
    ChangeProposal,
    ChangeType,
    Severity,
    UserDecision,
    apply_decision,
    bulk_decide,
)
from box3review.serializer import serialize_proposals, serialize_proposals_to_json

__all__ = [
    # Parsing
    "FeedbackParser",
    "parse_feedback_to_proposals",
    # Models
    "ChangeProposal",
    "ChangeType",
    "Severity",
    "UserDecision",
    # Review decisions
    "apply_decision",
    "bulk_decide",
    # Serialization
    "serialize_proposals",
    "serialize_proposals_to_json",
]
