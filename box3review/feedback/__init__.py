"""Feedback processing module for reviewer stages.

Turns free-form or JSON output of an AI reviewer into structured
change proposals the review UI can accept, reject, or modify.
"""

from box3review.feedback.lib import (
    FeedbackParser,
    map_change_type,
    map_severity,
    parse_feedback_to_proposals,
)

__all__ = [
    "FeedbackParser",
    "map_change_type",
    "map_severity",
    "parse_feedback_to_proposals",
]
