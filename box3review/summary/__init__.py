"""Express-mode stage summaries built on the feedback parser."""

from .lib import (
    StageChange,
    StageSummary,
    proposal_to_change,
    summarize_feedback,
    truncate,
)

__all__ = [
    "StageChange",
    "StageSummary",
    "truncate",
    "proposal_to_change",
    "summarize_feedback",
]
