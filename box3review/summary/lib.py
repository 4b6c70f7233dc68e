"""Compact per-stage summaries of reviewer feedback.

Used by express mode, where all reviewer stages run back to back and the
user sees one short list of changes per stage instead of the full review
panel.
"""

import logging

from pydantic import BaseModel, ConfigDict, Field

from box3review.feedback import parse_feedback_to_proposals
from box3review.proposals import DEFAULT_SECTION, ChangeProposal, ChangeType, Severity
from box3review.stages import get_stage_name

logger = logging.getLogger(__name__)

DESCRIPTION_CHARS = 300
SECTION_CHARS = 100
ORIGINAL_CHARS = 300
REASONING_CHARS = 200


class StageChange(BaseModel):
    """One change in a stage summary, trimmed for display."""

    type: ChangeType
    description: str
    severity: Severity
    section: str | None = None
    original: str | None = None
    reasoning: str | None = None


class StageSummary(BaseModel):
    """Summary of the changes one reviewer stage proposes.

    Attributes:
        stage_id: Workflow stage id.
        stage_name: Display name of the stage.
        changes_count: Number of changes.
        changes: Trimmed changes in source order.
        processing_time_ms: How long the stage took, when known.
    """

    stage_id: str = Field(alias="stageId")
    stage_name: str = Field(alias="stageName")
    changes_count: int = Field(alias="changesCount")
    changes: list[StageChange]
    processing_time_ms: int | None = Field(default=None, alias="processingTimeMs")

    model_config = ConfigDict(populate_by_name=True)


def truncate(text: str, max_length: int) -> str:
    """Shorten text to max_length characters, ending in "..." when cut."""
    if not text:
        return ""
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."


def proposal_to_change(proposal: ChangeProposal) -> StageChange:
    return StageChange(
        type=proposal.change_type,
        description=truncate(proposal.proposed or proposal.reasoning, DESCRIPTION_CHARS),
        severity=proposal.severity,
        section=(
            truncate(proposal.section, SECTION_CHARS)
            if proposal.section != DEFAULT_SECTION
            else None
        ),
        original=truncate(proposal.original, ORIGINAL_CHARS) if proposal.original else None,
        reasoning=(
            truncate(proposal.reasoning, REASONING_CHARS) if proposal.reasoning else None
        ),
    )


def summarize_feedback(
    stage_id: str,
    raw_feedback: str,
    processing_time_ms: int | None = None,
) -> StageSummary:
    """Parse a stage's feedback and condense it into a StageSummary."""
    stage_name = get_stage_name(stage_id)
    proposals = parse_feedback_to_proposals(raw_feedback, stage_name, stage_id)
    changes = [proposal_to_change(p) for p in proposals]

    logger.info(f"{stage_name}: {len(changes)} change(s)")
    return StageSummary(
        stage_id=stage_id,
        stage_name=stage_name,
        changes_count=len(changes),
        changes=changes,
        processing_time_ms=processing_time_ms,
    )


__all__ = [
    "StageChange",
    "StageSummary",
    "truncate",
    "proposal_to_change",
    "summarize_feedback",
]
