"""Tool implementations exposed by the MCP server.

These are plain functions so they can be tested and reused without a
running server; `server.py` registers thin wrappers around them.
"""

import json
import logging
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from box3review.feedback import parse_feedback_to_proposals
from box3review.proposals import ChangeProposal, count_decisions
from box3review.serializer import serialize_proposals, serialize_proposals_to_json
from box3review.stages import REVIEW_STAGES, STAGE_NAMES, get_stage_name
from box3review.summary import summarize_feedback

logger = logging.getLogger(__name__)

SERIALIZE_FORMATS = ("text", "json")


def _load_proposals(proposals: list[dict[str, Any]]) -> list[ChangeProposal]:
    """Validate proposal dicts, turning schema errors into ValueError."""
    loaded = []
    for idx, data in enumerate(proposals):
        try:
            loaded.append(ChangeProposal.model_validate(data))
        except PydanticValidationError as e:
            details = "; ".join(
                f"{'.'.join(str(x) for x in err['loc']) or 'root'}: {err['msg']}"
                for err in e.errors()
            )
            raise ValueError(f"Invalid proposal at index {idx}: {details}") from e
    return loaded


def parse_feedback(
    raw_feedback: str,
    stage_id: str,
    specialist: str | None = None,
) -> dict[str, Any]:
    """Parse reviewer feedback into proposals.

    The specialist defaults to the stage's display name.

    Returns:
        Dictionary with `stage_id`, `count`, and `proposals` (camelCase dicts).
    """
    specialist = specialist or get_stage_name(stage_id)
    proposals = parse_feedback_to_proposals(raw_feedback, specialist, stage_id)
    logger.info(f"Parsed {len(proposals)} proposal(s) for {stage_id}")
    return {
        "stage_id": stage_id,
        "count": len(proposals),
        "proposals": [p.to_dict() for p in proposals],
    }


def serialize_decisions(
    proposals: list[dict[str, Any]],
    format: str = "text",
) -> dict[str, Any]:
    """Render reviewed proposals for the apply-changes step.

    Args:
        proposals: Proposal dicts carrying `userDecision` (and `userNote`).
        format: "text" for the instruction block, "json" for filtered JSON.

    Returns:
        Dictionary with `format`, `output`, and decision `counts`.

    Raises:
        ValueError: On an unknown format or an invalid proposal.
    """
    if format not in SERIALIZE_FORMATS:
        raise ValueError(f"Invalid format '{format}'. Valid: {list(SERIALIZE_FORMATS)}")

    loaded = _load_proposals(proposals)
    if format == "json":
        output = serialize_proposals_to_json(loaded)
    else:
        output = serialize_proposals(loaded)

    return {
        "format": format,
        "output": output,
        "counts": count_decisions(loaded),
    }


def summarize_stage(
    stage_id: str,
    raw_feedback: str,
    processing_time_ms: int | None = None,
) -> dict[str, Any]:
    """Summarize a stage's feedback as a compact list of changes."""
    summary = summarize_feedback(stage_id, raw_feedback, processing_time_ms)
    return json.loads(summary.model_dump_json(by_alias=True))


def list_stages() -> dict[str, Any]:
    """List known workflow stages and which of them are reviewer stages."""
    return {
        "stages": [
            {"id": stage_id, "name": name, "review": stage_id in REVIEW_STAGES}
            for stage_id, name in STAGE_NAMES.items()
        ]
    }


__all__ = [
    "parse_feedback",
    "serialize_decisions",
    "summarize_stage",
    "list_stages",
]
