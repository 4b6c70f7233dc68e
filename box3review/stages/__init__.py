"""Workflow stage registry."""

from .lib import (
    REVIEW_STAGES,
    STAGE_NAMES,
    STAGE_ORDER,
    get_stage_name,
    is_review_stage,
    is_valid_stage_id,
)

__all__ = [
    "STAGE_NAMES",
    "STAGE_ORDER",
    "REVIEW_STAGES",
    "is_valid_stage_id",
    "is_review_stage",
    "get_stage_name",
]
