"""Rendering of reviewed proposals for the apply-changes step."""

from .lib import (
    ACCEPTED_HEADER,
    MODIFIED_HEADER,
    REJECTED_HEADER,
    serialize_proposals,
    serialize_proposals_to_json,
)

__all__ = [
    "ACCEPTED_HEADER",
    "MODIFIED_HEADER",
    "REJECTED_HEADER",
    "serialize_proposals",
    "serialize_proposals_to_json",
]
