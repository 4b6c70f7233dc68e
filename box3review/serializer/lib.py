"""Serialization of reviewed proposals for the "apply changes" step.

Two renderings are provided:

- `serialize_proposals`: a plain-text instruction block grouping proposals
  by the reviewer's decision (accepted, modified, rejected).
- `serialize_proposals_to_json`: a filtered JSON array holding only the
  proposals that should be applied (accepted and modified).

Undecided proposals are left out of both.
"""

import json
from typing import Any, Iterable

from box3review.proposals import ChangeProposal, UserDecision

ACCEPTED_HEADER = "=== GEACCEPTEERDE WIJZIGINGEN ==="
MODIFIED_HEADER = "=== AANGEPASTE WIJZIGINGEN ==="
REJECTED_HEADER = "=== AFGEWEZEN WIJZIGINGEN (NEGEER DEZE) ==="

REJECTED_PREVIEW_CHARS = 100


def _by_decision(
    proposals: Iterable[ChangeProposal], decision: UserDecision
) -> list[ChangeProposal]:
    return [p for p in proposals if p.user_decision == decision]


def _entry_heading(position: int, proposal: ChangeProposal) -> str:
    return f"{position}. [{proposal.section}] {proposal.change_type.value.upper()}\n"


def _render_accepted(proposals: list[ChangeProposal]) -> str:
    out = f"{ACCEPTED_HEADER}\n\n"
    for idx, p in enumerate(proposals, start=1):
        out += _entry_heading(idx, p)
        if p.original:
            out += f"   Oud: {p.original}\n"
        out += f"   Nieuw: {p.proposed}\n"
        out += f"   Reden: {p.reasoning}\n\n"
    return out


def _render_modified(proposals: list[ChangeProposal]) -> str:
    out = f"\n{MODIFIED_HEADER}\n\n"
    for idx, p in enumerate(proposals, start=1):
        out += _entry_heading(idx, p)
        if p.original:
            out += f"   Oud: {p.original}\n"
        out += f"   Nieuw: {p.user_note or p.proposed}\n"
        out += f"   Reden: {p.reasoning}\n"
        if p.user_note:
            out += f"   Aanpassing gebruiker: {p.user_note}\n"
        out += "\n"
    return out


def _render_rejected(proposals: list[ChangeProposal]) -> str:
    out = f"\n{REJECTED_HEADER}\n\n"
    for idx, p in enumerate(proposals, start=1):
        preview = p.proposed[:REJECTED_PREVIEW_CHARS]
        out += f"{idx}. [{p.section}] - {preview}...\n"
    return out


def serialize_proposals(proposals: Iterable[ChangeProposal]) -> str:
    """Render decided proposals as an instruction block.

    Buckets are emitted in the order accepted, modified, rejected; a bucket
    without proposals is omitted entirely. Rejected proposals are listed
    only by section and a short preview so the generator knows to skip them.

    Args:
        proposals: Proposals, typically after human review.

    Returns:
        Instruction text, empty when no proposal carries a decision.
    """
    proposals = list(proposals)
    accepted = _by_decision(proposals, UserDecision.ACCEPT)
    modified = _by_decision(proposals, UserDecision.MODIFY)
    rejected = _by_decision(proposals, UserDecision.REJECT)

    result = ""
    if accepted:
        result += _render_accepted(accepted)
    if modified:
        result += _render_modified(modified)
    if rejected:
        result += _render_rejected(rejected)
    return result


def _json_entry(p: ChangeProposal) -> dict[str, Any]:
    modified = p.user_decision == UserDecision.MODIFY
    entry = {
        "id": p.id,
        "type": p.change_type.value,
        "section": p.section,
        "oude_tekst": p.original or "",
        "nieuwe_tekst": p.user_note if modified and p.user_note else p.proposed,
        "rationale": p.reasoning,
        "severity": p.severity.value,
    }
    if modified and p.user_note is not None:
        entry["userModified"] = p.user_note
    return entry


def serialize_proposals_to_json(proposals: Iterable[ChangeProposal]) -> str:
    """Render accepted and modified proposals as a JSON array for the editor.

    Rejected and undecided proposals are filtered out. For modified
    proposals the reviewer's note replaces the proposed text.
    """
    wanted = (UserDecision.ACCEPT, UserDecision.MODIFY)
    entries = [_json_entry(p) for p in proposals if p.user_decision in wanted]
    return json.dumps(entries, indent=2, ensure_ascii=False)


__all__ = [
    "ACCEPTED_HEADER",
    "MODIFIED_HEADER",
    "REJECTED_HEADER",
    "serialize_proposals",
    "serialize_proposals_to_json",
]
