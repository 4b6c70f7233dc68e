"""Change proposal models and review decision helpers.

A change proposal is one actionable edit suggested by an AI reviewer for a
section of the concept report. Proposals are created by the feedback parser,
shown to a human reviewer, and carry the reviewer's decision until they are
serialized for the "apply changes" generation step.

Proposals are immutable from the caller's point of view: decision helpers
return updated copies rather than editing models in place.
"""

import logging
from enum import Enum
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

DEFAULT_SECTION = "Algemeen"
DEFAULT_REASONING = "Geen specifieke reden opgegeven"


class ChangeType(str, Enum):
    """Kind of edit a proposal makes to the report."""

    ADD = "add"
    MODIFY = "modify"
    DELETE = "delete"
    RESTRUCTURE = "restructure"


class Severity(str, Enum):
    """How urgently a proposal should be applied."""

    CRITICAL = "critical"
    IMPORTANT = "important"
    SUGGESTION = "suggestion"


class UserDecision(str, Enum):
    """Decision a human reviewer attaches to a proposal."""

    ACCEPT = "accept"
    REJECT = "reject"
    MODIFY = "modify"


class ChangeProposal(BaseModel):
    """A single structured change suggested by a reviewer stage.

    Field names are snake_case in Python; the JSON form uses the camelCase
    keys the review UI expects (`changeType`, `userDecision`, `userNote`).
    Both spellings are accepted on input.

    Attributes:
        id: Identifier, unique within a stage's proposal set.
        specialist: Name of the reviewer role that produced the proposal.
        change_type: Kind of edit.
        section: Report section the change applies to.
        original: Text fragment being replaced, possibly empty.
        proposed: Replacement or new text.
        reasoning: Justification given by the reviewer.
        severity: Urgency of the change.
        user_decision: Reviewer decision, unset until a human decides.
        user_note: Reviewer's edited text for modified proposals.

    Example:
        >>> p = ChangeProposal(id="4a-0", specialist="Bronnen Review",
        ...                    proposed="Voeg bronvermelding toe")
        >>> p.to_dict()["changeType"]
        'modify'
    """

    id: str = Field(..., min_length=1)
    specialist: str
    change_type: ChangeType = Field(default=ChangeType.MODIFY, alias="changeType")
    section: str = DEFAULT_SECTION
    original: str = ""
    proposed: str = ""
    reasoning: str = DEFAULT_REASONING
    severity: Severity = Severity.SUGGESTION
    user_decision: UserDecision | None = Field(default=None, alias="userDecision")
    user_note: str | None = Field(default=None, alias="userNote")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @property
    def is_decided(self) -> bool:
        return self.user_decision is not None

    def with_decision(
        self, decision: UserDecision | str, note: str | None = None
    ) -> "ChangeProposal":
        """Return a copy carrying the given decision and note."""
        return self.model_copy(
            update={"user_decision": UserDecision(decision), "user_note": note}
        )

    def to_dict(self) -> dict[str, Any]:
        """Dump to a JSON-ready dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# Decision Helpers
# =============================================================================


def apply_decision(
    proposals: Iterable[ChangeProposal],
    proposal_id: str,
    decision: UserDecision | str,
    note: str | None = None,
) -> list[ChangeProposal]:
    """Attach a decision to the proposal with the given id.

    Args:
        proposals: Current proposal set.
        proposal_id: Id of the proposal to decide.
        decision: Decision to record.
        note: Optional reviewer note (edited text for "modify").

    Returns:
        New list with the matching proposal replaced by a decided copy.

    Raises:
        ValueError: If `decision` is not a known decision.
    """
    decision = UserDecision(decision)
    updated = []
    found = False
    for proposal in proposals:
        if proposal.id == proposal_id:
            proposal = proposal.with_decision(decision, note)
            found = True
        updated.append(proposal)

    if not found:
        logger.debug(f"No proposal with id {proposal_id!r}; decision ignored")
    return updated


def bulk_decide(
    proposals: Iterable[ChangeProposal],
    decision: UserDecision | str,
    severity: Severity | str = "all",
) -> list[ChangeProposal]:
    """Decide every undecided proposal, optionally limited to one severity.

    Proposals that already carry a decision are left untouched.

    Raises:
        ValueError: If `decision` or `severity` is not a known value.
    """
    decision = UserDecision(decision)
    wanted = None if severity == "all" else Severity(severity)

    return [
        p.with_decision(decision)
        if not p.is_decided and (wanted is None or p.severity == wanted)
        else p
        for p in proposals
    ]


def count_decisions(proposals: Iterable[ChangeProposal]) -> dict[str, int]:
    """Count proposals per decision, with undecided ones under "pending"."""
    counts = {d.value: 0 for d in UserDecision}
    counts["pending"] = 0
    for proposal in proposals:
        key = proposal.user_decision.value if proposal.user_decision else "pending"
        counts[key] += 1
    return counts


def count_pending_by_severity(proposals: Iterable[ChangeProposal]) -> dict[str, int]:
    """Count undecided proposals per severity."""
    counts = {s.value: 0 for s in Severity}
    for proposal in proposals:
        if not proposal.is_decided:
            counts[proposal.severity.value] += 1
    return counts


def has_decisions(proposals: Iterable[ChangeProposal]) -> bool:
    return any(p.is_decided for p in proposals)


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
