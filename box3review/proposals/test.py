"""Tests for change proposal models and decision helpers."""

import pytest
from pydantic import ValidationError

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


def _proposal(idx: int, severity: Severity = Severity.SUGGESTION, **kwargs):
    return ChangeProposal(
        id=f"4a-{idx}",
        specialist="Bronnen Review",
        proposed=f"Voorstel {idx}",
        severity=severity,
        **kwargs,
    )


@pytest.fixture
def proposals() -> list[ChangeProposal]:
    return [
        _proposal(0, Severity.CRITICAL),
        _proposal(1, Severity.IMPORTANT),
        _proposal(2, Severity.SUGGESTION),
        _proposal(3, Severity.CRITICAL, userDecision="reject"),
    ]


class TestChangeProposal:
    """Tests for the ChangeProposal model."""

    @pytest.mark.unit
    def test_defaults(self):
        p = ChangeProposal(id="x-0", specialist="s")
        assert p.change_type == ChangeType.MODIFY
        assert p.section == DEFAULT_SECTION
        assert p.original == ""
        assert p.proposed == ""
        assert p.reasoning == DEFAULT_REASONING
        assert p.severity == Severity.SUGGESTION
        assert p.user_decision is None
        assert p.user_note is None

    @pytest.mark.unit
    def test_accepts_camel_case_keys(self):
        p = ChangeProposal.model_validate(
            {
                "id": "x-1",
                "specialist": "s",
                "changeType": "add",
                "userDecision": "modify",
                "userNote": "eigen tekst",
            }
        )
        assert p.change_type == ChangeType.ADD
        assert p.user_decision == UserDecision.MODIFY
        assert p.user_note == "eigen tekst"

    @pytest.mark.unit
    def test_to_dict_uses_camel_case(self):
        data = ChangeProposal(id="x-2", specialist="s", change_type="delete").to_dict()
        assert data["changeType"] == "delete"
        assert data["severity"] == "suggestion"
        assert "userDecision" in data
        assert "change_type" not in data

    @pytest.mark.unit
    def test_rejects_unknown_change_type(self):
        with pytest.raises(ValidationError):
            ChangeProposal(id="x-3", specialist="s", change_type="rewrite")

    @pytest.mark.unit
    def test_rejects_empty_id(self):
        with pytest.raises(ValidationError):
            ChangeProposal(id="", specialist="s")

    @pytest.mark.unit
    def test_is_frozen(self):
        p = ChangeProposal(id="x-4", specialist="s")
        with pytest.raises(ValidationError):
            p.proposed = "nieuw"

    @pytest.mark.unit
    def test_with_decision_returns_copy(self):
        p = ChangeProposal(id="x-5", specialist="s")
        decided = p.with_decision("modify", "aangepast")
        assert decided.user_decision == UserDecision.MODIFY
        assert decided.user_note == "aangepast"
        assert p.user_decision is None


class TestApplyDecision:
    """Tests for apply_decision."""

    @pytest.mark.unit
    def test_decides_matching_proposal(self, proposals):
        updated = apply_decision(proposals, "4a-1", "accept")
        assert updated[1].user_decision == UserDecision.ACCEPT
        assert updated[0].user_decision is None
        assert proposals[1].user_decision is None

    @pytest.mark.unit
    def test_note_is_recorded(self, proposals):
        updated = apply_decision(proposals, "4a-2", UserDecision.MODIFY, "nieuwe tekst")
        assert updated[2].user_note == "nieuwe tekst"

    @pytest.mark.unit
    def test_unknown_id_leaves_list_unchanged(self, proposals):
        assert apply_decision(proposals, "missing", "accept") == proposals

    @pytest.mark.unit
    def test_unknown_decision_raises(self, proposals):
        with pytest.raises(ValueError):
            apply_decision(proposals, "4a-0", "maybe")


class TestBulkDecide:
    """Tests for bulk_decide."""

    @pytest.mark.unit
    def test_all_skips_decided(self, proposals):
        updated = bulk_decide(proposals, "accept")
        assert [p.user_decision for p in updated] == [
            UserDecision.ACCEPT,
            UserDecision.ACCEPT,
            UserDecision.ACCEPT,
            UserDecision.REJECT,
        ]

    @pytest.mark.unit
    def test_by_severity(self, proposals):
        updated = bulk_decide(proposals, "reject", severity="critical")
        assert updated[0].user_decision == UserDecision.REJECT
        assert updated[1].user_decision is None
        assert updated[2].user_decision is None

    @pytest.mark.unit
    def test_unknown_severity_raises(self, proposals):
        with pytest.raises(ValueError):
            bulk_decide(proposals, "accept", severity="urgent")


class TestCounts:
    """Tests for counting helpers."""

    @pytest.mark.unit
    def test_count_decisions(self, proposals):
        updated = apply_decision(proposals, "4a-0", "accept")
        assert count_decisions(updated) == {
            "accept": 1,
            "reject": 1,
            "modify": 0,
            "pending": 2,
        }

    @pytest.mark.unit
    def test_count_pending_by_severity(self, proposals):
        assert count_pending_by_severity(proposals) == {
            "critical": 1,
            "important": 1,
            "suggestion": 1,
        }

    @pytest.mark.unit
    def test_has_decisions(self, proposals):
        assert has_decisions(proposals)
        assert not has_decisions(proposals[:3])
