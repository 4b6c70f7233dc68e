"""Tests for proposal serialization."""

import json

import pytest

from box3review.proposals import ChangeProposal, ChangeType, Severity

from .lib import (
    ACCEPTED_HEADER,
    MODIFIED_HEADER,
    REJECTED_HEADER,
    serialize_proposals,
    serialize_proposals_to_json,
)


def _proposal(idx: int, decision=None, note=None, **kwargs) -> ChangeProposal:
    fields = {
        "id": f"4b-{idx}",
        "specialist": "Fiscaal Technisch",
        "section": f"Sectie {idx}",
        "proposed": f"Nieuwe tekst {idx}",
        "reasoning": f"Reden {idx}",
        "user_decision": decision,
        "user_note": note,
    }
    fields.update(kwargs)
    return ChangeProposal(**fields)


class TestSerializeProposals:
    """Tests for the text instruction block."""

    @pytest.mark.unit
    def test_accepted_and_rejected(self):
        text = serialize_proposals(
            [_proposal(0, "accept"), _proposal(1, "reject")]
        )
        assert ACCEPTED_HEADER in text
        assert REJECTED_HEADER in text
        assert MODIFIED_HEADER not in text

    @pytest.mark.unit
    def test_accepted_entry_format(self):
        text = serialize_proposals(
            [_proposal(0, "accept", original="Oude tekst", change_type=ChangeType.ADD)]
        )
        assert text == (
            "=== GEACCEPTEERDE WIJZIGINGEN ===\n\n"
            "1. [Sectie 0] ADD\n"
            "   Oud: Oude tekst\n"
            "   Nieuw: Nieuwe tekst 0\n"
            "   Reden: Reden 0\n\n"
        )

    @pytest.mark.unit
    def test_original_omitted_when_empty(self):
        text = serialize_proposals([_proposal(0, "accept")])
        assert "Oud:" not in text

    @pytest.mark.unit
    def test_modified_entry_uses_note(self):
        text = serialize_proposals([_proposal(0, "modify", note="Mijn versie")])
        assert text == (
            "\n=== AANGEPASTE WIJZIGINGEN ===\n\n"
            "1. [Sectie 0] MODIFY\n"
            "   Nieuw: Mijn versie\n"
            "   Reden: Reden 0\n"
            "   Aanpassing gebruiker: Mijn versie\n\n"
        )

    @pytest.mark.unit
    def test_modified_without_note_uses_proposed(self):
        text = serialize_proposals([_proposal(0, "modify")])
        assert "Nieuw: Nieuwe tekst 0" in text
        assert "Aanpassing gebruiker" not in text

    @pytest.mark.unit
    def test_rejected_is_abbreviated(self):
        long_text = "x" * 150
        text = serialize_proposals([_proposal(3, "reject", proposed=long_text)])
        assert text == (
            "\n=== AFGEWEZEN WIJZIGINGEN (NEGEER DEZE) ===\n\n"
            f"1. [Sectie 3] - {'x' * 100}...\n"
        )

    @pytest.mark.unit
    def test_bucket_order_and_numbering(self):
        text = serialize_proposals(
            [
                _proposal(0, "reject"),
                _proposal(1, "accept"),
                _proposal(2, "modify"),
                _proposal(3, "accept"),
            ]
        )
        accepted_at = text.index(ACCEPTED_HEADER)
        modified_at = text.index(MODIFIED_HEADER)
        rejected_at = text.index(REJECTED_HEADER)
        assert accepted_at < modified_at < rejected_at
        assert "1. [Sectie 1]" in text
        assert "2. [Sectie 3]" in text

    @pytest.mark.unit
    def test_undecided_omitted(self):
        assert serialize_proposals([_proposal(0), _proposal(1)]) == ""

    @pytest.mark.unit
    def test_empty_input(self):
        assert serialize_proposals([]) == ""


class TestSerializeProposalsToJson:
    """Tests for the filtered JSON rendering."""

    @pytest.mark.unit
    def test_only_accepted_and_modified(self):
        data = json.loads(
            serialize_proposals_to_json(
                [
                    _proposal(0, "accept"),
                    _proposal(1, "reject"),
                    _proposal(2, "modify", note="Eigen tekst"),
                    _proposal(3),
                ]
            )
        )
        assert [entry["id"] for entry in data] == ["4b-0", "4b-2"]

    @pytest.mark.unit
    def test_entry_fields(self):
        [entry] = json.loads(
            serialize_proposals_to_json(
                [_proposal(0, "accept", original="oud", severity=Severity.CRITICAL)]
            )
        )
        assert entry == {
            "id": "4b-0",
            "type": "modify",
            "section": "Sectie 0",
            "oude_tekst": "oud",
            "nieuwe_tekst": "Nieuwe tekst 0",
            "rationale": "Reden 0",
            "severity": "critical",
        }

    @pytest.mark.unit
    def test_modified_note_replaces_text(self):
        [entry] = json.loads(
            serialize_proposals_to_json([_proposal(0, "modify", note="Eigen tekst")])
        )
        assert entry["nieuwe_tekst"] == "Eigen tekst"
        assert entry["userModified"] == "Eigen tekst"

    @pytest.mark.unit
    def test_non_ascii_preserved(self):
        text = serialize_proposals_to_json(
            [_proposal(0, "accept", proposed="Potentiële blinde vlek")]
        )
        assert "Potentiële" in text
