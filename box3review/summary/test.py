"""Tests for stage summaries."""

import pytest

from box3review.proposals import ChangeProposal, ChangeType, Severity

from .lib import proposal_to_change, summarize_feedback, truncate


class TestTruncate:
    """Tests for truncate."""

    @pytest.mark.unit
    def test_short_text_unchanged(self):
        assert truncate("kort", 10) == "kort"

    @pytest.mark.unit
    def test_long_text_cut(self):
        result = truncate("a" * 20, 10)
        assert result == "aaaaaaa..."
        assert len(result) == 10

    @pytest.mark.unit
    def test_empty(self):
        assert truncate("", 10) == ""


class TestProposalToChange:
    """Tests for converting proposals into summary changes."""

    @pytest.mark.unit
    def test_general_section_omitted(self):
        change = proposal_to_change(
            ChangeProposal(id="x-0", specialist="s", proposed="Iets")
        )
        assert change.section is None
        assert change.original is None
        assert change.description == "Iets"

    @pytest.mark.unit
    def test_fields_truncated(self):
        change = proposal_to_change(
            ChangeProposal(
                id="x-1",
                specialist="s",
                section="S" * 150,
                original="O" * 400,
                proposed="P" * 400,
                reasoning="R" * 250,
                change_type=ChangeType.ADD,
                severity=Severity.CRITICAL,
            )
        )
        assert len(change.section) == 100
        assert len(change.original) == 300
        assert len(change.description) == 300
        assert len(change.reasoning) == 200
        assert change.type == ChangeType.ADD
        assert change.severity == Severity.CRITICAL

    @pytest.mark.unit
    def test_description_falls_back_to_reasoning(self):
        change = proposal_to_change(
            ChangeProposal(id="x-2", specialist="s", proposed="", reasoning="Waarom")
        )
        assert change.description == "Waarom"


class TestSummarizeFeedback:
    """Tests for summarize_feedback."""

    @pytest.mark.unit
    def test_summary(self):
        summary = summarize_feedback(
            "4a_BronnenSpecialist",
            "1. Voeg bron toe\nSectie: Bronnen\n\n2. Herzie tabel",
            processing_time_ms=1200,
        )
        assert summary.stage_name == "Bronnen Review"
        assert summary.changes_count == 2
        assert summary.changes[0].section == "Bronnen"
        assert summary.changes[1].section is None
        assert summary.processing_time_ms == 1200

    @pytest.mark.unit
    def test_json_dump_uses_camel_case(self):
        summary = summarize_feedback("editor", "Prima rapport.")
        data = summary.model_dump(mode="json", by_alias=True)
        assert data["stageId"] == "editor"
        assert data["stageName"] == "Feedback Verwerker"
        assert data["changesCount"] == 1
        assert data["processingTimeMs"] is None
