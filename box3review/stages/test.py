"""Tests for the stage registry."""

import pytest

from .lib import (
    REVIEW_STAGES,
    STAGE_NAMES,
    STAGE_ORDER,
    get_stage_name,
    is_review_stage,
    is_valid_stage_id,
)


class TestStageRegistry:
    """Tests for stage lookups."""

    @pytest.mark.unit
    def test_known_stage_name(self):
        assert get_stage_name("4c_ScenarioGatenAnalist") == "Scenario Analyse"

    @pytest.mark.unit
    def test_unknown_stage_returns_id(self):
        assert get_stage_name("9_onbekend") == "9_onbekend"

    @pytest.mark.unit
    def test_review_stages(self):
        assert is_review_stage("4e_DeAdvocaat")
        assert not is_review_stage("3_generatie")
        assert not is_review_stage("editor")

    @pytest.mark.unit
    def test_valid_stage_ids(self):
        assert is_valid_stage_id("editor")
        assert not is_valid_stage_id("")

    @pytest.mark.unit
    def test_every_ordered_stage_has_a_name(self):
        assert all(stage in STAGE_NAMES for stage in STAGE_ORDER)

    @pytest.mark.unit
    def test_review_stages_are_in_workflow_order(self):
        positions = [STAGE_ORDER.index(stage) for stage in REVIEW_STAGES]
        assert positions == sorted(positions)
