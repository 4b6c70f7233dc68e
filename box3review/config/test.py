"""Tests for configuration management."""

import logging

import pytest

from .lib import (
    EnvConfig,
    EnvVar,
    get_default_specialist,
    get_default_stage,
    get_environment,
    get_environment_info,
    get_log_level,
    list_environment_variables,
)

# =============================================================================
# Tests for get_environment (main interface)
# =============================================================================


class TestGetEnvironment:
    """Tests for the unified get_environment interface."""

    @pytest.mark.unit
    def test_returns_default_when_not_set(self, monkeypatch):
        """Returns default value when env var is not set."""
        monkeypatch.delenv("MCP_PORT", raising=False)
        assert get_environment(EnvVar.MCP_PORT) == 18080

    @pytest.mark.unit
    def test_override_takes_priority(self, monkeypatch):
        """Override parameter takes highest priority."""
        monkeypatch.setenv("MCP_PORT", "9999")
        assert get_environment(EnvVar.MCP_PORT, override=5000) == 5000

    @pytest.mark.unit
    def test_env_var_overrides_default(self, monkeypatch):
        """Environment variable overrides default value."""
        monkeypatch.setenv("MCP_PORT", "12345")
        result = get_environment(EnvVar.MCP_PORT)
        assert result == 12345
        assert isinstance(result, int)

    @pytest.mark.unit
    def test_invalid_int_falls_back_to_default(self, monkeypatch):
        """Unparseable integers return the default."""
        monkeypatch.setenv("MCP_PORT", "not-a-port")
        assert get_environment(EnvVar.MCP_PORT) == 18080

    @pytest.mark.unit
    def test_string_value(self, monkeypatch):
        """String variables are returned verbatim."""
        monkeypatch.setenv("REVIEW_DEFAULT_STAGE", "4a_BronnenSpecialist")
        assert get_environment(EnvVar.REVIEW_DEFAULT_STAGE) == "4a_BronnenSpecialist"


class TestConvenienceFunctions:
    """Tests for the review and logging helpers."""

    @pytest.mark.unit
    def test_default_specialist(self, monkeypatch):
        monkeypatch.delenv("REVIEW_DEFAULT_SPECIALIST", raising=False)
        assert get_default_specialist() == "Reviewer"
        assert get_default_specialist("Fiscaal Technisch") == "Fiscaal Technisch"

    @pytest.mark.unit
    def test_default_stage(self, monkeypatch):
        monkeypatch.delenv("REVIEW_DEFAULT_STAGE", raising=False)
        assert get_default_stage() == "feedback"

    @pytest.mark.unit
    def test_log_level_from_env(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert get_log_level() == logging.DEBUG

    @pytest.mark.unit
    def test_unknown_log_level_is_info(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "verbose")
        assert get_log_level() == logging.INFO


class TestIntrospection:
    """Tests for metadata and listing helpers."""

    @pytest.mark.unit
    def test_environment_info(self):
        info = get_environment_info(EnvVar.MCP_HOST)
        assert isinstance(info, EnvConfig)
        assert info.name == "MCP_HOST"
        assert info.default == "0.0.0.0"

    @pytest.mark.unit
    def test_list_all(self):
        assert set(list_environment_variables()) == set(EnvVar)

    @pytest.mark.unit
    def test_list_by_category(self):
        review_vars = list_environment_variables("review")
        assert EnvVar.REVIEW_DEFAULT_STAGE in review_vars
        assert EnvVar.MCP_PORT not in review_vars

    @pytest.mark.unit
    def test_env_names_match_members(self):
        """Every member's config name matches the member name."""
        for var in EnvVar:
            assert var.value.name == var.name

    @pytest.mark.unit
    def test_service_category_holds_mcp_settings(self):
        assert set(list_environment_variables("service")) == {
            EnvVar.MCP_HOST,
            EnvVar.MCP_PORT,
        }

    @pytest.mark.unit
    def test_variables_are_str_or_int(self):
        assert {var.value.var_type for var in EnvVar} <= {str, int}
