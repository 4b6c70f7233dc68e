"""Unit tests for MCP server module.

Tests cover:
- Server configuration
- Tool implementations
- Tool registration over the MCP protocol
"""

import json

import pytest

from .lib import SERVER_NAME, ServerConfig, TransportType, get_server_version
from .server import create_server, mcp, run_server
from .tools import list_stages, parse_feedback, serialize_decisions, summarize_stage

# =============================================================================
# Configuration Tests
# =============================================================================


class TestServerConfig:
    """Tests for ServerConfig dataclass."""

    @pytest.mark.unit
    def test_default_config(self):
        config = ServerConfig()

        assert config.transport == TransportType.STDIO
        assert config.host == "0.0.0.0"
        assert config.port == 18080
        assert config.path == "/mcp"

    @pytest.mark.unit
    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("MCP_HOST", "127.0.0.1")
        monkeypatch.setenv("MCP_PORT", "19090")
        config = ServerConfig.from_env(transport=TransportType.HTTP)

        assert config.transport == TransportType.HTTP
        assert config.host == "127.0.0.1"
        assert config.port == 19090

    @pytest.mark.unit
    def test_url(self):
        http = ServerConfig(transport=TransportType.HTTP, host="localhost", path="/r")
        sse = ServerConfig(transport=TransportType.SSE, host="localhost", port=9000)

        assert http.url == "http://localhost:18080/r"
        assert sse.url == "http://localhost:9000"
        assert ServerConfig().url == ""

    @pytest.mark.unit
    def test_version_format(self):
        assert len(get_server_version().split(".")) == 3


class TestServerInstance:
    """Tests for server creation and startup."""

    @pytest.fixture
    def run_calls(self, monkeypatch):
        calls = []
        monkeypatch.setattr(mcp, "run", lambda **kwargs: calls.append(kwargs))
        return calls

    @pytest.mark.unit
    def test_create_server_returns_instance(self):
        assert create_server() is mcp
        assert mcp.name == SERVER_NAME

    @pytest.mark.unit
    def test_run_stdio(self, run_calls):
        run_server(ServerConfig())
        assert run_calls == [{}]

    @pytest.mark.unit
    def test_run_http_uses_config(self, run_calls):
        run_server(
            ServerConfig(
                transport=TransportType.HTTP, host="127.0.0.1", port=9001, path="/r"
            )
        )
        assert run_calls == [
            {"transport": "http", "host": "127.0.0.1", "port": 9001, "path": "/r"}
        ]

    @pytest.mark.unit
    def test_run_defaults_from_env(self, monkeypatch, run_calls):
        monkeypatch.setenv("MCP_PORT", "19191")
        run_server(ServerConfig.from_env(transport=TransportType.SSE))
        assert run_calls == [{"transport": "sse", "host": "0.0.0.0", "port": 19191}]


# =============================================================================
# Tool Tests
# =============================================================================


class TestParseFeedbackTool:
    """Tests for the parse_feedback tool."""

    @pytest.mark.unit
    def test_returns_camel_case_proposals(self):
        result = parse_feedback("1. Doe X\n\n2. Doe Y", stage_id="4a_BronnenSpecialist")

        assert result["count"] == 2
        assert result["proposals"][0]["id"] == "4a_BronnenSpecialist-0"
        assert result["proposals"][0]["changeType"] == "modify"

    @pytest.mark.unit
    def test_specialist_defaults_to_stage_name(self):
        result = parse_feedback("- x", stage_id="4e_DeAdvocaat")
        assert result["proposals"][0]["specialist"] == "Juridisch Review"

    @pytest.mark.unit
    def test_explicit_specialist(self):
        result = parse_feedback("- x", stage_id="s", specialist="Eigen")
        assert result["proposals"][0]["specialist"] == "Eigen"


class TestSerializeDecisionsTool:
    """Tests for the serialize_decisions tool."""

    @pytest.fixture
    def reviewed(self):
        proposals = parse_feedback("1. Doe X\n\n2. Doe Y", stage_id="st")["proposals"]
        proposals[0]["userDecision"] = "accept"
        proposals[1]["userDecision"] = "reject"
        return proposals

    @pytest.mark.unit
    def test_text_format(self, reviewed):
        result = serialize_decisions(reviewed)

        assert result["format"] == "text"
        assert "GEACCEPTEERDE WIJZIGINGEN" in result["output"]
        assert "AANGEPASTE WIJZIGINGEN" not in result["output"]
        assert result["counts"]["accept"] == 1
        assert result["counts"]["reject"] == 1

    @pytest.mark.unit
    def test_json_format(self, reviewed):
        result = serialize_decisions(reviewed, format="json")
        entries = json.loads(result["output"])
        assert [e["nieuwe_tekst"] for e in entries] == ["Doe X"]

    @pytest.mark.unit
    def test_invalid_format(self, reviewed):
        with pytest.raises(ValueError, match="Invalid format"):
            serialize_decisions(reviewed, format="xml")

    @pytest.mark.unit
    def test_invalid_proposal(self):
        with pytest.raises(ValueError, match="Invalid proposal at index 0"):
            serialize_decisions([{"id": "x", "specialist": "s", "severity": "urgent"}])


class TestSummaryTools:
    """Tests for summarize_stage and list_stages."""

    @pytest.mark.unit
    def test_summarize_stage(self):
        result = summarize_stage("4b_FiscaalTechnischSpecialist", "KRITIEK: rekenfout")

        assert result["stageName"] == "Fiscaal Technisch"
        assert result["changesCount"] == 1
        assert result["changes"][0]["severity"] == "critical"

    @pytest.mark.unit
    def test_list_stages(self):
        stages = {s["id"]: s for s in list_stages()["stages"]}
        assert stages["4c_ScenarioGatenAnalist"]["review"] is True
        assert stages["editor"]["review"] is False


# =============================================================================
# MCP Protocol Integration Tests (require async)
# =============================================================================


@pytest.mark.mcp
class TestMCPProtocol:
    """Integration tests using the in-memory MCP client."""

    @pytest.mark.asyncio
    async def test_client_can_list_tools(self, mcp_client):
        tools = await mcp_client.list_tools()

        tool_names = [t.name for t in tools]
        assert "parse_feedback" in tool_names
        assert "serialize_decisions" in tool_names
        assert "summarize_stage" in tool_names
        assert "status" in tool_names

    @pytest.mark.asyncio
    async def test_client_can_call_parse_feedback(self, mcp_client):
        result = await mcp_client.call_tool(
            "parse_feedback",
            {"raw_feedback": "KRITIEK: herzie paragraaf 3", "stage_id": "4a"},
        )
        assert result is not None

    @pytest.mark.asyncio
    async def test_invalid_format_is_reported(self, mcp_client):
        with pytest.raises(Exception, match="Invalid format"):
            await mcp_client.call_tool(
                "serialize_decisions", {"proposals": [], "format": "xml"}
            )
