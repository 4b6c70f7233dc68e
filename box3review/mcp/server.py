"""FastMCP server instance for box3-review.

Exposes the review workflow to LLM clients:

    1. parse_feedback: reviewer output → structured change proposals
    2. serialize_decisions: reviewed proposals → apply-changes instructions
    3. summarize_stage: reviewer output → compact express-mode summary

Usage:
    python . mcp run
    python . mcp serve --port 18080
"""

import logging
from typing import Any

from fastmcp import FastMCP

from .lib import SERVER_NAME, ServerConfig, TransportType, get_server_version

logger = logging.getLogger(__name__)


SERVER_INSTRUCTIONS = """\
## Box 3 Review Server

Turns AI reviewer feedback on Box 3 fiscal reports into change proposals
and renders reviewed proposals into instructions for the report editor.

### Workflow
1. `parse_feedback(raw_feedback, stage_id)` → proposals with ids
2. Present proposals; record `userDecision` (accept/reject/modify) and,
   for modify, the edited text in `userNote`
3. `serialize_decisions(proposals)` → instruction text for the editor
   (or `format="json"` for the filtered change list)

### Other tools
- `summarize_stage(stage_id, raw_feedback)` - short change list per stage
- `list_stages()` - known workflow stages
- `status()` - server version
"""

mcp = FastMCP(
    name=SERVER_NAME,
    instructions=SERVER_INSTRUCTIONS,
)


@mcp.tool
def parse_feedback(
    raw_feedback: str,
    stage_id: str,
    specialist: str | None = None,
) -> dict[str, Any]:
    """Parse reviewer feedback into structured change proposals.

    Accepts JSON (a list of proposals or {"proposals": [...]}) or free text
    with numbered items, bullets, and keyword lines. Always returns at
    least one proposal.

    Args:
        raw_feedback: Reviewer output.
        stage_id: Workflow stage id, used as the proposal id prefix.
        specialist: Reviewer label (default: the stage's display name).
    """
    from .tools import parse_feedback as _parse

    return _parse(raw_feedback=raw_feedback, stage_id=stage_id, specialist=specialist)


@mcp.tool
def serialize_decisions(
    proposals: list[dict[str, Any]],
    format: str = "text",
) -> dict[str, Any]:
    """Render reviewed proposals as instructions for the report editor.

    Args:
        proposals: Proposals from parse_feedback with `userDecision` set.
        format: "text" (grouped instruction block) or "json" (accepted and
            modified changes only).
    """
    from .tools import serialize_decisions as _serialize

    return _serialize(proposals=proposals, format=format)


@mcp.tool
def summarize_stage(
    stage_id: str,
    raw_feedback: str,
    processing_time_ms: int | None = None,
) -> dict[str, Any]:
    """Summarize a reviewer stage's feedback as a short list of changes."""
    from .tools import summarize_stage as _summarize

    return _summarize(
        stage_id=stage_id,
        raw_feedback=raw_feedback,
        processing_time_ms=processing_time_ms,
    )


@mcp.tool
def list_stages() -> dict[str, Any]:
    """List known workflow stages."""
    from .tools import list_stages as _list_stages

    return _list_stages()


@mcp.tool
def status() -> dict[str, Any]:
    """Report server name and version."""
    return {"name": SERVER_NAME, "version": get_server_version(), "ready": True}


def create_server() -> FastMCP:
    """Create and configure the MCP server instance."""
    return mcp


def run_server(config: ServerConfig | None = None) -> None:
    """Run the MCP server.

    Args:
        config: Transport and bind settings (default: STDIO, with host and
            port from the environment).
    """
    config = config or ServerConfig.from_env()
    logger.info(f"Starting {SERVER_NAME} server v{get_server_version()}")
    logger.info(f"Transport: {config.transport.value}")

    if config.transport == TransportType.STDIO:
        mcp.run()
        return

    logger.info(f"Listening at {config.url}")
    if config.transport == TransportType.HTTP:
        mcp.run(transport="http", host=config.host, port=config.port, path=config.path)
    elif config.transport == TransportType.SSE:
        mcp.run(transport="sse", host=config.host, port=config.port)
    else:
        raise ValueError(f"Unknown transport: {config.transport}")
