"""MCP (Model Context Protocol) server for box3-review.

Exposes feedback parsing and decision serialization to LLM clients.

Example:
    # Start server in STDIO mode
    >>> from box3review.mcp import run_server
    >>> run_server()

    # Start server in HTTP mode
    >>> from box3review.mcp import ServerConfig, TransportType, run_server
    >>> run_server(ServerConfig(transport=TransportType.HTTP, port=18080))

Available Tools:
    - parse_feedback: Reviewer output to change proposals
    - serialize_decisions: Reviewed proposals to editor instructions
    - summarize_stage: Compact change list per stage
    - list_stages: Known workflow stages
    - status: Server metadata
"""

from .lib import SERVER_NAME, ServerConfig, TransportType, get_server_version
from .server import create_server, mcp, run_server

__all__ = [
    # Server instance
    "mcp",
    "create_server",
    "run_server",
    # Configuration
    "SERVER_NAME",
    "ServerConfig",
    "TransportType",
    # Utilities
    "get_server_version",
]
