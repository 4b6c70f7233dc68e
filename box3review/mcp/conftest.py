"""Pytest fixtures for MCP server tests."""

from __future__ import annotations

from typing import AsyncGenerator

import pytest
from fastmcp import Client, FastMCP


@pytest.fixture
def mcp_server() -> FastMCP:
    """Create MCP server instance for testing."""
    from .server import create_server

    return create_server()


@pytest.fixture
async def mcp_client(mcp_server: FastMCP) -> AsyncGenerator[Client, None]:
    """Create connected in-memory MCP client for testing."""
    async with Client(mcp_server) as client:
        yield client
