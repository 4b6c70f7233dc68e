"""Core MCP server logic for box3-review.

Provides configuration types for creating MCP server instances.
"""

from dataclasses import dataclass
from enum import Enum

from box3review.config import EnvVar, get_environment

SERVER_NAME = "box3-review"


class TransportType(str, Enum):
    """Supported MCP transport types."""

    STDIO = "stdio"
    HTTP = "http"
    SSE = "sse"


@dataclass
class ServerConfig:
    """Configuration for MCP server.

    Attributes:
        transport: Transport type for communication.
        host: Bind address for HTTP/SSE transports.
        port: Port for HTTP/SSE transports.
        path: URL path for HTTP transport.
    """

    transport: TransportType = TransportType.STDIO
    host: str = "0.0.0.0"
    port: int = 18080
    path: str = "/mcp"

    @classmethod
    def from_env(
        cls,
        transport: TransportType | None = None,
    ) -> "ServerConfig":
        """Create config from MCP_HOST and MCP_PORT.

        Args:
            transport: Override transport type (default: STDIO).
        """
        return cls(
            transport=transport or TransportType.STDIO,
            host=get_environment(EnvVar.MCP_HOST),
            port=get_environment(EnvVar.MCP_PORT),
        )

    @property
    def url(self) -> str:
        """Address clients connect to; empty for STDIO."""
        if self.transport == TransportType.STDIO:
            return ""
        if self.transport == TransportType.HTTP:
            return f"http://{self.host}:{self.port}{self.path}"
        return f"http://{self.host}:{self.port}"


def get_server_version() -> str:
    """Get server version string."""
    return "0.1.0"


__all__ = [
    "SERVER_NAME",
    "TransportType",
    "ServerConfig",
    "get_server_version",
]
