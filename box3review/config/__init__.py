"""Centralized configuration management for box3-review.

Provides unified access to all configuration via the `get_environment()` function.

Example:
    >>> from box3review.config import EnvVar, get_environment
    >>>
    >>> port = get_environment(EnvVar.MCP_PORT)  # Returns int: 18080
    >>> port = get_environment(EnvVar.MCP_PORT, override=9000)

Environment Variable Categories:
    review: Default specialist and stage labels for parsed proposals
    logging: Log level
    service: MCP server bind address and port
"""

from .lib import (
    # Core types
    EnvConfig,
    EnvVar,
    # Main interface
    get_default_specialist,
    get_default_stage,
    get_environment,
    get_environment_info,
    get_log_level,
    # Introspection
    list_environment_variables,
)

__all__ = [
    # Core types
    "EnvConfig",
    "EnvVar",
    # Main interface
    "get_environment",
    "get_environment_info",
    # Convenience functions
    "get_default_specialist",
    "get_default_stage",
    "get_log_level",
    # Introspection
    "list_environment_variables",
]
