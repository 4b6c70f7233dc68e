"""Logging micro API for box3-review."""

from .lib import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
