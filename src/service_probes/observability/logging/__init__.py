"""Structured logging configuration and utilities."""

from .config import LogFormat, LogLevel, get_logger, setup_logging
from .context import bind_request_id, clear_request_context, generate_request_id

__all__ = [
    "setup_logging",
    "LogLevel",
    "LogFormat",
    "get_logger",
    "bind_request_id",
    "clear_request_context",
    "generate_request_id",
]
