"""Request-scoped logging context."""

import uuid

import structlog


def generate_request_id() -> str:
    """Generate a new request ID."""
    return str(uuid.uuid4())


def bind_request_id(request_id: str) -> None:
    """Attach a request ID to every log event of the current context."""
    structlog.contextvars.bind_contextvars(request_id=request_id)


def clear_request_context() -> None:
    """Drop all request-scoped log fields."""
    structlog.contextvars.clear_contextvars()
