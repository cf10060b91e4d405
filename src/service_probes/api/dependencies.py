"""Shared API dependencies."""

from fastapi import Request

from service_probes.core.probe import ProbeProcedure


def get_probe_procedure(request: Request) -> ProbeProcedure:
    """Get the probe procedure built at application startup."""
    return request.app.state.probe_procedure  # type: ignore[no-any-return]
