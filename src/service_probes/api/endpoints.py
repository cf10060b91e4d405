"""Probe endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import PlainTextResponse

from service_probes.api.dependencies import get_probe_procedure
from service_probes.core.probe import ProbeProcedure

router = APIRouter(tags=["probe"])


@router.get("/", response_class=PlainTextResponse)
async def probe(
    procedure: Annotated[ProbeProcedure, Depends(get_probe_procedure)],
) -> PlainTextResponse:
    """Run one probe: 200 when the round trip succeeded, 424 otherwise."""
    result = await procedure.run()
    name = procedure.definition.display_name

    if result.success:
        return PlainTextResponse(
            f"{name} service is OK", status_code=status.HTTP_200_OK
        )

    return PlainTextResponse(
        f"Failed to access {name}: {result.error}",
        status_code=status.HTTP_424_FAILED_DEPENDENCY,
    )
