"""FastAPI application entry point."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI

from . import __description__, __version__
from .api.endpoints import router
from .api.middleware import RequestContextMiddleware, RequestLoggingMiddleware
from .config.settings import ProbeSettings, get_settings
from .core.factory import ProbeFactory
from .core.probe import ProbeProcedure
from .observability.logging import setup_logging

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Log probe service startup and shutdown."""
    settings: ProbeSettings = app.state.settings
    procedure: ProbeProcedure = app.state.probe_procedure
    logger.info(
        "Probe service starting",
        backend=procedure.definition.backend.value,
        service_name=procedure.definition.service_name,
        environment=settings.environment.value,
        port=settings.port,
    )
    yield
    logger.info("Probe service stopped")


def create_app(
    settings: ProbeSettings | None = None,
    procedure: ProbeProcedure | None = None,
) -> FastAPI:
    """
    Create the probe application.

    Settings are read once here and the probe procedure is built from them,
    so requests never consult the environment directly.
    """
    settings = settings or get_settings()
    setup_logging(level=settings.log_level, format_type=settings.log_format)
    procedure = procedure or ProbeFactory.create_probe(settings)

    app = FastAPI(
        title=settings.app_name,
        description=__description__,
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.probe_procedure = procedure

    # Outermost last: the request ID is bound before the request is logged
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestContextMiddleware)

    app.include_router(router)
    return app


def run() -> None:
    """Start the probe service on the configured port."""
    settings = get_settings()
    app = create_app(settings)
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.value.lower(),
        access_log=False,
    )


if __name__ == "__main__":
    run()
