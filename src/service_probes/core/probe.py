"""
Probe procedure.

A probe is a linear run through resolve credentials, connect, write the
canary, read it back and compare, clean up and close. Any stage can fail,
after which nothing further is attempted except releasing what was opened.
The connection is closed on every path once a client has been created, and
the canary is cleaned up whenever it was written.
"""

import time
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import TypeVar

import structlog

from service_probes.bindings.resolver import CredentialResolver, ServiceCredentials
from service_probes.clients.base import ProbeClient
from service_probes.domain.exceptions import (
    ConnectionError,
    CredentialError,
    ProbeError,
    ReadError,
    VerificationError,
    WriteError,
)
from service_probes.domain.models import ProbeDefinition, ProbeResult, ProbeState

logger = structlog.get_logger()

T = TypeVar("T")

ClientFactory = Callable[[], ProbeClient]


async def _guard(operation: Awaitable[T], error_cls: type[ProbeError]) -> T:
    """Await a client operation, mapping unexpected failures to error_cls."""
    try:
        return await operation
    except ProbeError:
        raise
    except Exception as e:
        raise error_cls(str(e) or type(e).__name__) from e


class ProbeProcedure:
    """Runs one round-trip health check against a backend per call."""

    def __init__(
        self,
        definition: ProbeDefinition,
        resolver: CredentialResolver,
        client_factory: ClientFactory,
    ):
        self.definition = definition
        self.resolver = resolver
        self.client_factory = client_factory
        self._logger = logger.bind(
            service=definition.display_name,
            backend=definition.backend.value,
            service_name=definition.service_name,
        )

    async def run(self) -> ProbeResult:
        """Perform the probe and report how far it got."""
        start_time = time.time()
        progress = _Progress()

        try:
            await self._perform(progress)
        except ProbeError as e:
            result = self._result(progress, start_time, error=e)
            self._logger.warning(
                "Probe failed", details=e.details, **result.to_dict()
            )
            return result

        result = self._result(progress, start_time)
        self._logger.info("Probe succeeded", **result.to_dict())
        return result

    async def _perform(self, progress: "_Progress") -> None:
        credentials = self._resolve()
        progress.advance(ProbeState.CREDENTIALS_RESOLVED)

        try:
            client = self.client_factory()
        except Exception as e:
            raise ConnectionError(f"Failed to create client: {e}") from e

        try:
            await _guard(client.connect(credentials), ConnectionError)
            progress.advance(ProbeState.CONNECTED)

            await _guard(
                client.write(self.definition.key, self.definition.value), WriteError
            )
            progress.advance(ProbeState.WRITTEN)

            try:
                await self._verify(client)
                progress.advance(ProbeState.VERIFIED)
            finally:
                await self._cleanup(client)
        finally:
            await self._close(client)

        progress.advance(ProbeState.DONE)

    def _resolve(self) -> ServiceCredentials:
        try:
            return self.resolver.resolve(self.definition.service_name)
        except ProbeError:
            raise
        except Exception as e:
            raise CredentialError(str(e) or type(e).__name__) from e

    async def _verify(self, client: ProbeClient) -> None:
        value = await _guard(client.read(self.definition.key), ReadError)
        if value != self.definition.value:
            raise VerificationError(expected=self.definition.value, actual=value)

    async def _cleanup(self, client: ProbeClient) -> None:
        try:
            await client.cleanup(self.definition.key)
        except Exception as e:
            self._logger.warning("Probe cleanup failed", error=str(e))

    async def _close(self, client: ProbeClient) -> None:
        try:
            await client.close()
        except Exception as e:
            self._logger.warning("Error closing probe connection", error=str(e))

    def _result(
        self, progress: "_Progress", start_time: float, error: ProbeError | None = None
    ) -> ProbeResult:
        return ProbeResult(
            service=self.definition.display_name,
            state=ProbeState.FAILED if error else progress.state,
            last_state=progress.state,
            timestamp=datetime.now(UTC),
            response_time_ms=(time.time() - start_time) * 1000,
            error=error.message if error else None,
            error_kind=error.kind if error else None,
        )


class _Progress:
    """Last state a probe run reached."""

    def __init__(self) -> None:
        self.state = ProbeState.IDLE

    def advance(self, state: ProbeState) -> None:
        self.state = state
