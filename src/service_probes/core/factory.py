"""
Probe factory.

Builds the probe procedure for the backend selected in settings: what to
check, how to resolve its credentials and which client to drive.
"""

from functools import partial

import structlog

from service_probes.bindings.resolver import CredentialResolver
from service_probes.clients.amqp import AMQPProbeClient
from service_probes.clients.memory import InMemoryProbeClient
from service_probes.clients.postgresql import PostgresProbeClient
from service_probes.clients.redis import RedisProbeClient
from service_probes.config.settings import ProbeSettings
from service_probes.core.probe import ClientFactory, ProbeProcedure
from service_probes.domain.models import Backend, ProbeDefinition

logger = structlog.get_logger()

DISPLAY_NAMES = {
    Backend.ELASTICACHE: "Elasticache",
    Backend.RDS: "RDS",
    Backend.RMQ: "RMQ",
    Backend.MEMORY: "Memory",
}


class ProbeFactory:
    """Factory for creating probe procedures based on configuration."""

    @staticmethod
    def create_definition(settings: ProbeSettings) -> ProbeDefinition:
        """Describe the canary round trip for the configured backend."""
        backend = settings.backend
        if backend == Backend.RDS:
            key, value = settings.database.table_name, settings.database.canary_name
        elif backend == Backend.RMQ:
            key, value = settings.queue.queue_name, settings.queue.message
        else:
            key, value = settings.cache.key, settings.cache.value

        return ProbeDefinition(
            backend=backend,
            display_name=DISPLAY_NAMES[backend],
            service_name=settings.service_name,
            key=key,
            value=value,
        )

    @staticmethod
    def create_client_factory(settings: ProbeSettings) -> ClientFactory:
        """Return a callable creating a fresh client for each probe run."""
        if settings.backend == Backend.ELASTICACHE:
            return partial(RedisProbeClient, settings.cache)
        if settings.backend == Backend.RDS:
            return partial(PostgresProbeClient, settings.database)
        if settings.backend == Backend.RMQ:
            return partial(AMQPProbeClient, settings.queue)

        # One store shared across runs, like a long-lived cache server
        store: dict[str, str] = {}
        return partial(InMemoryProbeClient, store)

    @staticmethod
    def create_probe(
        settings: ProbeSettings,
        resolver: CredentialResolver | None = None,
        client_factory: ClientFactory | None = None,
    ) -> ProbeProcedure:
        """Create the probe procedure for the configured backend."""
        definition = ProbeFactory.create_definition(settings)
        resolver = resolver or CredentialResolver.from_vcap(settings.vcap_services)
        client_factory = client_factory or ProbeFactory.create_client_factory(settings)

        if not resolver.catalog.is_loaded:
            logger.warning(
                "Service binding catalog unavailable",
                error=resolver.catalog.load_error,
            )
        if not definition.service_name:
            logger.warning(
                "No service binding name configured", backend=definition.backend.value
            )

        logger.info(
            "Created probe",
            backend=definition.backend.value,
            service=definition.display_name,
            service_name=definition.service_name,
        )
        return ProbeProcedure(definition, resolver, client_factory)
