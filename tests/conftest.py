"""Test configuration and fixtures."""

import json
import logging
import os

import pytest
import structlog

# Settings must never pick up a developer's platform environment
os.environ["ENVIRONMENT"] = "testing"
for name in ("VCAP_SERVICES", "PROBE_BACKEND", "PROBE_SERVICE_NAME"):
    os.environ.pop(name, None)

from service_probes.bindings import CredentialResolver  # noqa: E402
from service_probes.clients import InMemoryProbeClient  # noqa: E402
from service_probes.config import ProbeSettings  # noqa: E402
from service_probes.domain import Backend  # noqa: E402

ELASTICACHE_VCAP = json.dumps(
    {
        "elasticache": [
            {
                "credentials": {
                    "host": "redis_host",
                    "port": 6379,
                    "password": "redis_password",
                },
                "label": "elasticache",
                "name": "test-elasticache",
            }
        ]
    }
)

RDS_VCAP = json.dumps(
    {
        "rds": [
            {
                "credentials": {
                    "db_name": "test_db",
                    "host": "test_host",
                    "password": "test_password",
                    "uri": "you don't want to use this",
                    "username": "test_user",
                },
                "label": "rds",
                "name": "test-psql",
            }
        ]
    }
)

RMQ_VCAP = json.dumps(
    {
        "rabbitmq": [
            {
                "credentials": {"ssl": False, "uri": "amqp://foobar"},
                "label": "rabbitmq",
                "name": "test-rmq",
                "tags": ["rabbitmq"],
            }
        ]
    }
)


class RecordingClientFactory:
    """Client factory handing out in-memory clients and keeping them for asserts."""

    def __init__(self, **client_options):
        self.client_options = client_options
        self.clients: list[InMemoryProbeClient] = []

    def __call__(self) -> InMemoryProbeClient:
        client = InMemoryProbeClient(**self.client_options)
        self.clients.append(client)
        return client

    @property
    def last(self) -> InMemoryProbeClient:
        return self.clients[-1]


@pytest.fixture
def elasticache_settings():
    """Settings for the cache probe bound to test-elasticache."""
    return ProbeSettings(
        backend=Backend.ELASTICACHE,
        elasticache_service_name="test-elasticache",
        vcap_services=ELASTICACHE_VCAP,
    )


@pytest.fixture
def rds_settings():
    """Settings for the relational probe bound to test-psql."""
    return ProbeSettings(
        backend=Backend.RDS,
        db_service_name="test-psql",
        vcap_services=RDS_VCAP,
    )


@pytest.fixture
def rmq_settings():
    """Settings for the queue probe bound to test-rmq."""
    return ProbeSettings(
        backend=Backend.RMQ,
        rmq_service_name="test-rmq",
        vcap_services=RMQ_VCAP,
    )


@pytest.fixture
def elasticache_resolver():
    """Resolver over the cache binding catalog."""
    return CredentialResolver.from_vcap(ELASTICACHE_VCAP)


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers bound to a test's captured stdout once it finishes."""
    yield
    structlog.reset_defaults()
    root = logging.getLogger()
    for handler in list(root.handlers):
        if isinstance(handler, logging.StreamHandler):
            root.removeHandler(handler)
