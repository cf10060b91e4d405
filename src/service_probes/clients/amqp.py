"""
RabbitMQ client for the message queue probe.

The canary is a text message published on the default exchange to a
non-durable queue and consumed straight back. Consuming is bounded by the
configured receive timeout so a lost message fails the probe instead of
holding the request open.
"""

import asyncio
from typing import Any

import aio_pika

from service_probes.bindings.resolver import ServiceCredentials
from service_probes.clients.base import BaseProbeClient
from service_probes.config.settings import QueueProbeSettings
from service_probes.domain.exceptions import ConnectionError, ReadError, WriteError
from service_probes.domain.models import Backend


def broker_url(credentials: ServiceCredentials) -> str:
    """Connection URL for a binding, upgraded to amqps when it requires TLS."""
    if credentials.ssl and credentials.uri.startswith("amqp://"):
        return "amqps://" + credentials.uri[len("amqp://") :]
    return credentials.uri


class AMQPProbeClient(BaseProbeClient):
    """RabbitMQ-backed probe client."""

    backend = Backend.RMQ

    def __init__(self, settings: QueueProbeSettings):
        super().__init__()
        self.settings = settings
        self._connection: Any | None = None
        self._channel: Any | None = None
        self._queue: Any | None = None

    async def connect(self, credentials: ServiceCredentials) -> None:
        """Connect, open a channel and declare the probe queue."""
        try:
            self._connection = await aio_pika.connect(
                broker_url(credentials), timeout=self.settings.connect_timeout
            )
            self._channel = await self._connection.channel()
            self._queue = await self._channel.declare_queue(
                self.settings.queue_name,
                durable=False,
                exclusive=False,
                auto_delete=False,
            )
            self._connected = True
        except Exception as e:
            raise ConnectionError(f"Failed to connect to RabbitMQ: {e}") from e

    async def write(self, key: str, value: str) -> None:
        """Publish value to the queue named key."""
        self._ensure_connected()
        message = aio_pika.Message(body=value.encode(), content_type="text/plain")
        try:
            await self._channel.default_exchange.publish(message, routing_key=key)
        except Exception as e:
            raise WriteError(f"Failed to publish to {key}: {e}") from e

    async def read(self, key: str) -> str:
        """Consume one message from the declared queue."""
        self._ensure_connected()
        timeout = self.settings.receive_timeout
        try:
            return await asyncio.wait_for(self._consume_one(), timeout=timeout)
        except TimeoutError:
            raise ReadError(
                f"No message received from {key} within {timeout}s"
            ) from None
        except ReadError:
            raise
        except Exception as e:
            raise ReadError(f"Failed to consume from {key}: {e}") from e

    async def _consume_one(self) -> str:
        async with self._queue.iterator(no_ack=True) as messages:
            async for message in messages:
                return bytes(message.body).decode()
        raise ReadError("Consumer closed before a message arrived")

    async def close(self) -> None:
        """Close the connection, which closes its channels."""
        connection, self._connection = self._connection, None
        self._channel = None
        self._queue = None
        self._connected = False
        if connection is not None and not connection.is_closed:
            await connection.close()
