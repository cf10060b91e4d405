"""
Redis client for the key-value cache probe.

The canary is a plain string key written with SET, read with GET and removed
with DEL.
"""

import redis.asyncio as redis
from redis.exceptions import RedisError

from service_probes.bindings.resolver import ServiceCredentials
from service_probes.clients.base import BaseProbeClient
from service_probes.config.settings import CacheProbeSettings
from service_probes.domain.exceptions import (
    CleanupError,
    ConnectionError,
    ReadError,
    WriteError,
)
from service_probes.domain.models import Backend

DEFAULT_PORT = 6379


class RedisProbeClient(BaseProbeClient):
    """Redis-backed probe client."""

    backend = Backend.ELASTICACHE

    def __init__(self, settings: CacheProbeSettings):
        super().__init__()
        self.settings = settings
        self._redis: redis.Redis | None = None

    async def connect(self, credentials: ServiceCredentials) -> None:
        """Initialize Redis connection."""
        password = credentials.password.get_secret_value()
        try:
            self._redis = redis.Redis(
                host=credentials.host,
                port=credentials.port or DEFAULT_PORT,
                password=password or None,
                db=0,
                ssl=credentials.ssl,
                socket_connect_timeout=self.settings.connect_timeout,
                socket_timeout=self.settings.connect_timeout,
                decode_responses=True,
            )

            # Test connection
            await self._ensure_redis_connection().ping()
            self._connected = True
        except (RedisError, OSError) as e:
            raise ConnectionError(
                "Failed to connect to Redis at "
                f"{credentials.host}:{credentials.port or DEFAULT_PORT}: {e}"
            ) from e

    def _ensure_redis_connection(self) -> redis.Redis:
        """Ensure Redis connection is available and return it."""
        if not self._redis:
            raise ConnectionError("Redis connection not available")
        return self._redis

    async def write(self, key: str, value: str) -> None:
        self._ensure_connected()
        try:
            await self._ensure_redis_connection().set(key, value)
        except RedisError as e:
            raise WriteError(f"Failed to set {key}: {e}") from e

    async def read(self, key: str) -> str:
        self._ensure_connected()
        try:
            value = await self._ensure_redis_connection().get(key)
        except RedisError as e:
            raise ReadError(f"Failed to get {key}: {e}") from e

        if value is None:
            raise ReadError(f"Key {key} not found")
        return str(value)

    async def cleanup(self, key: str) -> None:
        self._ensure_connected()
        try:
            await self._ensure_redis_connection().delete(key)
        except RedisError as e:
            raise CleanupError(f"Failed to delete {key}: {e}") from e

    async def close(self) -> None:
        """Close Redis connection."""
        client, self._redis = self._redis, None
        self._connected = False
        if client is not None:
            await client.aclose()
