"""
PostgreSQL client for the relational database probe.

The canary is a single-column table that is dropped, recreated and filled
with one row inside a transaction, then read back with a LIMIT 1 query.
"""

from typing import Any

import asyncpg

from service_probes.bindings.resolver import ServiceCredentials
from service_probes.clients.base import BaseProbeClient
from service_probes.config.settings import DatabaseProbeSettings
from service_probes.domain.exceptions import (
    CleanupError,
    ConnectionError,
    ReadError,
    WriteError,
)
from service_probes.domain.models import Backend
from service_probes.observability.logging import get_logger

DEFAULT_PORT = 5432

_DRIVER_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)


def quote_identifier(name: str) -> str:
    """Quote a table name for interpolation into DDL."""
    return '"' + name.replace('"', '""') + '"'


class PostgresProbeClient(BaseProbeClient):
    """PostgreSQL-backed probe client."""

    backend = Backend.RDS

    def __init__(self, settings: DatabaseProbeSettings):
        super().__init__()
        self.settings = settings
        self._connection: Any | None = None
        self.logger = get_logger(__name__)

    async def connect(self, credentials: ServiceCredentials) -> None:
        """Open a single database connection."""
        try:
            self._connection = await asyncpg.connect(
                host=credentials.host,
                port=credentials.port or DEFAULT_PORT,
                user=credentials.username,
                password=credentials.password.get_secret_value(),
                database=credentials.db_name,
                ssl="require" if credentials.ssl else self.settings.sslmode,
                timeout=self.settings.connect_timeout,
            )
            self._connected = True
        except (*_DRIVER_ERRORS, TimeoutError) as e:
            raise ConnectionError(f"Failed to connect to PostgreSQL: {e}") from e

    def _ensure_connection(self) -> Any:
        self._ensure_connected()
        if self._connection is None:
            raise ConnectionError("Database connection not available")
        return self._connection

    async def write(self, key: str, value: str) -> None:
        """Recreate the test table and insert the canary row."""
        conn = self._ensure_connection()
        table = quote_identifier(key)
        try:
            async with conn.transaction():
                await conn.execute(f"DROP TABLE IF EXISTS {table}")
                await conn.execute(
                    f"CREATE TABLE {table}(name VARCHAR(30) primary key)"
                )
                await conn.execute(f"INSERT INTO {table}(name) VALUES($1)", value)
        except _DRIVER_ERRORS as e:
            raise WriteError(f"Failed to create test table {key}: {e}") from e

    async def read(self, key: str) -> str:
        """Return the first row of the test table."""
        conn = self._ensure_connection()
        try:
            row = await conn.fetchrow(
                f"SELECT name FROM {quote_identifier(key)} LIMIT 1"
            )
        except _DRIVER_ERRORS as e:
            raise ReadError(f"Failed to query test table {key}: {e}") from e

        if row is None:
            raise ReadError("No rows found")
        return str(row["name"])

    async def cleanup(self, key: str) -> None:
        conn = self._ensure_connection()
        try:
            await conn.execute(f"DROP TABLE IF EXISTS {quote_identifier(key)}")
        except _DRIVER_ERRORS as e:
            raise CleanupError(f"Failed to drop test table {key}: {e}") from e

    async def close(self) -> None:
        """Close the database connection."""
        connection, self._connection = self._connection, None
        self._connected = False
        if connection is not None and not connection.is_closed():
            await connection.close(timeout=self.settings.connect_timeout)
            self.logger.debug("PostgreSQL connection closed")
