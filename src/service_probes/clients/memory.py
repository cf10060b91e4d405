"""
In-memory client for development and testing.

Behaves like a key-value backend held in a dictionary. Each stage can be
made to fail by passing the exception to raise, and every call is recorded
so tests can assert on what the probe procedure did.
"""

from service_probes.bindings.resolver import ServiceCredentials
from service_probes.clients.base import BaseProbeClient
from service_probes.domain.exceptions import ReadError
from service_probes.domain.models import Backend


class InMemoryProbeClient(BaseProbeClient):
    """Dictionary-backed probe client."""

    backend = Backend.MEMORY

    def __init__(
        self,
        store: dict[str, str] | None = None,
        *,
        connect_error: Exception | None = None,
        write_error: Exception | None = None,
        read_error: Exception | None = None,
        cleanup_error: Exception | None = None,
        close_error: Exception | None = None,
        read_override: str | None = None,
    ) -> None:
        super().__init__()
        self.store = {} if store is None else store
        self.connect_error = connect_error
        self.write_error = write_error
        self.read_error = read_error
        self.cleanup_error = cleanup_error
        self.close_error = close_error
        self.read_override = read_override

        self.credentials: ServiceCredentials | None = None
        self.calls: list[str] = []
        self.close_count = 0

    async def connect(self, credentials: ServiceCredentials) -> None:
        self.calls.append("connect")
        self.credentials = credentials
        if self.connect_error:
            raise self.connect_error
        self._connected = True

    async def write(self, key: str, value: str) -> None:
        self.calls.append("write")
        self._ensure_connected()
        if self.write_error:
            raise self.write_error
        self.store[key] = value

    async def read(self, key: str) -> str:
        self.calls.append("read")
        self._ensure_connected()
        if self.read_error:
            raise self.read_error
        if self.read_override is not None:
            return self.read_override
        if key not in self.store:
            raise ReadError(f"Key {key} not found")
        return self.store[key]

    async def cleanup(self, key: str) -> None:
        self.calls.append("cleanup")
        if self.cleanup_error:
            raise self.cleanup_error
        self.store.pop(key, None)

    async def close(self) -> None:
        self.calls.append("close")
        self.close_count += 1
        self._connected = False
        if self.close_error:
            raise self.close_error
