"""
Backend client interface for probes.

Every backend variant exposes the same small contract so the probe procedure
can drive a cache, a relational database or a message queue identically.
"""

from abc import ABC, abstractmethod
from typing import ClassVar, Protocol

from service_probes.bindings.resolver import ServiceCredentials
from service_probes.domain.exceptions import ConnectionError
from service_probes.domain.models import Backend


class ProbeClient(Protocol):
    """Client interface for round-trip probe operations."""

    async def connect(self, credentials: ServiceCredentials) -> None:
        """Open a session to the backend."""
        ...

    async def write(self, key: str, value: str) -> None:
        """Write the canary value."""
        ...

    async def read(self, key: str) -> str:
        """Read the canary value back."""
        ...

    async def cleanup(self, key: str) -> None:
        """Remove the canary. Best effort."""
        ...

    async def close(self) -> None:
        """Release the session. Safe to call more than once."""
        ...


class BaseProbeClient(ABC):
    """Abstract base client with common functionality."""

    backend: ClassVar[Backend]

    def __init__(self) -> None:
        self._connected = False

    @property
    def is_connected(self) -> bool:
        """Check if client is connected."""
        return self._connected

    @abstractmethod
    async def connect(self, credentials: ServiceCredentials) -> None:
        """Open a session to the backend."""
        pass

    @abstractmethod
    async def write(self, key: str, value: str) -> None:
        """Write the canary value."""
        pass

    @abstractmethod
    async def read(self, key: str) -> str:
        """Read the canary value back."""
        pass

    async def cleanup(self, key: str) -> None:
        """Remove the canary. Backends without durable side effects keep this."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release the session. Safe to call more than once."""
        pass

    def _ensure_connected(self) -> None:
        """Ensure client is connected before operations."""
        if not self.is_connected:
            raise ConnectionError(
                f"{self.backend.value} client not connected. Call connect() first."
            )
