"""Credential extraction from platform service bindings."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, SecretStr

from service_probes.bindings.catalog import ServiceBinding, ServiceCatalog
from service_probes.domain.exceptions import CredentialError


def _as_string(credentials: dict[str, Any], *keys: str) -> str:
    for key in keys:
        value = credentials.get(key)
        if isinstance(value, str):
            return value
    return ""


def _as_port(value: Any) -> int:
    # JSON numbers arrive as int or float; some brokers publish ports as strings
    if isinstance(value, bool):
        return 0
    if isinstance(value, int | float):
        return int(value)
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return 0


class ServiceCredentials(BaseModel):
    """
    Connection credentials for one bound service.

    Extraction is relaxed: a credential that is missing or of the wrong type
    becomes an empty value rather than an error.
    """

    model_config = ConfigDict(frozen=True)

    host: str = ""
    port: int = 0
    username: str = ""
    password: SecretStr = SecretStr("")
    db_name: str = ""
    uri: str = Field(default="", repr=False)
    ssl: bool = False

    @classmethod
    def from_binding(cls, binding: ServiceBinding) -> "ServiceCredentials":
        """Extract credentials from a service binding."""
        credentials = binding.credentials
        ssl = credentials.get("ssl")
        return cls(
            host=_as_string(credentials, "host", "hostname"),
            port=_as_port(credentials.get("port")),
            username=_as_string(credentials, "username", "user"),
            password=SecretStr(_as_string(credentials, "password")),
            db_name=_as_string(credentials, "db_name", "name"),
            uri=_as_string(credentials, "uri"),
            ssl=ssl if isinstance(ssl, bool) else False,
        )

    @property
    def address(self) -> str:
        """host:port as published by the binding."""
        return f"{self.host}:{self.port}"


class CredentialResolver:
    """Resolves logical service names to connection credentials."""

    def __init__(self, catalog: ServiceCatalog):
        self.catalog = catalog

    @classmethod
    def from_vcap(cls, raw: str | None) -> "CredentialResolver":
        """Create a resolver over a raw VCAP_SERVICES document."""
        return cls(ServiceCatalog.from_json(raw))

    def resolve(self, service_name: str) -> ServiceCredentials:
        """Look up the binding named service_name and extract its credentials."""
        if not service_name:
            raise CredentialError("no service name configured")

        binding = self.catalog.with_name(service_name)
        return ServiceCredentials.from_binding(binding)
