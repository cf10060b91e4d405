"""
Platform service binding catalog.

The platform publishes bound services in the VCAP_SERVICES environment
variable as a JSON object keyed by service label, each label holding a list
of service instances with their credentials.
"""

from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from service_probes.domain.exceptions import CredentialError


class ServiceBinding(BaseModel):
    """A single bound service instance."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str = ""
    label: str = ""
    plan: str = ""
    tags: list[str] = Field(default_factory=list)
    credentials: dict[str, Any] = Field(default_factory=dict, repr=False)

    # Entries for unrelated services must not make the whole catalog unreadable
    @field_validator("name", "label", "plan", mode="before")
    @classmethod
    def null_text_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("tags", mode="before")
    @classmethod
    def null_tags_to_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("credentials", mode="before")
    @classmethod
    def null_credentials_to_empty(cls, v: Any) -> Any:
        return {} if v is None else v

    def credential_string(self, key: str) -> str | None:
        """Return a credential if it is present and a string."""
        value = self.credentials.get(key)
        return value if isinstance(value, str) else None


_CATALOG_ADAPTER = TypeAdapter(dict[str, list[ServiceBinding]])


class ServiceCatalog:
    """Parsed service bindings grouped by label."""

    def __init__(
        self,
        services: dict[str, list[ServiceBinding]] | None = None,
        load_error: str | None = None,
    ):
        self._services = services or {}
        self.load_error = load_error

    @classmethod
    def from_json(cls, raw: str | None) -> "ServiceCatalog":
        """
        Build a catalog from the raw VCAP_SERVICES document.

        An absent or malformed document yields an empty catalog that remembers
        why it could not be loaded, so lookups fail per request instead of the
        process failing at startup.
        """
        if raw is None or not raw.strip():
            return cls(load_error="VCAP_SERVICES is not set")

        try:
            services = _CATALOG_ADAPTER.validate_json(raw)
        except ValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first["loc"])
            detail = f"{first['msg']} at {location}" if location else first["msg"]
            return cls(load_error=f"unable to parse VCAP_SERVICES: {detail}")

        return cls(services=services)

    @property
    def is_loaded(self) -> bool:
        """Check if the catalog was parsed successfully."""
        return self.load_error is None

    def _ensure_loaded(self) -> None:
        if self.load_error is not None:
            raise CredentialError(self.load_error)

    def all(self) -> list[ServiceBinding]:
        """All bindings across every label."""
        self._ensure_loaded()
        return [binding for group in self._services.values() for binding in group]

    def names(self) -> list[str]:
        """Names of all bound services."""
        return [binding.name for binding in self.all()]

    def with_name(self, name: str) -> ServiceBinding:
        """Get the binding with the given name."""
        for binding in self.all():
            if binding.name == name:
                return binding
        raise CredentialError(f"no service with name {name}", {"service_name": name})

    def with_label(self, label: str) -> list[ServiceBinding]:
        """Get all bindings published under a label."""
        self._ensure_loaded()
        return list(self._services.get(label, []))

    def with_tag(self, tag: str) -> list[ServiceBinding]:
        """Get all bindings carrying a tag."""
        return [binding for binding in self.all() if tag in binding.tags]
