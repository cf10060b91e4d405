"""Platform service binding lookup."""

from .catalog import ServiceBinding, ServiceCatalog
from .resolver import CredentialResolver, ServiceCredentials

__all__ = [
    "ServiceBinding",
    "ServiceCatalog",
    "CredentialResolver",
    "ServiceCredentials",
]
