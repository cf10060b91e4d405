"""Backend clients driven by the probe procedure."""

from .base import BaseProbeClient, ProbeClient
from .memory import InMemoryProbeClient

__all__ = [
    "ProbeClient",
    "BaseProbeClient",
    "InMemoryProbeClient",
]
