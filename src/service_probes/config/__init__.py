"""Configuration for service probes."""

from .settings import (
    CacheProbeSettings,
    DatabaseProbeSettings,
    Environment,
    ProbeSettings,
    QueueProbeSettings,
    get_settings,
)

__all__ = [
    "CacheProbeSettings",
    "DatabaseProbeSettings",
    "Environment",
    "ProbeSettings",
    "QueueProbeSettings",
    "get_settings",
]
