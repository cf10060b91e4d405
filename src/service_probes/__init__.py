"""HTTP health-check probes for platform-bound backing services."""

__version__ = "0.1.0"
__description__ = (
    "Round-trip health checks for bound cache, database and message queue services"
)
