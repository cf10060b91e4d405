"""Core data models for service probes."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


class Backend(str, Enum):
    """Backing service kinds a probe can target."""

    ELASTICACHE = "elasticache"
    RDS = "rds"
    RMQ = "rmq"
    MEMORY = "memory"


class ProbeState(str, Enum):
    """Stages of a single probe invocation."""

    IDLE = "idle"
    CREDENTIALS_RESOLVED = "credentials_resolved"
    CONNECTED = "connected"
    WRITTEN = "written"
    VERIFIED = "verified"
    DONE = "done"
    FAILED = "failed"


class ProbeErrorKind(str, Enum):
    """Error kinds a probe can fail with."""

    CREDENTIAL_ERROR = "credential_error"
    CONNECTION_ERROR = "connection_error"
    WRITE_ERROR = "write_error"
    READ_ERROR = "read_error"
    VERIFICATION_ERROR = "verification_error"
    CLEANUP_ERROR = "cleanup_error"


@dataclass(frozen=True)
class ProbeDefinition:
    """What a probe checks: the binding to use and the canary to round-trip."""

    backend: Backend
    display_name: str
    service_name: str
    key: str
    value: str


@dataclass
class ProbeResult:
    """Outcome of a single probe invocation."""

    service: str
    state: ProbeState
    last_state: ProbeState
    timestamp: datetime
    response_time_ms: float
    error: str | None = None
    error_kind: ProbeErrorKind | None = None

    @property
    def success(self) -> bool:
        """Check if the probe completed every stage."""
        return self.state == ProbeState.DONE

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "service": self.service,
            "state": self.state.value,
            "last_state": self.last_state.value,
            "success": self.success,
            "timestamp": self.timestamp.isoformat(),
            "response_time_ms": self.response_time_ms,
            "error": self.error,
            "error_kind": self.error_kind.value if self.error_kind else None,
        }
