"""Exception hierarchy for service probes."""

from typing import Any

from .models import ProbeErrorKind


class ProbeError(Exception):
    """Base exception for a failed probe stage."""

    kind: ProbeErrorKind

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class CredentialError(ProbeError):
    """Binding missing or the platform catalog unreadable."""

    kind = ProbeErrorKind.CREDENTIAL_ERROR


class ConnectionError(ProbeError):
    """Backend unreachable or credentials rejected."""

    kind = ProbeErrorKind.CONNECTION_ERROR


class WriteError(ProbeError):
    """Canary could not be written."""

    kind = ProbeErrorKind.WRITE_ERROR


class ReadError(ProbeError):
    """Canary could not be read back."""

    kind = ProbeErrorKind.READ_ERROR


class VerificationError(ProbeError):
    """Value read back differs from the value written."""

    kind = ProbeErrorKind.VERIFICATION_ERROR

    def __init__(self, expected: str, actual: str):
        super().__init__(
            f"value set but not retrieved: expected {expected!r}, got {actual!r}",
            {"expected": expected, "actual": actual},
        )


class CleanupError(ProbeError):
    """Canary could not be removed. Never fails a probe."""

    kind = ProbeErrorKind.CLEANUP_ERROR
