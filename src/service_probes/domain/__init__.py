"""Domain models and exceptions for service probes."""

from .exceptions import (
    CleanupError,
    ConnectionError,
    CredentialError,
    ProbeError,
    ReadError,
    VerificationError,
    WriteError,
)
from .models import Backend, ProbeDefinition, ProbeErrorKind, ProbeResult, ProbeState

__all__ = [
    "Backend",
    "ProbeDefinition",
    "ProbeErrorKind",
    "ProbeResult",
    "ProbeState",
    "ProbeError",
    "CredentialError",
    "ConnectionError",
    "WriteError",
    "ReadError",
    "VerificationError",
    "CleanupError",
]
