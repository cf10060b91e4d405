"""Probe procedure and its factory."""

from .factory import ProbeFactory
from .probe import ClientFactory, ProbeProcedure

__all__ = ["ClientFactory", "ProbeFactory", "ProbeProcedure"]
