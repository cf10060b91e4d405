"""Observability for service probes."""
