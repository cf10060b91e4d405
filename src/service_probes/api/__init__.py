"""HTTP surface of the probe service."""
