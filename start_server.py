#!/usr/bin/env python3
"""Server startup script for platform deployment."""

from service_probes.main import run


if __name__ == "__main__":
    run()
