"""Logging for scripts and the composition root."""

from planejar.shared.telemetry.logging import setup_logging

__all__ = ["setup_logging"]
