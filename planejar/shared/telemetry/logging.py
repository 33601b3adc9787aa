"""Logging setup for the command-line entry points."""

import logging
import sys

from planejar.core.config import Settings, get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# HTTP client loggers print full request URLs at INFO
NOISY_LOGGERS = ("httpx", "httpcore")


def setup_logging(settings: Settings | None = None) -> None:
    """Configure root logging to stdout.

    DEBUG when settings.debug is set, otherwise INFO. The HTTP client
    loggers stay at WARNING unless debugging.
    """
    settings = settings or get_settings()
    level = logging.DEBUG if settings.debug else logging.INFO
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if settings.debug else logging.WARNING)
