"""Shared plumbing for relational store repositories.

Repositories never raise provider failures to callers: reads degrade to
[] or None, writes to None or False. The provider diagnostic fields are
logged so the failure stays traceable.
"""

from __future__ import annotations

import logging

from planejar.application.interfaces.providers import IRelationalStore
from planejar.domain.exceptions import ProviderError

logger = logging.getLogger(__name__)

# Failures a repository absorbs: provider errors and malformed rows.
REPOSITORY_ERRORS: tuple[type[Exception], ...] = (ProviderError, KeyError, ValueError, TypeError)


def log_repository_error(operation: str, exc: Exception) -> None:
    """Log a failed store call with code/message/details/hint when available."""
    if isinstance(exc, ProviderError):
        diag = exc.diagnostics()
        logger.error(
            "Error %s: code=%s message=%s details=%s hint=%s",
            operation,
            diag["code"],
            diag["message"],
            diag["details"],
            diag["hint"],
        )
    else:
        logger.error("Error %s: %s", operation, exc)


class SupabaseRepository:
    """Base for repositories over an IRelationalStore."""

    def __init__(self, store: IRelationalStore) -> None:
        self._store = store
