"""Local session persistence."""

from planejar.infrastructure.session.session_cache import FileSessionCache

__all__ = ["FileSessionCache"]
