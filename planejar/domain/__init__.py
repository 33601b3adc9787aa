"""Domain layer: enums and exceptions.

No dependencies on infrastructure. Used by application and
infrastructure layers.
"""

from planejar.domain.enums import (
    AuthErrorKind,
    AuthEvent,
    ChatChannel,
    ClientType,
    ProjectStatus,
    SessionState,
    UserRole,
)
from planejar.domain.exceptions import (
    AuthInvalidCredentialsError,
    AuthProviderError,
    ConfigurationException,
    PlanejarException,
    ProviderError,
    ValidationException,
)

__all__ = [
    "AuthErrorKind",
    "AuthEvent",
    "AuthInvalidCredentialsError",
    "AuthProviderError",
    "ChatChannel",
    "ClientType",
    "ConfigurationException",
    "PlanejarException",
    "ProjectStatus",
    "ProviderError",
    "SessionState",
    "UserRole",
    "ValidationException",
]
