"""Application services: session façade, auth event channel, session controller."""

from planejar.application.services.auth_events import AuthStateChannel, Subscription
from planejar.application.services.auth_service import (
    AuthService,
    parse_auth_error,
    validate_email,
    validate_password_strength,
)
from planejar.application.services.session_controller import (
    SessionController,
    visible_projects,
)

__all__ = [
    "AuthService",
    "AuthStateChannel",
    "SessionController",
    "Subscription",
    "parse_auth_error",
    "validate_email",
    "validate_password_strength",
    "visible_projects",
]
