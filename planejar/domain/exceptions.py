"""Domain exceptions for the Planejar application.

Defines application-level exceptions. Provider failures are translated
into ProviderError / AuthProviderError at the adapter boundary; services
catch them and degrade to None/False/empty results. The only exception
meant to reach the presentation layer is AuthInvalidCredentialsError.
"""

from typing import Any

from planejar.domain.enums import AuthErrorKind


class PlanejarException(Exception):
    """Base exception for all Planejar application errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class ValidationException(PlanejarException):
    """Raised when input validation fails before any network call."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class ConfigurationException(PlanejarException):
    """Raised when backend configuration is missing or malformed."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "CONFIGURATION_ERROR")


class AuthInvalidCredentialsError(PlanejarException):
    """Marker for a rejected e-mail/password pair.

    Lets callers tell "wrong password" apart from "service unavailable"
    when both show up as an empty sign-in result.
    """

    def __init__(self, message: str = "Invalid login credentials") -> None:
        super().__init__(message, "AUTH_INVALID_CREDENTIALS")


class ProviderError(PlanejarException):
    """Error returned by the relational store or object storage.

    Keeps the provider diagnostic fields (code, details, hint) so they can
    be logged verbatim.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: str | None = None,
        hint: str | None = None,
        status: int | None = None,
    ) -> None:
        """Initialize with provider diagnostic fields.

        Args:
            message: Provider message.
            code: Provider-specific error code (e.g. PGRST116, 23505).
            details: Provider detail string.
            hint: Provider hint string.
            status: HTTP status, when the error came from a response.
        """
        self.code = code
        self.hint = hint
        self.status = status
        super().__init__(
            message,
            "PROVIDER_ERROR",
            {"code": code, "details": details, "hint": hint, "status": status},
        )

    def diagnostics(self) -> dict[str, Any]:
        """Return code/message/details/hint for logging."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details.get("details"),
            "hint": self.hint,
        }


class AuthProviderError(PlanejarException):
    """Error returned by the identity provider, already classified."""

    def __init__(
        self,
        message: str,
        kind: AuthErrorKind = AuthErrorKind.UNKNOWN,
        status: int | None = None,
    ) -> None:
        """Initialize with message and classified kind.

        Args:
            message: Provider message (kept for user-facing normalization).
            kind: Classification assigned at the adapter boundary.
            status: HTTP status, when the error came from a response.
        """
        self.kind = kind
        self.status = status
        super().__init__(
            message,
            "AUTH_PROVIDER_ERROR",
            {"kind": kind.value, "status": status},
        )
