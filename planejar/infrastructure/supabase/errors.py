"""Translate backend failures into ProviderError / AuthProviderError.

Classification happens here, once: identity errors get an AuthErrorKind
from the status code, the provider error code and known message
fragments. Transport failures (connection reset, timeouts, a response
body consumed twice) are NETWORK, the only retryable kind.
"""

from __future__ import annotations

import json
from typing import Any

import httpx

from planejar.domain.enums import AuthErrorKind
from planejar.domain.exceptions import AuthProviderError, ProviderError

# (message fragment, provider error_code, kind); fragments are lowercase
_AUTH_MESSAGE_KINDS: tuple[tuple[str, str, AuthErrorKind], ...] = (
    ("invalid login credentials", "invalid_credentials", AuthErrorKind.INVALID_CREDENTIALS),
    ("email not confirmed", "email_not_confirmed", AuthErrorKind.EMAIL_NOT_CONFIRMED),
    ("user already registered", "user_already_exists", AuthErrorKind.USER_ALREADY_REGISTERED),
    ("password should be at least", "weak_password", AuthErrorKind.WEAK_PASSWORD),
    ("auth session missing", "session_not_found", AuthErrorKind.SESSION_MISSING),
    ("body stream already read", "", AuthErrorKind.NETWORK),
    ("failed to fetch", "", AuthErrorKind.NETWORK),
)


def classify_auth_error(
    message: str | None,
    status: int | None = None,
    error_code: str | None = None,
) -> AuthErrorKind:
    """Return the AuthErrorKind for an identity provider failure."""
    text = (message or "").lower()
    for fragment, code, kind in _AUTH_MESSAGE_KINDS:
        if (code and error_code == code) or fragment in text:
            return kind
    if status is not None and (status >= 500 or status == 429):
        return AuthErrorKind.NETWORK
    return AuthErrorKind.UNKNOWN


def is_transport_error(exc: BaseException) -> bool:
    """True for failures below HTTP: connect/read errors, timeouts, consumed streams."""
    return isinstance(exc, (httpx.TransportError, httpx.StreamConsumed))


def is_network_auth_error(exc: BaseException) -> bool:
    """Retry predicate for identity calls."""
    return isinstance(exc, AuthProviderError) and exc.kind is AuthErrorKind.NETWORK


def _json_body(response: httpx.Response) -> dict[str, Any]:
    try:
        body = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return {}
    return body if isinstance(body, dict) else {}


def auth_error_from_response(response: httpx.Response) -> AuthProviderError:
    """Build an AuthProviderError from an identity endpoint error response."""
    body = _json_body(response)
    message = (
        body.get("msg")
        or body.get("error_description")
        or body.get("message")
        or body.get("error")
        or response.reason_phrase
        or f"HTTP {response.status_code}"
    )
    error_code = body.get("error_code") or body.get("error")
    kind = classify_auth_error(message, response.status_code, error_code)
    return AuthProviderError(message, kind=kind, status=response.status_code)


def auth_error_from_transport(exc: Exception) -> AuthProviderError:
    return AuthProviderError(str(exc) or exc.__class__.__name__, kind=AuthErrorKind.NETWORK)


def provider_error_from_response(response: httpx.Response) -> ProviderError:
    """Build a ProviderError from a store/storage error response (code, details, hint kept)."""
    body = _json_body(response)
    code = body.get("code") or body.get("error") or body.get("statusCode")
    return ProviderError(
        body.get("message") or response.reason_phrase or f"HTTP {response.status_code}",
        code=str(code) if code is not None else str(response.status_code),
        details=body.get("details"),
        hint=body.get("hint"),
        status=response.status_code,
    )


def provider_error_from_transport(exc: Exception) -> ProviderError:
    return ProviderError(
        str(exc) or exc.__class__.__name__,
        code="NETWORK_ERROR",
        details=exc.__class__.__name__,
    )


def invalid_body_error(response: httpx.Response) -> ProviderError:
    """A 2xx response whose body is not the expected JSON (proxy or captive portal page)."""
    return ProviderError(
        "Unexpected non-JSON response from backend",
        code="INVALID_RESPONSE",
        details=response.headers.get("content-type"),
        status=response.status_code,
    )
