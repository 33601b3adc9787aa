"""Identity provider client (GoTrue REST API under /auth/v1).

Holds the current session in memory and publishes lifecycle events on an
AuthStateChannel. Every failure is raised as AuthProviderError with its
AuthErrorKind already assigned.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from planejar.application.dtos.auth import AuthResponse, AuthSession, AuthUser
from planejar.application.services.auth_events import (
    AuthStateCallback,
    AuthStateChannel,
    Subscription,
)
from planejar.domain.enums import AuthErrorKind, AuthEvent, OtpType
from planejar.domain.exceptions import AuthProviderError
from planejar.infrastructure.supabase.errors import (
    auth_error_from_response,
    auth_error_from_transport,
)

logger = logging.getLogger(__name__)

SESSION_MISSING_MESSAGE = "Auth session missing!"


def _parse_user(data: dict[str, Any] | None) -> AuthUser | None:
    if not data or not data.get("id"):
        return None
    return AuthUser(
        id=data["id"],
        email=data.get("email") or "",
        user_metadata=data.get("user_metadata") or {},
    )


def _parse_session(data: dict[str, Any]) -> AuthSession | None:
    """Session from a token response; None when the body is a bare user."""
    if not data.get("access_token"):
        return None
    user = _parse_user(data.get("user"))
    if user is None:
        return None
    return AuthSession(
        user=user,
        access_token=data["access_token"],
        refresh_token=data.get("refresh_token") or "",
    )


class SupabaseAuthClient:
    """Identity provider over HTTP; implements IIdentityProvider."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._base = f"{base_url.rstrip('/')}/auth/v1"
        self._api_key = api_key
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=timeout)
        self._owns_http = http_client is None
        self._session: AuthSession | None = None
        self._channel = AuthStateChannel()

    async def aclose(self) -> None:
        """Close the HTTP client only if we created it (do not close injected client)."""
        if self._owns_http:
            await self._http.aclose()

    @property
    def channel(self) -> AuthStateChannel:
        return self._channel

    async def access_token(self) -> str | None:
        """Bearer token for the other adapters (None when signed out)."""
        return self._session.access_token if self._session else None

    async def _request(
        self,
        method: str,
        path: str,
        *,
        body: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
        token: str | None = None,
    ) -> dict[str, Any]:
        headers = {
            "apikey": self._api_key,
            "Authorization": f"Bearer {token or self._api_key}",
            "Content-Type": "application/json",
        }
        try:
            resp = await self._http.request(
                method, f"{self._base}{path}", json=body, params=params, headers=headers
            )
            if resp.status_code >= 400:
                raise auth_error_from_response(resp)
            data = resp.json() if resp.content else {}
        except (httpx.TransportError, httpx.StreamConsumed) as exc:
            raise auth_error_from_transport(exc) from exc
        except ValueError as exc:
            logger.error("Identity endpoint %s returned a non-JSON body", path)
            raise AuthProviderError(
                "Unexpected response from identity provider",
                kind=AuthErrorKind.UNKNOWN,
                status=resp.status_code,
            ) from exc
        if not isinstance(data, dict):
            raise AuthProviderError(
                "Unexpected response from identity provider",
                kind=AuthErrorKind.UNKNOWN,
                status=resp.status_code,
            )
        return data

    def _require_session(self) -> AuthSession:
        if self._session is None:
            raise AuthProviderError(SESSION_MISSING_MESSAGE, kind=AuthErrorKind.SESSION_MISSING)
        return self._session

    async def _set_session(self, session: AuthSession | None, event: AuthEvent) -> None:
        self._session = session
        await self._channel.publish(event, session)

    async def sign_up(
        self, email: str, password: str, metadata: dict[str, Any] | None = None
    ) -> AuthResponse:
        """Register; session is None when e-mail confirmation is pending."""
        data = await self._request(
            "POST", "/signup", body={"email": email, "password": password, "data": metadata or {}}
        )
        session = _parse_session(data)
        if session is not None:
            await self._set_session(session, AuthEvent.SIGNED_IN)
            return AuthResponse(user=session.user, session=session)
        return AuthResponse(user=_parse_user(data.get("user") or data), session=None)

    async def sign_in_with_password(self, email: str, password: str) -> AuthResponse:
        data = await self._request(
            "POST",
            "/token",
            params={"grant_type": "password"},
            body={"email": email, "password": password},
        )
        session = _parse_session(data)
        if session is None:
            raise AuthProviderError("Invalid token response", kind=AuthErrorKind.UNKNOWN)
        await self._set_session(session, AuthEvent.SIGNED_IN)
        return AuthResponse(user=session.user, session=session)

    async def sign_out(self) -> None:
        """Revoke the current session; local state is cleared even if revoke fails."""
        session = self._session
        try:
            if session is not None:
                await self._request("POST", "/logout", token=session.access_token)
        finally:
            await self._set_session(None, AuthEvent.SIGNED_OUT)

    async def get_session(self) -> AuthSession | None:
        return self._session

    async def get_user(self) -> AuthUser:
        session = self._require_session()
        data = await self._request("GET", "/user", token=session.access_token)
        user = _parse_user(data)
        if user is None:
            raise AuthProviderError(SESSION_MISSING_MESSAGE, kind=AuthErrorKind.SESSION_MISSING)
        return user

    async def refresh_session(self, refresh_token: str | None = None) -> AuthSession | None:
        token = refresh_token or (self._session.refresh_token if self._session else None)
        if not token:
            raise AuthProviderError(SESSION_MISSING_MESSAGE, kind=AuthErrorKind.SESSION_MISSING)
        data = await self._request(
            "POST",
            "/token",
            params={"grant_type": "refresh_token"},
            body={"refresh_token": token},
        )
        session = _parse_session(data)
        if session is not None:
            await self._set_session(session, AuthEvent.TOKEN_REFRESHED)
        return session

    async def reset_password_for_email(self, email: str, redirect_to: str) -> None:
        await self._request(
            "POST", "/recover", params={"redirect_to": redirect_to}, body={"email": email}
        )

    async def update_user(
        self, *, password: str | None = None, data: dict[str, Any] | None = None
    ) -> AuthUser:
        session = self._require_session()
        body: dict[str, Any] = {}
        if password is not None:
            body["password"] = password
        if data is not None:
            body["data"] = data
        result = await self._request("PUT", "/user", body=body, token=session.access_token)
        user = _parse_user(result) or session.user
        await self._set_session(
            AuthSession(user=user, access_token=session.access_token, refresh_token=session.refresh_token),
            AuthEvent.USER_UPDATED,
        )
        return user

    async def verify_otp(self, email: str, token: str, otp_type: OtpType) -> AuthResponse:
        data = await self._request(
            "POST", "/verify", body={"type": otp_type.value, "email": email, "token": token}
        )
        session = _parse_session(data)
        if session is None:
            return AuthResponse(user=_parse_user(data.get("user") or data), session=None)
        event = AuthEvent.PASSWORD_RECOVERY if otp_type is OtpType.RECOVERY else AuthEvent.SIGNED_IN
        await self._set_session(session, event)
        return AuthResponse(user=session.user, session=session)

    def on_auth_state_change(self, callback: AuthStateCallback) -> Subscription:
        return self._channel.subscribe(callback)
