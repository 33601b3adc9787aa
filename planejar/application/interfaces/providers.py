"""Backend provider interfaces (ports) for the application layer.

Protocols define the contracts the hosted backend adapters fulfil (DIP):
identity, relational store, object storage, and the local session cache.
Failures surface as AuthProviderError (identity) or ProviderError
(store, storage), already classified by the adapter.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from planejar.application.dtos.auth import AuthResponse, AuthSession, AuthUser
    from planejar.application.interfaces.query import QueryResult, TableQuery
    from planejar.application.services.auth_events import AuthStateCallback, Subscription
    from planejar.domain.enums import OtpType


class IIdentityProvider(Protocol):
    """Protocol for the identity provider (sign-up, sign-in, sessions)."""

    async def sign_up(
        self, email: str, password: str, metadata: dict[str, Any] | None = None
    ) -> AuthResponse:
        """Register a new identity; session is None when confirmation is pending."""

    async def sign_in_with_password(self, email: str, password: str) -> AuthResponse:
        """Authenticate with e-mail and password."""

    async def sign_out(self) -> None:
        """End the current session."""

    async def get_session(self) -> AuthSession | None:
        """Return the locally held session, if any (no network call)."""

    async def get_user(self) -> AuthUser:
        """Return the user of the current session; SESSION_MISSING when signed out."""

    async def refresh_session(self, refresh_token: str | None = None) -> AuthSession | None:
        """Exchange a refresh token (the current one when None) for a new session."""

    async def reset_password_for_email(self, email: str, redirect_to: str) -> None:
        """Send the password recovery e-mail."""

    async def update_user(
        self, *, password: str | None = None, data: dict[str, Any] | None = None
    ) -> AuthUser:
        """Update the signed-in user's password and/or metadata."""

    async def verify_otp(self, email: str, token: str, otp_type: OtpType) -> AuthResponse:
        """Verify a one-time code sent by e-mail."""

    def on_auth_state_change(self, callback: AuthStateCallback) -> Subscription:
        """Register a listener for identity lifecycle events."""


class IQueryExecutor(Protocol):
    """Protocol for executing a TableQuery against a backend."""

    async def run(self, query: TableQuery) -> QueryResult:
        """Execute query; raise ProviderError on failure."""


class IRelationalStore(IQueryExecutor, Protocol):
    """Protocol for the relational store (table-scoped CRUD)."""

    def table(self, name: str) -> TableQuery:
        """Start a query on table name."""


class IObjectStorage(Protocol):
    """Protocol for path-addressed blob storage scoped to buckets."""

    async def upload(
        self,
        bucket: str,
        path: str,
        content: bytes,
        content_type: str,
        *,
        upsert: bool = False,
        cache_control: str = "3600",
    ) -> str:
        """Upload content at path; return the stored object key."""

    async def remove(self, bucket: str, paths: list[str]) -> None:
        """Delete objects at paths."""

    def get_public_url(self, bucket: str, path: str) -> str:
        """Return the public URL of an object (no network call)."""


class ISessionCache(Protocol):
    """Protocol for local key/value persistence of the session."""

    async def get(self, key: str) -> Any:
        """Return cached value or None."""

    async def set(self, key: str, value: Any) -> None:
        """Store value under key."""

    async def delete(self, key: str) -> None:
        """Remove key."""
