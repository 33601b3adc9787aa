"""DTOs for authentication (identity provider read-models)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from planejar.application.dtos.user import User


@dataclass(frozen=True)
class AuthUser:
    """Identity provider user (subject id, e-mail, sign-up metadata)."""

    id: str
    email: str
    user_metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class AuthSession:
    """Active session: the user plus access and refresh tokens."""

    user: AuthUser
    access_token: str
    refresh_token: str

    def to_dict(self) -> dict[str, Any]:
        """Serialize for local persistence."""
        return {
            "user": {
                "id": self.user.id,
                "email": self.user.email,
                "user_metadata": dict(self.user.user_metadata),
            },
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AuthSession:
        """Deserialize from local persistence."""
        user = data.get("user") or {}
        return cls(
            user=AuthUser(
                id=user.get("id", ""),
                email=user.get("email", ""),
                user_metadata=user.get("user_metadata") or {},
            ),
            access_token=data.get("access_token", ""),
            refresh_token=data.get("refresh_token", ""),
        )


@dataclass(frozen=True)
class AuthResponse:
    """Raw provider answer to sign-up / sign-in / OTP verification.

    session is None when the provider requires e-mail confirmation first.
    """

    user: AuthUser | None
    session: AuthSession | None


@dataclass(frozen=True)
class AuthResult:
    """Successful sign-up or sign-in: mirrored application user plus session.

    session is None after a sign-up that still awaits e-mail confirmation.
    """

    user: User
    session: AuthSession | None


@dataclass(frozen=True)
class PasswordCheck:
    is_valid: bool
    message: str
