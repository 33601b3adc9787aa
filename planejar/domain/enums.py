"""Domain enumerations for Planejar.

Enums represent the closed value sets stored in the relational backend
(roles, statuses, channels). Values match the stored column values.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class UserRole(_ValuesMixin, str, Enum):
    """Application role. Determines which projects a user can see."""

    CLIENT = "client"
    CONSULTANT = "consultant"
    AUXILIARY = "auxiliary"
    ADMINISTRATOR = "administrator"


class ClientType(_ValuesMixin, str, Enum):
    """Client sub-type: holding partner or prospect."""

    PARTNER = "partner"
    INTERESTED = "interested"


class ProjectStatus(_ValuesMixin, str, Enum):
    """Project lifecycle status."""

    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    ARCHIVED = "archived"


class PostCompletionStatus(_ValuesMixin, str, Enum):
    """Follow-up status once the main project is delivered."""

    PENDING_CHOICE = "pending_choice"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class PhaseStatus(_ValuesMixin, str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class ReviewStatus(_ValuesMixin, str, Enum):
    """Review state shared by phase 2 and phase 3 forms."""

    PENDING_CLIENT = "pending_client"
    PENDING_CONSULTANT_REVIEW = "pending_consultant_review"
    APPROVED = "approved"


class DocumentStatus(_ValuesMixin, str, Enum):
    """Document status. Deprecated documents are soft-deleted."""

    ACTIVE = "active"
    DEPRECATED = "deprecated"


class TaskStatus(_ValuesMixin, str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    APPROVED = "approved"


class ChatChannel(_ValuesMixin, str, Enum):
    """Per-project chat channel: with clients, or internal staff only."""

    CLIENT = "client"
    INTERNAL = "internal"


class AssetType(_ValuesMixin, str, Enum):
    PROPERTY = "property"
    VEHICLE = "vehicle"
    CASH = "cash"
    OTHER = "other"


class AssetStatus(_ValuesMixin, str, Enum):
    PENDING = "pendente"
    COMPLETE = "completo"
    UNDER_CORRECTION = "em_correcao"
    VALIDATED = "validado"


class NotificationType(_ValuesMixin, str, Enum):
    MESSAGE = "message"
    TASK = "task"
    ALERT = "alert"


class AuthEvent(_ValuesMixin, str, Enum):
    """Identity lifecycle events delivered to auth-state listeners."""

    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    USER_UPDATED = "USER_UPDATED"
    PASSWORD_RECOVERY = "PASSWORD_RECOVERY"


class AuthErrorKind(_ValuesMixin, str, Enum):
    """Closed classification of identity provider failures.

    Assigned once at the adapter boundary; downstream code switches on
    the kind instead of parsing provider messages.
    """

    NETWORK = "network"
    INVALID_CREDENTIALS = "invalid_credentials"
    SESSION_MISSING = "session_missing"
    EMAIL_NOT_CONFIRMED = "email_not_confirmed"
    USER_ALREADY_REGISTERED = "user_already_registered"
    WEAK_PASSWORD = "weak_password"
    UNKNOWN = "unknown"


class OtpType(_ValuesMixin, str, Enum):
    RECOVERY = "recovery"
    EMAIL_CHANGE = "email_change"
    PHONE_CHANGE = "phone_change"
    SIGNUP = "signup"


class SessionState(_ValuesMixin, str, Enum):
    """Coarse state of the session controller."""

    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"
    PASSWORD_RECOVERY = "password_recovery"
