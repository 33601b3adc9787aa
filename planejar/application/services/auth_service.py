"""Session façade over the identity provider.

Wraps sign-up, sign-in, sign-out, session inspection, password recovery,
OTP verification and auth-state subscription. Transient provider
failures are retried with jittered waits; every other failure is logged
and collapses to None/False. Sign-in failures keep their classification
in last_error_kind so callers can tell a wrong password from an outage.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from planejar.application.dtos.auth import AuthResult, AuthSession, PasswordCheck
from planejar.application.dtos.user import User
from planejar.core.constants import SESSION_CACHE_KEY
from planejar.domain.enums import AuthErrorKind, ClientType, OtpType, UserRole
from planejar.domain.exceptions import (
    AuthInvalidCredentialsError,
    AuthProviderError,
    PlanejarException,
    ValidationException,
)
from planejar.shared.utils.retry import RetryPolicy, retry_async

if TYPE_CHECKING:
    from planejar.application.interfaces.providers import IIdentityProvider, ISessionCache
    from planejar.application.services.auth_events import AuthStateCallback
    from planejar.core.config import Settings
    from planejar.infrastructure.repositories.user_repo import UserRepository

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6

MSG_INVALID_CREDENTIALS = "E-mail ou senha inválidos."
MSG_EMAIL_NOT_CONFIRMED = "Por favor, confirme seu e-mail antes de fazer login."
MSG_ALREADY_REGISTERED = "Este e-mail já está registrado."
MSG_WEAK_PASSWORD = "Senha deve ter no mínimo 6 caracteres."
MSG_INVALID_EMAIL = "E-mail inválido."
MSG_VALID_PASSWORD = "Senha válida."
MSG_GENERIC = "Erro na autenticação. Tente novamente."

_KIND_MESSAGES: dict[AuthErrorKind, str] = {
    AuthErrorKind.INVALID_CREDENTIALS: MSG_INVALID_CREDENTIALS,
    AuthErrorKind.EMAIL_NOT_CONFIRMED: MSG_EMAIL_NOT_CONFIRMED,
    AuthErrorKind.USER_ALREADY_REGISTERED: MSG_ALREADY_REGISTERED,
    AuthErrorKind.WEAK_PASSWORD: MSG_WEAK_PASSWORD,
}

# Provider message fragments for errors that arrive unclassified.
_MESSAGE_FRAGMENTS: tuple[tuple[str, str], ...] = (
    ("Invalid login credentials", MSG_INVALID_CREDENTIALS),
    ("Email not confirmed", MSG_EMAIL_NOT_CONFIRMED),
    ("User already registered", MSG_ALREADY_REGISTERED),
    ("Password should be at least", MSG_WEAK_PASSWORD),
    ("AUTH_INVALID_CREDENTIALS", MSG_INVALID_CREDENTIALS),
)


def validate_email(email: str) -> bool:
    """True for local@domain.tld with no whitespace."""
    return bool(EMAIL_PATTERN.match(email or ""))


def validate_password_strength(password: str) -> PasswordCheck:
    if len(password or "") < MIN_PASSWORD_LENGTH:
        return PasswordCheck(is_valid=False, message=MSG_WEAK_PASSWORD)
    return PasswordCheck(is_valid=True, message=MSG_VALID_PASSWORD)


def parse_auth_error(error: BaseException | str | None) -> str:
    """Map a provider failure to the Portuguese message shown to users."""
    if isinstance(error, AuthProviderError) and error.kind in _KIND_MESSAGES:
        return _KIND_MESSAGES[error.kind]
    if isinstance(error, AuthInvalidCredentialsError):
        return MSG_INVALID_CREDENTIALS
    if isinstance(error, PlanejarException):
        message = error.message
    else:
        message = str(error) if error is not None else ""
    for fragment, text in _MESSAGE_FRAGMENTS:
        if fragment in message:
            return text
    return message or MSG_GENERIC


def _is_network_error(exc: BaseException) -> bool:
    return isinstance(exc, AuthProviderError) and exc.kind is AuthErrorKind.NETWORK


def _is_missing(result: Any) -> bool:
    return result is None


class AuthService:
    """Identity façade: one instance per running client.

    Attributes:
        last_error_kind: Classification of the last sign-up/sign-in failure, or None.
        last_error_message: User-facing message for that failure, or None.
    """

    def __init__(
        self,
        identity: IIdentityProvider,
        users: UserRepository,
        session_cache: ISessionCache,
        settings: Settings,
        *,
        sleep: Callable[[float], Awaitable[None]] | None = None,
    ) -> None:
        self._identity = identity
        self._users = users
        self._cache = session_cache
        self._settings = settings
        self._sleep = sleep
        self._auth_policy = RetryPolicy(
            max_attempts=settings.auth_retry_attempts,
            base_delay=settings.auth_retry_base_delay,
            jitter=settings.auth_retry_jitter,
        )
        self._db_policy = RetryPolicy(
            max_attempts=settings.db_retry_attempts,
            base_delay=settings.db_retry_delay,
        )
        self.last_error_kind: AuthErrorKind | None = None
        self.last_error_message: str | None = None

    def _retry_kwargs(self) -> dict[str, Any]:
        return {"sleep": self._sleep} if self._sleep is not None else {}

    def _record_failure(self, kind: AuthErrorKind, error: BaseException | str | None) -> None:
        self.last_error_kind = kind
        self.last_error_message = parse_auth_error(error)

    def _validate_credentials(self, email: str, password: str) -> None:
        if not validate_email(email):
            raise ValidationException(MSG_INVALID_EMAIL, field="email")
        check = validate_password_strength(password)
        if not check.is_valid:
            raise ValidationException(check.message, field="password")

    # Sign-up / sign-in

    async def sign_up(
        self,
        email: str,
        password: str,
        name: str,
        role: UserRole = UserRole.CLIENT,
        client_type: ClientType | None = None,
    ) -> AuthResult | None:
        """Create the identity and its mirrored users row.

        Returns None (and logs) on invalid input, provider failure, or when
        the users row cannot be written after all attempts.
        """
        self.last_error_kind = None
        self.last_error_message = None
        try:
            self._validate_credentials(email, password)
        except ValidationException as exc:
            logger.warning("Sign-up rejected for %s: %s", email, exc.message)
            weak = exc.details.get("field") == "password"
            self._record_failure(AuthErrorKind.WEAK_PASSWORD if weak else AuthErrorKind.UNKNOWN, exc.message)
            return None

        metadata = {
            "name": name,
            "role": role.value,
            "client_type": client_type.value if client_type else None,
        }
        try:
            response = await retry_async(
                self._identity.sign_up,
                email,
                password,
                metadata,
                policy=self._auth_policy,
                retry_on=_is_network_error,
                **self._retry_kwargs(),
            )
        except AuthProviderError as exc:
            logger.error("Sign-up failed for %s: %s (%s)", email, exc.message, exc.kind.value)
            self._record_failure(exc.kind, exc)
            return None
        if response.user is None:
            logger.error("Sign-up for %s returned no user", email)
            self._record_failure(AuthErrorKind.UNKNOWN, None)
            return None

        mirrored = User(
            id=response.user.id,
            name=name,
            email=email,
            role=role,
            client_type=client_type,
        )
        user = await retry_async(
            self._users.create_user,
            mirrored,
            policy=self._db_policy,
            retry_on_result=_is_missing,
            **self._retry_kwargs(),
        )
        if user is None:
            logger.error("Failed to create users row for %s after sign-up", email)
            self._record_failure(AuthErrorKind.UNKNOWN, "Falha ao criar o registro do usuário.")
            return None
        logger.info("Signed up %s as %s", email, role.value)
        return AuthResult(user=user, session=response.session)

    async def create_user_as_admin(
        self,
        email: str,
        password: str,
        name: str,
        role: UserRole,
        client_type: ClientType | None = None,
    ) -> AuthResult | None:
        """Create another user's account (same flow as sign-up)."""
        return await self.sign_up(email, password, name, role, client_type)

    async def _authenticate(self, email: str, password: str) -> AuthResult | None:
        try:
            response = await retry_async(
                self._identity.sign_in_with_password,
                email,
                password,
                policy=self._auth_policy,
                retry_on=_is_network_error,
                **self._retry_kwargs(),
            )
        except AuthProviderError as exc:
            if exc.kind is AuthErrorKind.INVALID_CREDENTIALS:
                raise AuthInvalidCredentialsError() from exc
            logger.error("Sign-in failed for %s: %s (%s)", email, exc.message, exc.kind.value)
            self._record_failure(exc.kind, exc)
            return None
        if response.session is None or response.user is None:
            logger.error("Sign-in for %s returned no session", email)
            self._record_failure(AuthErrorKind.UNKNOWN, None)
            return None
        user = await self._users.get_user(response.user.id)
        if user is None:
            logger.error("Signed in %s but no users row exists for %s", email, response.user.id)
            self._record_failure(AuthErrorKind.UNKNOWN, "Usuário não encontrado.")
            return None
        return AuthResult(user=user, session=response.session)

    async def sign_in(self, email: str, password: str) -> AuthResult | None:
        """Authenticate and load the mirrored user.

        Invalid credentials are never retried; they return None with
        last_error_kind set to INVALID_CREDENTIALS.
        """
        self.last_error_kind = None
        self.last_error_message = None
        try:
            return await self._authenticate(email, password)
        except AuthInvalidCredentialsError as exc:
            logger.info("Invalid credentials for %s", email)
            self._record_failure(AuthErrorKind.INVALID_CREDENTIALS, exc)
            return None

    async def sign_out(self) -> bool:
        try:
            await self._identity.sign_out()
            return True
        except AuthProviderError as exc:
            logger.error("Sign-out failed: %s", exc.message)
            return False

    # Session inspection

    async def get_current_session(self) -> AuthSession | None:
        try:
            return await self._identity.get_session()
        except AuthProviderError as exc:
            logger.error("Error getting session: %s", exc.message)
            return None

    async def get_current_user(self) -> User | None:
        """Mirrored user of the current session; None when signed out."""
        try:
            auth_user = await self._identity.get_user()
        except AuthProviderError as exc:
            if exc.kind is AuthErrorKind.SESSION_MISSING:
                logger.debug("No active session")
            else:
                logger.error("Error getting current user: %s", exc.message)
            return None
        return await self._users.get_user(auth_user.id)

    async def refresh_session(self) -> AuthSession | None:
        try:
            return await self._identity.refresh_session()
        except AuthProviderError as exc:
            logger.warning("Session refresh failed: %s", exc.message)
            return None

    # Password management

    async def reset_password_for_email(self, email: str) -> bool:
        """Send the recovery e-mail linking back to the password reset page."""
        if not validate_email(email):
            logger.warning("Password reset rejected: invalid e-mail %r", email)
            return False
        try:
            await self._identity.reset_password_for_email(
                email, self._settings.password_reset_redirect_url
            )
            return True
        except AuthProviderError as exc:
            logger.error("Password reset request failed for %s: %s", email, exc.message)
            return False

    async def update_password(self, new_password: str) -> bool:
        """Set a new password for the signed-in user."""
        check = validate_password_strength(new_password)
        if not check.is_valid:
            logger.warning("Password update rejected: %s", check.message)
            return False
        if await self.get_current_session() is None:
            logger.warning("Password update requires an active session")
            return False
        try:
            await self._identity.update_user(password=new_password)
            return True
        except AuthProviderError as exc:
            logger.error("Password update failed: %s", exc.message)
            return False

    async def verify_otp(
        self, email: str, token: str, otp_type: OtpType | str = OtpType.RECOVERY
    ) -> AuthSession | None:
        try:
            response = await self._identity.verify_otp(email, token, OtpType(otp_type))
        except ValueError:
            logger.warning("Unknown OTP type %r", otp_type)
            return None
        except AuthProviderError as exc:
            logger.error("OTP verification failed for %s: %s", email, exc.message)
            return None
        return response.session

    # Auth state

    def on_auth_state_change(self, callback: AuthStateCallback) -> Callable[[], None] | None:
        """Register callback; return a closure that deregisters it (idempotent)."""
        try:
            subscription = self._identity.on_auth_state_change(callback)
        except PlanejarException as exc:
            logger.error("Could not subscribe to auth state: %s", exc.message)
            return None
        return subscription.unsubscribe

    # User lookup

    async def is_email_registered(self, email: str) -> bool:
        return await self._users.get_user_by_email(email) is not None

    async def get_user_by_email(self, email: str) -> User | None:
        return await self._users.get_user_by_email(email)

    # Local session persistence

    async def persist_session(self) -> bool:
        session = await self.get_current_session()
        if session is None:
            return False
        try:
            await self._cache.set(SESSION_CACHE_KEY, session.to_dict())
            return True
        except OSError as exc:
            logger.error("Could not persist session: %s", exc)
            return False

    async def restore_session(self) -> AuthSession | None:
        """Refresh the cached session; drop the cache entry when refresh fails."""
        try:
            cached = await self._cache.get(SESSION_CACHE_KEY)
        except OSError as exc:
            logger.error("Could not read persisted session: %s", exc)
            return None
        if not cached:
            return None
        stored = AuthSession.from_dict(cached)
        try:
            refreshed = await self._identity.refresh_session(stored.refresh_token or None)
        except AuthProviderError as exc:
            logger.info("Persisted session could not be refreshed: %s", exc.message)
            refreshed = None
        if refreshed is None:
            await self.clear_persisted_session()
            return None
        await self.persist_session()
        return refreshed

    async def clear_persisted_session(self) -> bool:
        try:
            await self._cache.delete(SESSION_CACHE_KEY)
            return True
        except OSError as exc:
            logger.error("Could not clear persisted session: %s", exc)
            return False
