"""Typed auth-state event channel.

The identity adapter publishes lifecycle events (SIGNED_IN, SIGNED_OUT,
TOKEN_REFRESHED, USER_UPDATED, PASSWORD_RECOVERY) with the new session
or None. Subscribers get a Subscription whose unsubscribe() is
idempotent.
"""

from __future__ import annotations

import inspect
import itertools
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from planejar.domain.enums import AuthEvent

if TYPE_CHECKING:
    from planejar.application.dtos.auth import AuthSession

logger = logging.getLogger(__name__)

AuthStateCallback = Callable[[AuthEvent, "AuthSession | None"], Awaitable[None] | None]


class Subscription:
    """Handle for one registered listener."""

    def __init__(self, channel: AuthStateChannel, listener_id: int) -> None:
        self._channel = channel
        self._listener_id = listener_id
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self) -> None:
        """Deregister the listener. Further calls do nothing."""
        if not self._active:
            return
        self._active = False
        self._channel._remove(self._listener_id)


class AuthStateChannel:
    """Fan-out of auth events to listeners, in subscription order.

    Listeners may be plain functions or coroutine functions; coroutine
    listeners are awaited before the next one runs. A failing listener is
    logged and does not stop delivery to the others.
    """

    def __init__(self) -> None:
        self._listeners: dict[int, AuthStateCallback] = {}
        self._ids = itertools.count(1)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def subscribe(self, callback: AuthStateCallback) -> Subscription:
        listener_id = next(self._ids)
        self._listeners[listener_id] = callback
        return Subscription(self, listener_id)

    def _remove(self, listener_id: int) -> None:
        self._listeners.pop(listener_id, None)

    async def publish(self, event: AuthEvent, session: AuthSession | None) -> None:
        """Deliver event to every current listener."""
        for callback in list(self._listeners.values()):
            try:
                result = callback(event, session)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Auth state listener failed for event %s", event.value)
