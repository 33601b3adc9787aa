"""In-app notifications (notifications)."""

from __future__ import annotations

from planejar.application.dtos.records import Notification
from planejar.domain.enums import NotificationType
from planejar.infrastructure.repositories.base import (
    REPOSITORY_ERRORS,
    SupabaseRepository,
    log_repository_error,
)
from planejar.infrastructure.repositories.mappers import notification_from_row
from planejar.infrastructure.supabase.tables import TABLE_NOTIFICATIONS


class NotificationRepository(SupabaseRepository):
    async def create_notification(
        self,
        recipient_id: str,
        title: str,
        message: str,
        *,
        link: str | None = None,
        notification_type: NotificationType | None = None,
    ) -> bool:
        row = {
            "recipient_id": recipient_id,
            "title": title,
            "message": message,
            "link": link,
            "type": notification_type.value if notification_type else None,
            "is_read": False,
        }
        try:
            await self._store.table(TABLE_NOTIFICATIONS).insert([row]).execute()
            return True
        except REPOSITORY_ERRORS as exc:
            log_repository_error("creating notification", exc)
            return False

    async def get_user_notifications(self, user_id: str) -> list[Notification]:
        """Unread notifications of the user, newest first."""
        try:
            rows = await (
                self._store.table(TABLE_NOTIFICATIONS)
                .select()
                .eq("recipient_id", user_id)
                .eq("is_read", False)
                .order("created_at", ascending=False)
                .execute()
            )
            return [notification_from_row(r) for r in rows]
        except REPOSITORY_ERRORS as exc:
            log_repository_error("fetching notifications", exc)
            return []

    async def mark_notification_as_read(self, notification_id: str) -> bool:
        try:
            await (
                self._store.table(TABLE_NOTIFICATIONS).update({"is_read": True}).eq("id", notification_id).execute()
            )
            return True
        except REPOSITORY_ERRORS as exc:
            log_repository_error("marking notification as read", exc)
            return False
