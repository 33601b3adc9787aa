"""Per-project chat channels (chat_messages). Messages are append-only."""

from __future__ import annotations

from planejar.application.dtos.records import ChatMessage
from planejar.domain.enums import ChatChannel
from planejar.infrastructure.repositories.base import (
    REPOSITORY_ERRORS,
    SupabaseRepository,
    log_repository_error,
)
from planejar.infrastructure.repositories.mappers import chat_message_from_row
from planejar.infrastructure.supabase.tables import TABLE_CHAT_MESSAGES


class ChatRepository(SupabaseRepository):
    async def send_message(
        self, project_id: str, channel: ChatChannel, message: ChatMessage
    ) -> ChatMessage | None:
        """Append message to the channel; author name and role are stored with it."""
        row = {
            "project_id": project_id,
            "chat_type": channel.value,
            "author_id": message.author_id,
            "author_name": message.author_name,
            "author_role": message.author_role.value,
            "content": message.content,
        }
        try:
            rows = await self._store.table(TABLE_CHAT_MESSAGES).insert([row]).execute()
            return chat_message_from_row(rows[0]) if rows else None
        except REPOSITORY_ERRORS as exc:
            log_repository_error("sending message", exc)
            return None

    async def get_messages(self, project_id: str, channel: ChatChannel) -> list[ChatMessage]:
        """Messages of one channel, oldest first."""
        try:
            rows = await (
                self._store.table(TABLE_CHAT_MESSAGES)
                .select()
                .eq("project_id", project_id)
                .eq("chat_type", channel.value)
                .order("created_at")
                .execute()
            )
            return [chat_message_from_row(r) for r in rows]
        except REPOSITORY_ERRORS as exc:
            log_repository_error("fetching messages", exc)
            return []
