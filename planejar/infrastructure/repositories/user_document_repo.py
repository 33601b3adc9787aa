"""Personal documents attached to a user (user_documents)."""

from __future__ import annotations

from planejar.application.dtos.user import UserDocument
from planejar.infrastructure.repositories.base import (
    REPOSITORY_ERRORS,
    SupabaseRepository,
    log_repository_error,
)
from planejar.infrastructure.repositories.mappers import user_document_from_row
from planejar.infrastructure.supabase.tables import TABLE_USER_DOCUMENTS


class UserDocumentRepository(SupabaseRepository):
    async def upload_user_document(
        self, user_id: str, name: str, category: str, url: str
    ) -> UserDocument | None:
        """Record a document already stored in object storage."""
        try:
            rows = await (
                self._store.table(TABLE_USER_DOCUMENTS)
                .insert([{"user_id": user_id, "name": name, "category": category, "url": url}])
                .execute()
            )
            return user_document_from_row(rows[0]) if rows else None
        except REPOSITORY_ERRORS as exc:
            log_repository_error("uploading user document", exc)
            return None

    async def get_user_documents(self, user_id: str) -> list[UserDocument]:
        try:
            rows = await (
                self._store.table(TABLE_USER_DOCUMENTS)
                .select()
                .eq("user_id", user_id)
                .order("uploaded_at", ascending=False)
                .execute()
            )
            return [user_document_from_row(r) for r in rows]
        except REPOSITORY_ERRORS as exc:
            log_repository_error("listing user documents", exc)
            return []

    async def delete_user_document(self, document_id: str) -> bool:
        try:
            await self._store.table(TABLE_USER_DOCUMENTS).delete().eq("id", document_id).execute()
            return True
        except REPOSITORY_ERRORS as exc:
            log_repository_error("deleting user document", exc)
            return False
