"""Project document metadata (documents). Deletion is soft: status -> deprecated."""

from __future__ import annotations

from planejar.application.dtos.records import Document
from planejar.domain.enums import DocumentStatus
from planejar.infrastructure.repositories.base import (
    REPOSITORY_ERRORS,
    SupabaseRepository,
    log_repository_error,
)
from planejar.infrastructure.repositories.mappers import document_from_row
from planejar.infrastructure.supabase.tables import TABLE_DOCUMENTS


class DocumentRepository(SupabaseRepository):
    async def upload_document(
        self,
        project_id: str,
        phase_id: int,
        name: str,
        url: str,
        *,
        uploaded_by: str | None = None,
        doc_type: str = "pdf",
        version: int = 1,
    ) -> Document | None:
        """Record metadata for a blob already in object storage."""
        row = {
            "project_id": project_id,
            "phase_id": phase_id,
            "name": name,
            "url": url,
            "type": doc_type,
            "uploaded_by": uploaded_by,
            "version": version,
            "status": DocumentStatus.ACTIVE.value,
        }
        try:
            rows = await self._store.table(TABLE_DOCUMENTS).insert([row]).execute()
            return document_from_row(rows[0]) if rows else None
        except REPOSITORY_ERRORS as exc:
            log_repository_error("uploading document", exc)
            return None

    async def get_document(self, document_id: str) -> Document | None:
        try:
            row = await self._store.table(TABLE_DOCUMENTS).select().eq("id", document_id).maybe_single()
            return document_from_row(row) if row else None
        except REPOSITORY_ERRORS as exc:
            log_repository_error("fetching document", exc)
            return None

    async def list_project_documents(self, project_id: str) -> list[Document]:
        """Active documents of the project, newest first."""
        try:
            rows = await (
                self._store.table(TABLE_DOCUMENTS)
                .select()
                .eq("project_id", project_id)
                .eq("status", DocumentStatus.ACTIVE.value)
                .order("uploaded_at", ascending=False)
                .execute()
            )
            return [document_from_row(r) for r in rows]
        except REPOSITORY_ERRORS as exc:
            log_repository_error("listing project documents", exc)
            return []

    async def list_phase_documents(self, project_id: str, phase_id: int) -> list[Document]:
        try:
            rows = await (
                self._store.table(TABLE_DOCUMENTS)
                .select()
                .eq("project_id", project_id)
                .eq("phase_id", phase_id)
                .eq("status", DocumentStatus.ACTIVE.value)
                .order("uploaded_at", ascending=False)
                .execute()
            )
            return [document_from_row(r) for r in rows]
        except REPOSITORY_ERRORS as exc:
            log_repository_error("listing phase documents", exc)
            return []

    async def delete_document(self, document_id: str) -> bool:
        try:
            await (
                self._store.table(TABLE_DOCUMENTS)
                .update({"status": DocumentStatus.DEPRECATED.value})
                .eq("id", document_id)
                .execute()
            )
            return True
        except REPOSITORY_ERRORS as exc:
            log_repository_error("deleting document", exc)
            return False
