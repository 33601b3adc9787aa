"""Project activity log (activity_logs). Entries are append-only."""

from __future__ import annotations

from planejar.application.dtos.records import LogEntry
from planejar.infrastructure.repositories.base import (
    REPOSITORY_ERRORS,
    SupabaseRepository,
    log_repository_error,
)
from planejar.infrastructure.repositories.mappers import log_entry_from_row
from planejar.infrastructure.supabase.tables import TABLE_ACTIVITY_LOGS


class ActivityLogRepository(SupabaseRepository):
    async def add_log_entry(self, project_id: str, actor_id: str, actor_name: str, action: str) -> bool:
        row = {
            "project_id": project_id,
            "actor_id": actor_id,
            "actor_name": actor_name,
            "action": action,
        }
        try:
            await self._store.table(TABLE_ACTIVITY_LOGS).insert([row]).execute()
            return True
        except REPOSITORY_ERRORS as exc:
            log_repository_error("adding log entry", exc)
            return False

    async def get_activity_log(self, project_id: str) -> list[LogEntry]:
        """Entries of the project, newest first."""
        try:
            rows = await (
                self._store.table(TABLE_ACTIVITY_LOGS)
                .select()
                .eq("project_id", project_id)
                .order("created_at", ascending=False)
                .execute()
            )
            return [log_entry_from_row(r) for r in rows]
        except REPOSITORY_ERRORS as exc:
            log_repository_error("fetching activity log", exc)
            return []
