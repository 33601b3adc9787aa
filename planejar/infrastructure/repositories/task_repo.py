"""Project tasks (tasks)."""

from __future__ import annotations

from typing import Any

from planejar.application.dtos.records import Task
from planejar.domain.enums import TaskStatus
from planejar.infrastructure.repositories.base import (
    REPOSITORY_ERRORS,
    SupabaseRepository,
    log_repository_error,
)
from planejar.infrastructure.repositories.mappers import task_from_row
from planejar.infrastructure.supabase.tables import TABLE_TASKS

_UPDATABLE_COLUMNS = ("description", "status", "assignee_id", "phase_id")


class TaskRepository(SupabaseRepository):
    async def create_task(
        self,
        project_id: str,
        phase_id: int,
        description: str,
        created_by: str,
        assignee_id: str | None = None,
    ) -> Task | None:
        row = {
            "project_id": project_id,
            "phase_id": phase_id,
            "description": description,
            "status": TaskStatus.PENDING.value,
            "assignee_id": assignee_id,
            "created_by": created_by,
        }
        try:
            rows = await self._store.table(TABLE_TASKS).insert([row]).execute()
            return task_from_row(rows[0]) if rows else None
        except REPOSITORY_ERRORS as exc:
            log_repository_error("creating task", exc)
            return None

    async def list_project_tasks(self, project_id: str) -> list[Task]:
        try:
            rows = await (
                self._store.table(TABLE_TASKS).select().eq("project_id", project_id).order("created_at").execute()
            )
            return [task_from_row(r) for r in rows]
        except REPOSITORY_ERRORS as exc:
            log_repository_error("listing project tasks", exc)
            return []

    async def list_phase_tasks(self, project_id: str, phase_id: int) -> list[Task]:
        try:
            rows = await (
                self._store.table(TABLE_TASKS)
                .select()
                .eq("project_id", project_id)
                .eq("phase_id", phase_id)
                .order("created_at")
                .execute()
            )
            return [task_from_row(r) for r in rows]
        except REPOSITORY_ERRORS as exc:
            log_repository_error("listing phase tasks", exc)
            return []

    async def update_task(self, task_id: str, updates: dict[str, Any]) -> Task | None:
        values = {k: getattr(v, "value", v) for k, v in updates.items() if k in _UPDATABLE_COLUMNS}
        if not values:
            return None
        try:
            rows = await self._store.table(TABLE_TASKS).update(values).eq("id", task_id).execute()
            return task_from_row(rows[0]) if rows else None
        except REPOSITORY_ERRORS as exc:
            log_repository_error("updating task", exc)
            return None

    async def delete_task(self, task_id: str) -> bool:
        try:
            await self._store.table(TABLE_TASKS).delete().eq("id", task_id).execute()
            return True
        except REPOSITORY_ERRORS as exc:
            log_repository_error("deleting task", exc)
            return False
