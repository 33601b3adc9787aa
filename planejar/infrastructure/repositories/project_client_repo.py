"""Project membership of client users (project_clients)."""

from __future__ import annotations

from planejar.application.dtos.user import User
from planejar.infrastructure.repositories.base import (
    REPOSITORY_ERRORS,
    SupabaseRepository,
    log_repository_error,
)
from planejar.infrastructure.repositories.mappers import user_from_row
from planejar.infrastructure.supabase.tables import TABLE_PROJECT_CLIENTS, TABLE_USERS


class ProjectClientRepository(SupabaseRepository):
    async def add_client_to_project(self, project_id: str, client_id: str) -> bool:
        try:
            await (
                self._store.table(TABLE_PROJECT_CLIENTS)
                .upsert([{"project_id": project_id, "client_id": client_id}], on_conflict="project_id,client_id")
                .execute()
            )
            return True
        except REPOSITORY_ERRORS as exc:
            log_repository_error("adding client to project", exc)
            return False

    async def remove_client_from_project(self, project_id: str, client_id: str) -> bool:
        try:
            await (
                self._store.table(TABLE_PROJECT_CLIENTS)
                .delete()
                .eq("project_id", project_id)
                .eq("client_id", client_id)
                .execute()
            )
            return True
        except REPOSITORY_ERRORS as exc:
            log_repository_error("removing client from project", exc)
            return False

    async def get_project_client_ids(self, project_id: str) -> list[str]:
        try:
            rows = await (
                self._store.table(TABLE_PROJECT_CLIENTS).select("client_id").eq("project_id", project_id).execute()
            )
            return [r["client_id"] for r in rows]
        except REPOSITORY_ERRORS as exc:
            log_repository_error("fetching project clients", exc)
            return []

    async def get_project_ids_for_client(self, client_id: str) -> list[str]:
        try:
            rows = await (
                self._store.table(TABLE_PROJECT_CLIENTS).select("project_id").eq("client_id", client_id).execute()
            )
            return [r["project_id"] for r in rows]
        except REPOSITORY_ERRORS as exc:
            log_repository_error("fetching client projects", exc)
            return []

    async def get_project_clients(self, project_id: str) -> list[User]:
        """Users that are clients of the project, ordered by name."""
        client_ids = await self.get_project_client_ids(project_id)
        if not client_ids:
            return []
        try:
            rows = await self._store.table(TABLE_USERS).select().in_("id", client_ids).order("name").execute()
            return [user_from_row(r) for r in rows]
        except REPOSITORY_ERRORS as exc:
            log_repository_error("fetching project client users", exc)
            return []
