"""Project repository: projects rows assembled with their related sets.

A Project is built from the projects row plus one query per related set
(clients, both chats, activity log, documents, tasks, phase 1-3 data),
joined client-side.
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import asdict, is_dataclass
from typing import Any

from planejar.application.dtos.project import (
    Asset,
    Phase,
    Phase1Data,
    Phase2Data,
    Phase3Data,
    Project,
)
from planejar.application.interfaces.providers import IRelationalStore
from planejar.core.constants import FIRST_PHASE_ID, PHASE_COUNT
from planejar.domain.enums import ChatChannel, ProjectStatus
from planejar.infrastructure.repositories.activity_log_repo import ActivityLogRepository
from planejar.infrastructure.repositories.asset_repo import AssetRepository
from planejar.infrastructure.repositories.base import (
    REPOSITORY_ERRORS,
    SupabaseRepository,
    log_repository_error,
)
from planejar.infrastructure.repositories.chat_repo import ChatRepository
from planejar.infrastructure.repositories.document_repo import DocumentRepository
from planejar.infrastructure.repositories.mappers import project_from_rows
from planejar.infrastructure.repositories.phase_data_repo import PhaseDataRepository
from planejar.infrastructure.repositories.project_client_repo import ProjectClientRepository
from planejar.infrastructure.repositories.task_repo import TaskRepository
from planejar.infrastructure.supabase.tables import TABLE_PROJECTS

logger = logging.getLogger(__name__)

# Columns of the projects row that update_project forwards.
PROJECT_UPDATABLE_COLUMNS = (
    "name",
    "status",
    "current_phase_id",
    "auxiliary_id",
    "post_completion_status",
)


def canonical_json(value: Any) -> str:
    """Stable JSON text for change detection (sorted keys, enums by value)."""
    if is_dataclass(value) and not isinstance(value, type):
        value = asdict(value)
    return json.dumps(value, sort_keys=True, default=str)


def _column_value(value: Any) -> Any:
    return getattr(value, "value", value)


class ProjectRepository(SupabaseRepository):
    """Projects with clients, chats, activity log, documents, tasks and phase data."""

    def __init__(self, store: IRelationalStore) -> None:
        super().__init__(store)
        self.clients = ProjectClientRepository(store)
        self.documents = DocumentRepository(store)
        self.tasks = TaskRepository(store)
        self.chat = ChatRepository(store)
        self.activity_log = ActivityLogRepository(store)
        self.phase_data = PhaseDataRepository(store)
        self.assets = AssetRepository(store)

    async def _assemble(self, row: dict[str, Any]) -> Project:
        project_id = row["id"]
        (
            client_ids,
            internal_chat,
            client_chat,
            activity_log,
            documents,
            tasks,
            phase1,
            phase2,
            phase3,
        ) = await asyncio.gather(
            self.clients.get_project_client_ids(project_id),
            self.chat.get_messages(project_id, ChatChannel.INTERNAL),
            self.chat.get_messages(project_id, ChatChannel.CLIENT),
            self.activity_log.get_activity_log(project_id),
            self.documents.list_project_documents(project_id),
            self.tasks.list_project_tasks(project_id),
            self.phase_data.get_phase1_data(project_id),
            self.phase_data.get_phase2_data(project_id),
            self.phase_data.get_phase3_data(project_id),
        )
        return project_from_rows(
            row,
            client_ids=client_ids,
            internal_chat=internal_chat,
            client_chat=client_chat,
            activity_log=activity_log,
            documents=documents,
            tasks=tasks,
            phase1=phase1,
            phase2=phase2,
            phase3=phase3,
        )

    async def _assemble_all(self, rows: list[dict[str, Any]]) -> list[Project]:
        return list(await asyncio.gather(*(self._assemble(r) for r in rows)))

    async def get_project(self, project_id: str) -> Project | None:
        try:
            row = await self._store.table(TABLE_PROJECTS).select().eq("id", project_id).maybe_single()
            return await self._assemble(row) if row else None
        except REPOSITORY_ERRORS as exc:
            log_repository_error("fetching project", exc)
            return None

    async def list_projects(self) -> list[Project]:
        """All projects, newest first."""
        try:
            rows = await self._store.table(TABLE_PROJECTS).select().order("created_at", ascending=False).execute()
            return await self._assemble_all(rows)
        except REPOSITORY_ERRORS as exc:
            log_repository_error("listing projects", exc)
            return []

    async def list_projects_by_consultant(self, consultant_id: str) -> list[Project]:
        try:
            rows = await (
                self._store.table(TABLE_PROJECTS)
                .select()
                .eq("consultant_id", consultant_id)
                .order("created_at", ascending=False)
                .execute()
            )
            return await self._assemble_all(rows)
        except REPOSITORY_ERRORS as exc:
            log_repository_error("listing consultant projects", exc)
            return []

    async def list_projects_by_client(self, client_id: str) -> list[Project]:
        project_ids = await self.clients.get_project_ids_for_client(client_id)
        if not project_ids:
            return []
        try:
            rows = await (
                self._store.table(TABLE_PROJECTS)
                .select()
                .in_("id", project_ids)
                .order("created_at", ascending=False)
                .execute()
            )
            return await self._assemble_all(rows)
        except REPOSITORY_ERRORS as exc:
            log_repository_error("listing client projects", exc)
            return []

    async def create_project(
        self,
        name: str,
        consultant_id: str,
        *,
        auxiliary_id: str | None = None,
        client_ids: list[str] | None = None,
    ) -> Project | None:
        """Insert a project at phase 1, in progress, and attach its clients."""
        row = {
            "name": name,
            "status": ProjectStatus.IN_PROGRESS.value,
            "current_phase_id": FIRST_PHASE_ID,
            "consultant_id": consultant_id,
            "auxiliary_id": auxiliary_id,
        }
        try:
            created = await self._store.table(TABLE_PROJECTS).insert([row]).single()
        except REPOSITORY_ERRORS as exc:
            log_repository_error("creating project", exc)
            return None
        for client_id in client_ids or []:
            await self.clients.add_client_to_project(created["id"], client_id)
        return await self.get_project(created["id"])

    async def _write_changed_phases(self, project_id: str, phases: list[Phase]) -> None:
        """Upsert phase 1-3 data whose canonical JSON differs from the stored state."""
        current = await self.get_project(project_id)
        for phase in phases:
            if phase.id not in (1, 2, 3) or phase.data is None:
                continue
            stored = current.phase(phase.id) if current else None
            if stored is not None and canonical_json(stored.data) == canonical_json(phase.data):
                continue
            if isinstance(phase.data, Phase1Data):
                await self.phase_data.update_phase1_data(project_id, phase.data)
            elif isinstance(phase.data, Phase2Data):
                await self.phase_data.update_phase2_data(project_id, phase.data)
            elif isinstance(phase.data, Phase3Data):
                previous = stored.data if stored is not None and isinstance(stored.data, Phase3Data) else None
                await self._write_phase3(project_id, phase.data, previous)

    async def _write_phase3(self, project_id: str, data: Phase3Data, previous: Phase3Data | None) -> None:
        await self.phase_data.update_phase3_data(project_id, data)
        before: dict[str, Asset] = {a.id: a for a in previous.assets} if previous else {}
        kept: set[str] = set()
        for asset in data.assets:
            if asset.id and asset.id in before:
                kept.add(asset.id)
                if canonical_json(asset) != canonical_json(before[asset.id]):
                    await self.assets.update_asset(asset.id, asdict(asset))
            else:
                await self.assets.create_asset(project_id, asset)
        for asset_id in before.keys() - kept:
            await self.assets.delete_asset(asset_id)

    async def update_project(self, project_id: str, updates: dict[str, Any]) -> Project | None:
        """Apply whitelisted column updates and changed phase data; return the re-fetched project.

        Keys outside PROJECT_UPDATABLE_COLUMNS and 'phases' are ignored.
        When only phases change, the projects row is not written.
        """
        if updates.get("current_phase_id") is not None:
            try:
                phase_id = int(updates["current_phase_id"])
            except (TypeError, ValueError):
                logger.error(
                    "Error updating project %s: current_phase_id %r is not a number",
                    project_id,
                    updates["current_phase_id"],
                )
                return None
            if not FIRST_PHASE_ID <= phase_id <= PHASE_COUNT:
                logger.error("Error updating project %s: current_phase_id %s out of range", project_id, phase_id)
                return None
            updates = {**updates, "current_phase_id": phase_id}

        phases = updates.get("phases")
        if phases is not None:
            await self._write_changed_phases(project_id, phases)

        values = {k: _column_value(updates[k]) for k in PROJECT_UPDATABLE_COLUMNS if k in updates}
        if not values:
            logger.debug("update_project %s: no project columns to write", project_id)
            return await self.get_project(project_id)

        try:
            rows = await self._store.table(TABLE_PROJECTS).update(values).eq("id", project_id).execute()
        except REPOSITORY_ERRORS as exc:
            log_repository_error("updating project", exc)
            return None
        if not rows:
            logger.error("Error updating project %s: no row returned", project_id)
            return None
        return await self.get_project(project_id)

    async def delete_project(self, project_id: str) -> bool:
        try:
            await self._store.table(TABLE_PROJECTS).delete().eq("id", project_id).execute()
            return True
        except REPOSITORY_ERRORS as exc:
            log_repository_error("deleting project", exc)
            return False

    async def count_projects(self) -> int:
        try:
            return await self._store.table(TABLE_PROJECTS).select("id").count()
        except REPOSITORY_ERRORS as exc:
            log_repository_error("counting projects", exc)
            return 0
