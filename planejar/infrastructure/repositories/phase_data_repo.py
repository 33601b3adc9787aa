"""Typed data of phases 1-3 (phase_1_data, phase_2_data + partners, phase_3_data + assets).

Each phase table holds at most one row per project (unique project_id),
so writes are upserts on project_id.
"""

from __future__ import annotations

from planejar.application.dtos.project import Phase1Data, Phase2Data, Phase3Data
from planejar.application.interfaces.providers import IRelationalStore
from planejar.domain.enums import ReviewStatus
from planejar.infrastructure.repositories.base import (
    REPOSITORY_ERRORS,
    SupabaseRepository,
    log_repository_error,
)
from planejar.infrastructure.repositories.mappers import (
    phase1_from_row,
    phase1_to_row,
    phase2_from_rows,
    phase2_partner_to_row,
    phase2_to_row,
    phase3_from_rows,
)
from planejar.infrastructure.supabase.tables import (
    TABLE_ASSETS,
    TABLE_PHASE_1_DATA,
    TABLE_PHASE_2_DATA,
    TABLE_PHASE_2_PARTNERS,
    TABLE_PHASE_3_DATA,
)


async def ensure_phase_row(store: IRelationalStore, table: str, project_id: str) -> str:
    """Return the id of the project's row in a phase table, creating it when missing."""
    row = await store.table(table).select("id").eq("project_id", project_id).maybe_single()
    if row is not None:
        return row["id"]
    created = await (
        store.table(table)
        .insert([{"project_id": project_id, "status": ReviewStatus.PENDING_CLIENT.value}])
        .single()
    )
    return created["id"]


class PhaseDataRepository(SupabaseRepository):
    async def get_phase1_data(self, project_id: str) -> Phase1Data | None:
        try:
            row = await self._store.table(TABLE_PHASE_1_DATA).select().eq("project_id", project_id).maybe_single()
            return phase1_from_row(row) if row else None
        except REPOSITORY_ERRORS as exc:
            log_repository_error("fetching phase 1 data", exc)
            return None

    async def update_phase1_data(self, project_id: str, data: Phase1Data) -> bool:
        try:
            await (
                self._store.table(TABLE_PHASE_1_DATA)
                .upsert([phase1_to_row(project_id, data)], on_conflict="project_id")
                .execute()
            )
            return True
        except REPOSITORY_ERRORS as exc:
            log_repository_error("updating phase 1 data", exc)
            return False

    async def get_phase2_data(self, project_id: str) -> Phase2Data | None:
        try:
            row = await self._store.table(TABLE_PHASE_2_DATA).select().eq("project_id", project_id).maybe_single()
            if row is None:
                return None
            partners = await (
                self._store.table(TABLE_PHASE_2_PARTNERS).select().eq("phase_2_data_id", row["id"]).execute()
            )
            return phase2_from_rows(row, partners)
        except REPOSITORY_ERRORS as exc:
            log_repository_error("fetching phase 2 data", exc)
            return None

    async def update_phase2_data(self, project_id: str, data: Phase2Data) -> bool:
        """Upsert company data and statuses, then replace the partner list."""
        try:
            phase2 = await (
                self._store.table(TABLE_PHASE_2_DATA)
                .upsert([phase2_to_row(project_id, data)], on_conflict="project_id")
                .single()
            )
            await self._store.table(TABLE_PHASE_2_PARTNERS).delete().eq("phase_2_data_id", phase2["id"]).execute()
            if data.partners:
                await (
                    self._store.table(TABLE_PHASE_2_PARTNERS)
                    .insert([phase2_partner_to_row(phase2["id"], p) for p in data.partners])
                    .execute()
                )
            return True
        except REPOSITORY_ERRORS as exc:
            log_repository_error("updating phase 2 data", exc)
            return False

    async def get_phase3_data(self, project_id: str) -> Phase3Data | None:
        try:
            row = await self._store.table(TABLE_PHASE_3_DATA).select().eq("project_id", project_id).maybe_single()
            if row is None:
                return None
            assets = await (
                self._store.table(TABLE_ASSETS)
                .select()
                .eq("phase_3_data_id", row["id"])
                .order("created_at", ascending=False)
                .execute()
            )
            return phase3_from_rows(row, assets)
        except REPOSITORY_ERRORS as exc:
            log_repository_error("fetching phase 3 data", exc)
            return None

    async def update_phase3_data(self, project_id: str, data: Phase3Data) -> bool:
        """Upsert the review status; assets are written through AssetRepository."""
        try:
            await (
                self._store.table(TABLE_PHASE_3_DATA)
                .upsert([{"project_id": project_id, "status": data.status.value}], on_conflict="project_id")
                .execute()
            )
            return True
        except REPOSITORY_ERRORS as exc:
            log_repository_error("updating phase 3 data", exc)
            return False
