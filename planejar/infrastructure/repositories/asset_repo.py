"""Assets declared in phase 3 (assets, child of phase_3_data)."""

from __future__ import annotations

from typing import Any

from planejar.application.dtos.project import Asset
from planejar.infrastructure.repositories.base import (
    REPOSITORY_ERRORS,
    SupabaseRepository,
    log_repository_error,
)
from planejar.infrastructure.repositories.mappers import asset_from_row, asset_to_row
from planejar.infrastructure.repositories.phase_data_repo import ensure_phase_row
from planejar.infrastructure.supabase.tables import TABLE_ASSETS, TABLE_PHASE_3_DATA

_UPDATABLE_COLUMNS = ("type", "description", "value", "market_value", "status", "document_id")


class AssetRepository(SupabaseRepository):
    async def create_asset(self, project_id: str, asset: Asset) -> Asset | None:
        """Insert asset under the project's phase 3 row (created when missing)."""
        try:
            phase3_id = await ensure_phase_row(self._store, TABLE_PHASE_3_DATA, project_id)
            rows = await self._store.table(TABLE_ASSETS).insert([asset_to_row(phase3_id, asset)]).execute()
            return asset_from_row(rows[0]) if rows else None
        except REPOSITORY_ERRORS as exc:
            log_repository_error("creating asset", exc)
            return None

    async def update_asset(self, asset_id: str, updates: dict[str, Any]) -> Asset | None:
        values = {k: getattr(v, "value", v) for k, v in updates.items() if k in _UPDATABLE_COLUMNS}
        if not values:
            return None
        try:
            rows = await self._store.table(TABLE_ASSETS).update(values).eq("id", asset_id).execute()
            return asset_from_row(rows[0]) if rows else None
        except REPOSITORY_ERRORS as exc:
            log_repository_error("updating asset", exc)
            return None

    async def delete_asset(self, asset_id: str) -> bool:
        try:
            await self._store.table(TABLE_ASSETS).delete().eq("id", asset_id).execute()
            return True
        except REPOSITORY_ERRORS as exc:
            log_repository_error("deleting asset", exc)
            return False

    async def get_assets_by_project(self, project_id: str) -> list[Asset]:
        """Assets of the project's phase 3, newest first."""
        try:
            phase3 = await (
                self._store.table(TABLE_PHASE_3_DATA).select("id").eq("project_id", project_id).maybe_single()
            )
            if phase3 is None:
                return []
            rows = await (
                self._store.table(TABLE_ASSETS)
                .select()
                .eq("phase_3_data_id", phase3["id"])
                .order("created_at", ascending=False)
                .execute()
            )
            return [asset_from_row(r) for r in rows]
        except REPOSITORY_ERRORS as exc:
            log_repository_error("listing assets", exc)
            return []
