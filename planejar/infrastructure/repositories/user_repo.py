"""User repository over the relational store (users + partner_qualification_data)."""

from __future__ import annotations

from typing import Any

from planejar.application.dtos.user import QualificationData, User
from planejar.application.interfaces.query import escape_like
from planejar.domain.enums import UserRole
from planejar.infrastructure.repositories.base import (
    REPOSITORY_ERRORS,
    SupabaseRepository,
    log_repository_error,
)
from planejar.infrastructure.repositories.mappers import (
    qualification_from_row,
    qualification_to_row,
    user_from_row,
    user_to_row,
)
from planejar.infrastructure.supabase.tables import TABLE_QUALIFICATION_DATA, TABLE_USERS

# Columns update_user forwards; id, e-mail and role are fixed after sign-up.
_UPDATABLE_COLUMNS = ("name", "avatar_url", "client_type", "requires_password_change")


class UserRepository(SupabaseRepository):
    """Mirrored application users keyed by the identity subject id."""

    async def _with_qualification(self, rows: list[dict[str, Any]]) -> list[User]:
        """Map user rows, attaching qualification data in one extra query."""
        if not rows:
            return []
        qualification_rows = await (
            self._store.table(TABLE_QUALIFICATION_DATA)
            .select()
            .in_("user_id", [r["id"] for r in rows])
            .execute()
        )
        by_user = {q["user_id"]: qualification_from_row(q) for q in qualification_rows}
        return [user_from_row(r, by_user.get(r["id"])) for r in rows]

    async def get_user(self, user_id: str) -> User | None:
        try:
            row = await self._store.table(TABLE_USERS).select().eq("id", user_id).maybe_single()
            if row is None:
                return None
            users = await self._with_qualification([row])
            return users[0]
        except REPOSITORY_ERRORS as exc:
            log_repository_error("fetching user", exc)
            return None

    async def get_user_by_email(self, email: str) -> User | None:
        """Case-insensitive lookup among mirrored users."""
        target = email.strip().lower()
        try:
            rows = await (
                self._store.table(TABLE_USERS).select().ilike("email", escape_like(target)).execute()
            )
            # PostgREST also treats * as a wildcard
            rows = [r for r in rows if (r.get("email") or "").lower() == target][:1]
            if not rows:
                return None
            users = await self._with_qualification(rows)
            return users[0]
        except REPOSITORY_ERRORS as exc:
            log_repository_error("fetching user by e-mail", exc)
            return None

    async def list_users(self) -> list[User]:
        """All users ordered by name."""
        try:
            rows = await self._store.table(TABLE_USERS).select().order("name").execute()
            return await self._with_qualification(rows)
        except REPOSITORY_ERRORS as exc:
            log_repository_error("listing users", exc)
            return []

    async def list_users_by_role(self, role: UserRole) -> list[User]:
        try:
            rows = await (
                self._store.table(TABLE_USERS).select().eq("role", role.value).order("name").execute()
            )
            return await self._with_qualification(rows)
        except REPOSITORY_ERRORS as exc:
            log_repository_error("listing users by role", exc)
            return []

    async def create_user(self, user: User) -> User | None:
        """Upsert the mirrored row (id = identity subject id)."""
        try:
            rows = await self._store.table(TABLE_USERS).upsert([user_to_row(user)], on_conflict="id").execute()
            if not rows:
                return None
            return user_from_row(rows[0], user.qualification_data)
        except REPOSITORY_ERRORS as exc:
            log_repository_error("creating user", exc)
            return None

    async def update_user(self, user_id: str, updates: dict[str, Any]) -> User | None:
        values = {k: v for k, v in updates.items() if k in _UPDATABLE_COLUMNS}
        if "client_type" in values and values["client_type"] is not None:
            values["client_type"] = getattr(values["client_type"], "value", values["client_type"])
        if not values:
            return await self.get_user(user_id)
        try:
            rows = await self._store.table(TABLE_USERS).update(values).eq("id", user_id).execute()
            if not rows:
                return None
            return user_from_row(rows[0])
        except REPOSITORY_ERRORS as exc:
            log_repository_error("updating user", exc)
            return None

    async def delete_user(self, user_id: str) -> bool:
        try:
            await self._store.table(TABLE_USERS).delete().eq("id", user_id).execute()
            return True
        except REPOSITORY_ERRORS as exc:
            log_repository_error("deleting user", exc)
            return False

    async def update_qualification_data(self, user_id: str, data: QualificationData) -> bool:
        """Upsert the partner's civil-status data (one row per user)."""
        try:
            await (
                self._store.table(TABLE_QUALIFICATION_DATA)
                .upsert([qualification_to_row(user_id, data)], on_conflict="user_id")
                .execute()
            )
            return True
        except REPOSITORY_ERRORS as exc:
            log_repository_error("updating qualification data", exc)
            return False

    async def get_qualification_data(self, user_id: str) -> QualificationData | None:
        try:
            row = await (
                self._store.table(TABLE_QUALIFICATION_DATA).select().eq("user_id", user_id).maybe_single()
            )
            return qualification_from_row(row) if row else None
        except REPOSITORY_ERRORS as exc:
            log_repository_error("fetching qualification data", exc)
            return None

    async def count_users(self) -> int:
        try:
            return await self._store.table(TABLE_USERS).select("id").count()
        except REPOSITORY_ERRORS as exc:
            log_repository_error("counting users", exc)
            return 0
