"""Table query builder shared by every relational store implementation.

Repositories build a TableQuery fluently; the store executor translates
it (PostgREST over HTTP, or an in-memory table in tests). Single-row
helpers are evaluated client-side so every executor behaves the same.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from planejar.domain.exceptions import ProviderError

if TYPE_CHECKING:
    from planejar.application.interfaces.providers import IQueryExecutor

# Provider code used when a single row was requested and 0 or >1 came back.
NO_SINGLE_ROW_CODE = "PGRST116"


@dataclass(frozen=True)
class Filter:
    """Column filter. op is one of: eq, neq, in, is, ilike."""

    column: str
    op: str
    value: Any


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so value matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


@dataclass
class QueryResult:
    rows: list[dict[str, Any]] = field(default_factory=list)
    count: int | None = None


class TableQuery:
    """Fluent query against one table.

    Usage:
        rows = await store.table("users").select().eq("role", "client").order("name").execute()
        row = await store.table("users").select().eq("id", user_id).single()
        await store.table("phase_1_data").upsert([row], on_conflict="project_id").execute()
    """

    def __init__(self, executor: IQueryExecutor, table: str) -> None:
        self._executor = executor
        self.table = table
        self.action = "select"
        self.columns = "*"
        self.filters: list[Filter] = []
        self.order_by: str | None = None
        self.ascending = True
        self.limit_rows: int | None = None
        self.payload: list[dict[str, Any]] | dict[str, Any] | None = None
        self.on_conflict: str | None = None
        self.count_only = False

    # Actions

    def select(self, columns: str = "*", *, count: bool = False) -> TableQuery:
        """Select columns; with count=True only the exact row count is returned."""
        self.action = "select"
        self.columns = columns
        self.count_only = count
        return self

    def insert(self, rows: list[dict[str, Any]]) -> TableQuery:
        self.action = "insert"
        self.payload = rows
        return self

    def upsert(self, rows: list[dict[str, Any]], on_conflict: str | None = None) -> TableQuery:
        """Insert or merge on the conflict target (primary key when None)."""
        self.action = "upsert"
        self.payload = rows
        self.on_conflict = on_conflict
        return self

    def update(self, values: dict[str, Any]) -> TableQuery:
        self.action = "update"
        self.payload = values
        return self

    def delete(self) -> TableQuery:
        self.action = "delete"
        return self

    # Filters and modifiers

    def eq(self, column: str, value: Any) -> TableQuery:
        self.filters.append(Filter(column, "eq", value))
        return self

    def neq(self, column: str, value: Any) -> TableQuery:
        self.filters.append(Filter(column, "neq", value))
        return self

    def in_(self, column: str, values: list[Any]) -> TableQuery:
        self.filters.append(Filter(column, "in", list(values)))
        return self

    def is_(self, column: str, value: None | bool) -> TableQuery:
        self.filters.append(Filter(column, "is", value))
        return self

    def ilike(self, column: str, pattern: str) -> TableQuery:
        """Case-insensitive LIKE; % and _ are wildcards (see escape_like)."""
        self.filters.append(Filter(column, "ilike", pattern))
        return self

    def order(self, column: str, *, ascending: bool = True) -> TableQuery:
        self.order_by = column
        self.ascending = ascending
        return self

    def limit(self, n: int) -> TableQuery:
        self.limit_rows = n
        return self

    # Execution

    async def execute(self) -> list[dict[str, Any]]:
        """Run the query and return the affected or selected rows."""
        result = await self._executor.run(self)
        return result.rows

    async def count(self) -> int:
        """Run as an exact count query."""
        self.select(self.columns, count=True)
        result = await self._executor.run(self)
        return result.count or 0

    async def maybe_single(self) -> dict[str, Any] | None:
        """Return the only row, None when there is none; error when several."""
        rows = await self.execute()
        if len(rows) > 1:
            raise ProviderError(
                "JSON object requested, multiple rows returned",
                code=NO_SINGLE_ROW_CODE,
                details=f"Results contain {len(rows)} rows",
            )
        return rows[0] if rows else None

    async def single(self) -> dict[str, Any]:
        """Return exactly one row; error when there are zero or several."""
        row = await self.maybe_single()
        if row is None:
            raise ProviderError(
                "JSON object requested, no rows returned",
                code=NO_SINGLE_ROW_CODE,
                details="Results contain 0 rows",
            )
        return row
