"""Thin PostgREST client for the hosted relational store.

Translates a TableQuery into one HTTP call under /rest/v1. All calls use
httpx.AsyncClient so they do not block the event loop. Error bodies
({code, message, details, hint}) become ProviderError; transport
failures become ProviderError with code NETWORK_ERROR.
"""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from planejar.application.interfaces.query import QueryResult, TableQuery
from planejar.infrastructure.supabase.errors import (
    invalid_body_error,
    provider_error_from_response,
    provider_error_from_transport,
)

TokenGetter = Callable[[], Awaitable[str | None]]

_METHODS: dict[str, str] = {
    "select": "GET",
    "insert": "POST",
    "upsert": "POST",
    "update": "PATCH",
    "delete": "DELETE",
}


def _encode_scalar(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _quote_list_item(value: Any) -> str:
    text = _encode_scalar(value)
    if isinstance(value, str):
        escaped = text.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return text


def encode_filters(query: TableQuery) -> list[tuple[str, str]]:
    """Return PostgREST query parameters for the query's filters."""
    params: list[tuple[str, str]] = []
    for f in query.filters:
        if f.op == "in":
            items = ",".join(_quote_list_item(v) for v in f.value)
            params.append((f.column, f"in.({items})"))
        else:
            params.append((f.column, f"{f.op}.{_encode_scalar(f.value)}"))
    return params


def parse_content_range(header: str | None) -> int | None:
    """Total from a Content-Range header such as '0-9/42' or '*/0'."""
    if not header or "/" not in header:
        return None
    total = header.rsplit("/", 1)[1]
    return int(total) if total.isdigit() else None


class SupabaseRESTClient:
    """Relational store over PostgREST; implements IRelationalStore."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        token_getter: TokenGetter | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._base = f"{base_url.rstrip('/')}/rest/v1"
        self._api_key = api_key
        self._token_getter = token_getter
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=timeout)
        self._owns_http = http_client is None

    async def aclose(self) -> None:
        """Close the HTTP client only if we created it (do not close injected client)."""
        if self._owns_http:
            await self._http.aclose()

    def table(self, name: str) -> TableQuery:
        return TableQuery(self, name)

    async def _headers(self) -> dict[str, str]:
        token = await self._token_getter() if self._token_getter is not None else None
        return {
            "apikey": self._api_key,
            "Authorization": f"Bearer {token or self._api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def _build(self, query: TableQuery) -> tuple[str, list[tuple[str, str]], list[str]]:
        params = encode_filters(query)
        prefer: list[str] = []
        if query.action == "select":
            params.insert(0, ("select", query.columns))
            if query.order_by:
                direction = "asc" if query.ascending else "desc"
                params.append(("order", f"{query.order_by}.{direction}"))
            if query.limit_rows is not None:
                params.append(("limit", str(query.limit_rows)))
            if query.count_only:
                prefer.append("count=exact")
            method = "HEAD" if query.count_only else "GET"
        else:
            method = _METHODS[query.action]
            if query.action != "delete":
                prefer.append("return=representation")
            if query.action == "upsert":
                prefer.append("resolution=merge-duplicates")
                if query.on_conflict:
                    params.append(("on_conflict", query.on_conflict))
        return method, params, prefer

    async def run(self, query: TableQuery) -> QueryResult:
        """Execute query; raise ProviderError on failure."""
        method, params, prefer = self._build(query)
        headers = await self._headers()
        if prefer:
            headers["Prefer"] = ",".join(prefer)
        body = None
        if query.payload is not None:
            body = json.dumps(query.payload, default=str).encode()
        try:
            resp = await self._http.request(
                method,
                f"{self._base}/{query.table}",
                params=params,
                headers=headers,
                content=body,
            )
        except httpx.TransportError as exc:
            raise provider_error_from_transport(exc) from exc
        if resp.status_code >= 400:
            raise provider_error_from_response(resp)
        if query.count_only:
            return QueryResult(rows=[], count=parse_content_range(resp.headers.get("content-range")))
        raw = resp.content
        try:
            data = json.loads(raw.decode()) if raw else []
        except ValueError as exc:
            raise invalid_body_error(resp) from exc
        rows = data if isinstance(data, list) else [data]
        return QueryResult(rows=rows)
