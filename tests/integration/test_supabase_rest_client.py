"""Integration tests for SupabaseRESTClient over httpx.MockTransport (PostgREST wire format)."""

import json

import httpx
import pytest

from planejar.application.interfaces.query import escape_like
from planejar.domain.exceptions import ProviderError
from planejar.infrastructure.supabase import SupabaseRESTClient
from planejar.infrastructure.supabase._rest_client import parse_content_range

BASE_URL = "https://test-project.supabase.co"


def _client(handler, token: str | None = None) -> SupabaseRESTClient:
    async def token_getter() -> str | None:
        return token

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return SupabaseRESTClient(BASE_URL, "anon-key", token_getter=token_getter, http_client=http)


@pytest.mark.asyncio
async def test_select_builds_query_parameters() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[{"id": "u1", "name": "Ana"}])

    client = _client(handler)
    rows = await (
        client.table("users")
        .select("id,name")
        .eq("role", "client")
        .in_("id", ["u1", "u2"])
        .is_("avatar_url", None)
        .order("name", ascending=False)
        .limit(10)
        .execute()
    )

    assert rows == [{"id": "u1", "name": "Ana"}]
    request = seen[0]
    assert request.method == "GET"
    assert request.url.path == "/rest/v1/users"
    params = request.url.params
    assert params["select"] == "id,name"
    assert params["role"] == "eq.client"
    assert params["id"] == 'in.("u1","u2")'
    assert params["avatar_url"] == "is.null"
    assert params["order"] == "name.desc"
    assert params["limit"] == "10"
    assert request.headers["apikey"] == "anon-key"
    assert request.headers["authorization"] == "Bearer anon-key"


@pytest.mark.asyncio
async def test_signed_in_token_is_used_as_bearer() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[])

    await _client(handler, token="user-jwt").table("projects").select().execute()

    assert seen[0].headers["authorization"] == "Bearer user-jwt"


@pytest.mark.asyncio
async def test_upsert_sends_prefer_and_on_conflict() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, json=json.loads(request.content))

    rows = await (
        _client(handler)
        .table("phase_1_data")
        .upsert([{"project_id": "p1", "objectives": "x"}], on_conflict="project_id")
        .execute()
    )

    request = seen[0]
    assert request.method == "POST"
    assert request.url.params["on_conflict"] == "project_id"
    assert request.headers["prefer"] == "return=representation,resolution=merge-duplicates"
    assert json.loads(request.content) == [{"project_id": "p1", "objectives": "x"}]
    assert rows == [{"project_id": "p1", "objectives": "x"}]


@pytest.mark.asyncio
async def test_update_and_delete_methods() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.method == "DELETE":
            return httpx.Response(204)
        return httpx.Response(200, json=[{"id": "t1", "status": "completed"}])

    client = _client(handler)
    updated = await client.table("tasks").update({"status": "completed"}).eq("id", "t1").execute()
    deleted = await client.table("tasks").delete().neq("id", "00000000-0000-0000-0000-000000000000").execute()

    assert updated == [{"id": "t1", "status": "completed"}]
    assert deleted == []
    assert seen[0].method == "PATCH"
    assert seen[0].url.params["id"] == "eq.t1"
    assert seen[1].method == "DELETE"
    assert seen[1].url.params["id"] == "neq.00000000-0000-0000-0000-000000000000"
    assert "prefer" not in seen[1].headers


@pytest.mark.asyncio
async def test_count_reads_content_range() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, headers={"Content-Range": "*/42"})

    count = await _client(handler).table("users").select("id").count()

    assert count == 42
    assert seen[0].method == "HEAD"
    assert seen[0].headers["prefer"] == "count=exact"


@pytest.mark.asyncio
async def test_single_with_no_rows_raises_provider_error() -> None:
    client = _client(lambda request: httpx.Response(200, json=[]))

    with pytest.raises(ProviderError) as exc_info:
        await client.table("users").select().eq("id", "missing").single()

    assert exc_info.value.code == "PGRST116"
    assert await client.table("users").select().eq("id", "missing").maybe_single() is None


@pytest.mark.asyncio
async def test_error_body_becomes_provider_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            409,
            json={
                "code": "23505",
                "message": "duplicate key value violates unique constraint",
                "details": "Key (id)=(u1) already exists.",
                "hint": None,
            },
        )

    with pytest.raises(ProviderError) as exc_info:
        await _client(handler).table("users").insert([{"id": "u1"}]).execute()

    exc = exc_info.value
    assert exc.code == "23505"
    assert exc.status == 409
    assert exc.diagnostics()["details"] == "Key (id)=(u1) already exists."


@pytest.mark.asyncio
async def test_transport_failure_becomes_network_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ProviderError) as exc_info:
        await _client(handler).table("users").select().execute()

    assert exc_info.value.code == "NETWORK_ERROR"


@pytest.mark.parametrize(
    ("header", "expected"),
    [("0-9/42", 42), ("*/0", 0), ("0-9/*", None), (None, None), ("garbage", None)],
)
def test_parse_content_range(header: str | None, expected: int | None) -> None:
    assert parse_content_range(header) == expected


@pytest.mark.asyncio
async def test_non_json_success_body_becomes_provider_error() -> None:
    client = _client(
        lambda request: httpx.Response(200, text="<html>login</html>", headers={"content-type": "text/html"})
    )

    with pytest.raises(ProviderError) as exc_info:
        await client.table("users").select().execute()

    assert exc_info.value.code == "INVALID_RESPONSE"
    assert exc_info.value.details == "text/html"


@pytest.mark.asyncio
async def test_ilike_filter_encoding() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[])

    await _client(handler).table("users").select().ilike("email", escape_like("ana_b@example.com")).execute()

    assert seen[0].url.params["email"] == "ilike.ana\\_b@example.com"
