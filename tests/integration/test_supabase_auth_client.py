"""Integration tests for SupabaseAuthClient and SupabaseStorageClient over httpx.MockTransport."""

import json

import httpx
import pytest

from planejar.domain.enums import AuthErrorKind, AuthEvent, OtpType
from planejar.domain.exceptions import AuthProviderError, ProviderError
from planejar.infrastructure.supabase import SupabaseAuthClient, SupabaseStorageClient
from planejar.infrastructure.supabase.errors import classify_auth_error

BASE_URL = "https://test-project.supabase.co"

TOKEN_RESPONSE = {
    "access_token": "jwt-1",
    "refresh_token": "refresh-1",
    "token_type": "bearer",
    "user": {"id": "u1", "email": "ana@example.com", "user_metadata": {"name": "Ana"}},
}


def _auth_client(handler) -> SupabaseAuthClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return SupabaseAuthClient(BASE_URL, "anon-key", http_client=http)


@pytest.mark.asyncio
async def test_sign_in_stores_session_and_publishes_event() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=TOKEN_RESPONSE)

    client = _auth_client(handler)
    events: list[AuthEvent] = []
    client.on_auth_state_change(lambda event, session: events.append(event))

    response = await client.sign_in_with_password("ana@example.com", "segredo1")

    assert response.session.access_token == "jwt-1"
    assert response.user.user_metadata == {"name": "Ana"}
    assert await client.access_token() == "jwt-1"
    assert events == [AuthEvent.SIGNED_IN]
    request = seen[0]
    assert request.url.path == "/auth/v1/token"
    assert request.url.params["grant_type"] == "password"
    assert json.loads(request.content) == {"email": "ana@example.com", "password": "segredo1"}


@pytest.mark.asyncio
async def test_invalid_credentials_are_classified() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            400,
            json={"code": 400, "error_code": "invalid_credentials", "msg": "Invalid login credentials"},
        )

    with pytest.raises(AuthProviderError) as exc_info:
        await _auth_client(handler).sign_in_with_password("ana@example.com", "errada")

    assert exc_info.value.kind is AuthErrorKind.INVALID_CREDENTIALS
    assert exc_info.value.status == 400


@pytest.mark.asyncio
async def test_server_error_is_network_kind() -> None:
    client = _auth_client(lambda request: httpx.Response(503, text="upstream unavailable"))

    with pytest.raises(AuthProviderError) as exc_info:
        await client.sign_in_with_password("ana@example.com", "segredo1")

    assert exc_info.value.kind is AuthErrorKind.NETWORK


@pytest.mark.asyncio
async def test_transport_failure_is_network_kind() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(AuthProviderError) as exc_info:
        await _auth_client(handler).sign_up("ana@example.com", "segredo1")

    assert exc_info.value.kind is AuthErrorKind.NETWORK


@pytest.mark.asyncio
async def test_sign_up_pending_confirmation_returns_user_without_session() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        assert body["data"] == {"name": "Ana", "role": "client"}
        return httpx.Response(200, json={"id": "u1", "email": "ana@example.com", "user_metadata": body["data"]})

    client = _auth_client(handler)
    response = await client.sign_up("ana@example.com", "segredo1", {"name": "Ana", "role": "client"})

    assert response.session is None
    assert response.user.id == "u1"
    assert await client.get_session() is None


@pytest.mark.asyncio
async def test_get_user_without_session_is_session_missing() -> None:
    client = _auth_client(lambda request: httpx.Response(500))

    with pytest.raises(AuthProviderError) as exc_info:
        await client.get_user()

    assert exc_info.value.kind is AuthErrorKind.SESSION_MISSING
    assert exc_info.value.message == "Auth session missing!"


@pytest.mark.asyncio
async def test_sign_out_clears_session_even_when_revoke_fails() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/logout"):
            return httpx.Response(500, json={"msg": "boom"})
        return httpx.Response(200, json=TOKEN_RESPONSE)

    client = _auth_client(handler)
    events: list[AuthEvent] = []
    await client.sign_in_with_password("ana@example.com", "segredo1")
    client.on_auth_state_change(lambda event, session: events.append(event))

    with pytest.raises(AuthProviderError):
        await client.sign_out()

    assert await client.get_session() is None
    assert events == [AuthEvent.SIGNED_OUT]


@pytest.mark.asyncio
async def test_recovery_otp_publishes_password_recovery() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=TOKEN_RESPONSE)

    client = _auth_client(handler)
    events: list[AuthEvent] = []
    client.on_auth_state_change(lambda event, session: events.append(event))

    await client.verify_otp("ana@example.com", "123456", OtpType.RECOVERY)

    assert events == [AuthEvent.PASSWORD_RECOVERY]
    assert json.loads(seen[0].content) == {"type": "recovery", "email": "ana@example.com", "token": "123456"}


@pytest.mark.asyncio
async def test_refresh_session_uses_refresh_grant() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={**TOKEN_RESPONSE, "access_token": "jwt-2"})

    client = _auth_client(handler)
    session = await client.refresh_session("refresh-0")

    assert session.access_token == "jwt-2"
    assert seen[0].url.params["grant_type"] == "refresh_token"
    assert json.loads(seen[0].content) == {"refresh_token": "refresh-0"}


@pytest.mark.asyncio
async def test_reset_password_sends_redirect() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={})

    await _auth_client(handler).reset_password_for_email("ana@example.com", "https://app/reset-password")

    assert seen[0].url.path == "/auth/v1/recover"
    assert seen[0].url.params["redirect_to"] == "https://app/reset-password"


@pytest.mark.asyncio
async def test_non_json_success_body_is_unknown_provider_error() -> None:
    client = _auth_client(
        lambda request: httpx.Response(200, text="<html>proxy</html>", headers={"content-type": "text/html"})
    )

    with pytest.raises(AuthProviderError) as exc_info:
        await client.sign_in_with_password("ana@example.com", "segredo1")

    assert exc_info.value.kind is AuthErrorKind.UNKNOWN
    assert exc_info.value.status == 200
    assert await client.get_session() is None


@pytest.mark.parametrize(
    ("message", "status", "code", "expected"),
    [
        ("Invalid login credentials", 400, None, AuthErrorKind.INVALID_CREDENTIALS),
        ("Email not confirmed", 400, None, AuthErrorKind.EMAIL_NOT_CONFIRMED),
        ("User already registered", 422, None, AuthErrorKind.USER_ALREADY_REGISTERED),
        ("anything", 422, "weak_password", AuthErrorKind.WEAK_PASSWORD),
        ("TypeError: Failed to fetch", None, None, AuthErrorKind.NETWORK),
        ("Body stream already read", None, None, AuthErrorKind.NETWORK),
        ("Too many requests", 429, None, AuthErrorKind.NETWORK),
        ("Signups not allowed", 422, None, AuthErrorKind.UNKNOWN),
    ],
)
def test_classify_auth_error(message: str, status: int | None, code: str | None, expected: AuthErrorKind) -> None:
    assert classify_auth_error(message, status, code) is expected


def _storage_client(handler) -> SupabaseStorageClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return SupabaseStorageClient(BASE_URL, "anon-key", http_client=http)


@pytest.mark.asyncio
async def test_storage_upload_headers_and_key() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"Key": "project-files/projects/p1/phase1/1-a.pdf"})

    key = await _storage_client(handler).upload(
        "project-files", "projects/p1/phase1/1-a.pdf", b"%PDF", "application/pdf"
    )

    assert key == "project-files/projects/p1/phase1/1-a.pdf"
    request = seen[0]
    assert request.method == "POST"
    assert request.url.path == "/storage/v1/object/project-files/projects/p1/phase1/1-a.pdf"
    assert request.headers["x-upsert"] == "false"
    assert request.headers["cache-control"] == "max-age=3600"
    assert request.headers["content-type"] == "application/pdf"
    assert request.content == b"%PDF"


@pytest.mark.asyncio
async def test_storage_upload_conflict_raises_provider_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"statusCode": "409", "error": "Duplicate", "message": "The resource already exists"})

    with pytest.raises(ProviderError) as exc_info:
        await _storage_client(handler).upload("b", "p.pdf", b"x", "application/pdf")

    assert exc_info.value.message == "The resource already exists"
    assert exc_info.value.status == 400


@pytest.mark.asyncio
async def test_storage_remove_and_public_url() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[])

    client = _storage_client(handler)
    await client.remove("project-files", ["contracts/p1/1-c.pdf"])

    assert seen[0].method == "DELETE"
    assert json.loads(seen[0].content) == {"prefixes": ["contracts/p1/1-c.pdf"]}
    assert client.get_public_url("project-files", "contracts/p1/1 c.pdf") == (
        f"{BASE_URL}/storage/v1/object/public/project-files/contracts/p1/1%20c.pdf"
    )
