"""Composition root wired against a mocked HTTP backend."""

import httpx
import pytest

from planejar.core.config import Settings
from planejar.domain.enums import AuthErrorKind, SessionState, UserRole
from planejar.infrastructure.composition import build_services

USER_ROW = {
    "id": "k1",
    "name": "Diego Garcia",
    "email": "diego.garcia@grupociatos.com.br",
    "role": "consultant",
    "client_type": None,
    "avatar_url": None,
    "created_at": "2026-01-01T00:00:00+00:00",
}

TOKEN_RESPONSE = {
    "access_token": "user-jwt",
    "refresh_token": "refresh-1",
    "user": {"id": "k1", "email": "diego.garcia@grupociatos.com.br", "user_metadata": {}},
}


@pytest.mark.asyncio
async def test_build_services_login_uses_user_token(settings: Settings) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        path = request.url.path
        if path == "/auth/v1/token":
            return httpx.Response(200, json=TOKEN_RESPONSE)
        if path == "/rest/v1/users":
            return httpx.Response(200, json=[USER_ROW])
        return httpx.Response(200, json=[])

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    services = build_services(settings, http_client=http)
    try:
        user = await services.controller.login("diego.garcia@grupociatos.com.br", "250500")

        assert user is not None
        assert user.role is UserRole.CONSULTANT
        assert services.controller.state is SessionState.AUTHENTICATED
        rest_calls = [r for r in seen if r.url.path.startswith("/rest/v1/")]
        assert rest_calls
        assert all(r.headers["authorization"] == "Bearer user-jwt" for r in rest_calls)
    finally:
        await services.aclose()
        await http.aclose()


@pytest.mark.asyncio
async def test_non_json_identity_response_degrades_to_failed_login(settings: Settings) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>proxy</html>", headers={"content-type": "text/html"})

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    services = build_services(settings, http_client=http)
    try:
        assert await services.auth.sign_in("diego.garcia@grupociatos.com.br", "250500") is None
        assert services.auth.last_error_kind is AuthErrorKind.UNKNOWN
        assert await services.controller.login("diego.garcia@grupociatos.com.br", "250500") is None
        assert services.controller.state is SessionState.ANONYMOUS
    finally:
        await services.aclose()
        await http.aclose()
