"""Object storage client (REST API under /storage/v1)."""

from __future__ import annotations

from urllib.parse import quote

import httpx

from planejar.infrastructure.supabase._rest_client import TokenGetter
from planejar.infrastructure.supabase.errors import (
    invalid_body_error,
    provider_error_from_response,
    provider_error_from_transport,
)


class SupabaseStorageClient:
    """Bucket-scoped blob storage; implements IObjectStorage."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        token_getter: TokenGetter | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._root = base_url.rstrip("/")
        self._base = f"{self._root}/storage/v1"
        self._api_key = api_key
        self._token_getter = token_getter
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=timeout)
        self._owns_http = http_client is None

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def _headers(self) -> dict[str, str]:
        token = await self._token_getter() if self._token_getter is not None else None
        return {"apikey": self._api_key, "Authorization": f"Bearer {token or self._api_key}"}

    async def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            resp = await self._http.request(method, url, **kwargs)
        except httpx.TransportError as exc:
            raise provider_error_from_transport(exc) from exc
        if resp.status_code >= 400:
            raise provider_error_from_response(resp)
        return resp

    async def upload(
        self,
        bucket: str,
        path: str,
        content: bytes,
        content_type: str,
        *,
        upsert: bool = False,
        cache_control: str = "3600",
    ) -> str:
        """Upload content at path; return the stored object key."""
        headers = await self._headers()
        headers.update(
            {
                "Content-Type": content_type,
                "cache-control": f"max-age={cache_control}",
                "x-upsert": "true" if upsert else "false",
            }
        )
        resp = await self._send(
            "POST",
            f"{self._base}/object/{bucket}/{quote(path)}",
            content=content,
            headers=headers,
        )
        try:
            body = resp.json() if resp.content else {}
        except ValueError as exc:
            raise invalid_body_error(resp) from exc
        if not isinstance(body, dict):
            body = {}
        return body.get("Key") or f"{bucket}/{path}"

    async def remove(self, bucket: str, paths: list[str]) -> None:
        headers = await self._headers()
        await self._send(
            "DELETE",
            f"{self._base}/object/{bucket}",
            json={"prefixes": list(paths)},
            headers=headers,
        )

    def get_public_url(self, bucket: str, path: str) -> str:
        return f"{self._base}/object/public/{bucket}/{quote(path)}"
