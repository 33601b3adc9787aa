"""Backend composition: identity, relational store and object storage.

Built explicitly from settings and passed to repositories and services;
there is no module-level client.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from planejar.core.config import Settings
from planejar.infrastructure.supabase._rest_client import SupabaseRESTClient
from planejar.infrastructure.supabase.auth_client import SupabaseAuthClient
from planejar.infrastructure.supabase.storage_client import SupabaseStorageClient

logger = logging.getLogger(__name__)


@dataclass
class SupabaseBackend:
    """The three adapters sharing one HTTP client."""

    auth: SupabaseAuthClient
    db: SupabaseRESTClient
    storage: SupabaseStorageClient
    http: httpx.AsyncClient
    owns_http: bool = True

    @classmethod
    def from_settings(
        cls, settings: Settings, http_client: httpx.AsyncClient | None = None
    ) -> SupabaseBackend:
        """Build all adapters from settings. The store and storage use the signed-in user's token."""
        url = settings.supabase_url
        key = settings.supabase_anon_key.get_secret_value()
        http = http_client if http_client is not None else httpx.AsyncClient(
            timeout=settings.http_timeout_seconds
        )
        auth = SupabaseAuthClient(url, key, http_client=http)
        db = SupabaseRESTClient(url, key, token_getter=auth.access_token, http_client=http)
        storage = SupabaseStorageClient(url, key, token_getter=auth.access_token, http_client=http)
        logger.info("Backend clients configured for %s", url)
        return cls(auth=auth, db=db, storage=storage, http=http, owns_http=http_client is None)

    async def aclose(self) -> None:
        """Close the shared HTTP client only if we created it."""
        if self.owns_http:
            await self.http.aclose()
