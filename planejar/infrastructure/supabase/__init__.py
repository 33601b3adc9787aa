"""Hosted backend adapters (identity, PostgREST store, object storage) over httpx."""

from planejar.infrastructure.supabase._rest_client import SupabaseRESTClient
from planejar.infrastructure.supabase.auth_client import SupabaseAuthClient
from planejar.infrastructure.supabase.client import SupabaseBackend
from planejar.infrastructure.supabase.storage_client import SupabaseStorageClient

__all__ = [
    "SupabaseAuthClient",
    "SupabaseBackend",
    "SupabaseRESTClient",
    "SupabaseStorageClient",
]
