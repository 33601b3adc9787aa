"""Composition root: builds adapters, repositories and services from settings.

Nothing is created at import time; callers build an AppServices and close
it when done.

Usage:
    services = build_services(get_settings())
    try:
        await services.controller.initialize()
    finally:
        await services.aclose()
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from planejar.application.services.auth_service import AuthService
from planejar.application.services.session_controller import SessionController
from planejar.core.config import Settings
from planejar.infrastructure.repositories import (
    FileRepository,
    NotificationRepository,
    ProjectRepository,
    UserDocumentRepository,
    UserRepository,
)
from planejar.infrastructure.services.data_migration_service import DataMigrationService
from planejar.infrastructure.session.session_cache import FileSessionCache
from planejar.infrastructure.supabase.client import SupabaseBackend


@dataclass
class AppServices:
    backend: SupabaseBackend
    auth: AuthService
    users: UserRepository
    user_documents: UserDocumentRepository
    projects: ProjectRepository
    notifications: NotificationRepository
    files: FileRepository
    controller: SessionController
    migration: DataMigrationService

    async def aclose(self) -> None:
        await self.controller.shutdown()
        await self.backend.aclose()


def build_services(settings: Settings, http_client: httpx.AsyncClient | None = None) -> AppServices:
    backend = SupabaseBackend.from_settings(settings, http_client=http_client)
    users = UserRepository(backend.db)
    projects = ProjectRepository(backend.db)
    files = FileRepository(backend.storage, settings.storage_bucket, settings.storage_cache_control)
    auth = AuthService(backend.auth, users, FileSessionCache(settings.session_cache_path), settings)
    return AppServices(
        backend=backend,
        auth=auth,
        users=users,
        user_documents=UserDocumentRepository(backend.db),
        projects=projects,
        notifications=NotificationRepository(backend.db),
        files=files,
        controller=SessionController(auth, users, projects, files),
        migration=DataMigrationService(auth, users, projects, backend.db),
    )
