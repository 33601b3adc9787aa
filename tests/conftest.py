"""Pytest configuration and fixtures for planejar.

Unit tests run against the in-memory fakes in tests/fakes.py (no network).
Integration tests drive the HTTP adapters through httpx.MockTransport.
"""

import pytest
from fakes import (
    FakeIdentity,
    FakeObjectStorage,
    InMemoryStore,
    MemorySessionCache,
    SleepRecorder,
)

from planejar.application.services.auth_service import AuthService
from planejar.application.services.session_controller import SessionController
from planejar.core.config import Settings, get_settings
from planejar.infrastructure.repositories import (
    FileRepository,
    ProjectRepository,
    UserRepository,
)
from planejar.infrastructure.services import DataMigrationService

TEST_SUPABASE_URL = "https://test-project.supabase.co"
TEST_ANON_KEY = "test-anon-key"


@pytest.fixture(autouse=True)
def backend_env(monkeypatch: pytest.MonkeyPatch):
    """Point get_settings() at a fake backend; clear the cache around each test."""
    monkeypatch.setenv("SUPABASE_URL", TEST_SUPABASE_URL)
    monkeypatch.setenv("SUPABASE_ANON_KEY", TEST_ANON_KEY)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings with a throwaway session cache path and no .env lookup."""
    return Settings(
        _env_file=None,
        supabase_url=TEST_SUPABASE_URL,
        supabase_anon_key=TEST_ANON_KEY,
        session_cache_path=str(tmp_path / "session.json"),
    )


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def identity() -> FakeIdentity:
    return FakeIdentity()


@pytest.fixture
def storage() -> FakeObjectStorage:
    return FakeObjectStorage()


@pytest.fixture
def session_cache() -> MemorySessionCache:
    return MemorySessionCache()


@pytest.fixture
def sleep() -> SleepRecorder:
    """Records retry waits instead of sleeping."""
    return SleepRecorder()


@pytest.fixture
def users(store: InMemoryStore) -> UserRepository:
    return UserRepository(store)


@pytest.fixture
def projects(store: InMemoryStore) -> ProjectRepository:
    return ProjectRepository(store)


@pytest.fixture
def files(storage: FakeObjectStorage) -> FileRepository:
    return FileRepository(storage, "project-files")


@pytest.fixture
def auth(
    identity: FakeIdentity,
    users: UserRepository,
    session_cache: MemorySessionCache,
    settings: Settings,
    sleep: SleepRecorder,
) -> AuthService:
    return AuthService(identity, users, session_cache, settings, sleep=sleep)


@pytest.fixture
def controller(
    auth: AuthService,
    users: UserRepository,
    projects: ProjectRepository,
    files: FileRepository,
) -> SessionController:
    return SessionController(auth, users, projects, files)


@pytest.fixture
def migration(
    auth: AuthService,
    users: UserRepository,
    projects: ProjectRepository,
    store: InMemoryStore,
) -> DataMigrationService:
    return DataMigrationService(auth, users, projects, store)


@pytest.fixture
async def seeded(migration: DataMigrationService, identity: FakeIdentity) -> DataMigrationService:
    """Demo users and project in the in-memory backend, nobody signed in."""
    report = await migration.initialize_database()
    assert report.success, report.details
    await identity.sign_out()
    identity.calls.clear()
    return migration
