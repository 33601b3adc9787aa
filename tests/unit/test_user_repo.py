"""Unit tests for UserRepository, UserDocumentRepository and NotificationRepository."""

import pytest
from fakes import InMemoryStore

from planejar.application.dtos.user import QualificationData, User
from planejar.domain.enums import ClientType, NotificationType, UserRole
from planejar.infrastructure.repositories import (
    NotificationRepository,
    UserDocumentRepository,
    UserRepository,
)


def _user(user_id: str, name: str, role: UserRole = UserRole.CLIENT) -> User:
    return User(id=user_id, name=name, email=f"{user_id}@example.com", role=role)


@pytest.mark.asyncio
async def test_create_user_is_idempotent_on_id(users: UserRepository, store: InMemoryStore) -> None:
    assert await users.create_user(_user("u1", "Ana")) is not None
    assert await users.create_user(_user("u1", "Ana Maria")) is not None

    assert len(store.tables["users"]) == 1
    assert store.tables["users"][0]["name"] == "Ana Maria"


@pytest.mark.asyncio
async def test_create_user_failure_returns_none(users: UserRepository, store: InMemoryStore) -> None:
    store.fail_next("users", "upsert")
    assert await users.create_user(_user("u1", "Ana")) is None


@pytest.mark.asyncio
async def test_list_users_ordered_by_name_with_qualification(users: UserRepository) -> None:
    await users.create_user(_user("u2", "Bruno"))
    await users.create_user(_user("u1", "Ana"))
    await users.update_qualification_data("u1", QualificationData(cpf="111.222.333-44"))

    listed = await users.list_users()

    assert [u.name for u in listed] == ["Ana", "Bruno"]
    assert listed[0].qualification_data.cpf == "111.222.333-44"
    assert listed[1].qualification_data is None


@pytest.mark.asyncio
async def test_qualification_upsert_keeps_one_row_per_user(
    users: UserRepository, store: InMemoryStore
) -> None:
    await users.update_qualification_data("u1", QualificationData(cpf="1"))
    await users.update_qualification_data("u1", QualificationData(cpf="2", phone="11999"))

    assert len(store.tables["partner_qualification_data"]) == 1
    data = await users.get_qualification_data("u1")
    assert data.cpf == "2"
    assert data.phone == "11999"


@pytest.mark.asyncio
async def test_get_user_by_email_ignores_case(users: UserRepository) -> None:
    await users.create_user(User(id="u1", name="Ana", email="Ana@Example.com", role=UserRole.CLIENT))

    found = await users.get_user_by_email("  ana@example.COM ")

    assert found is not None
    assert found.id == "u1"


@pytest.mark.asyncio
async def test_list_users_by_role(users: UserRepository) -> None:
    await users.create_user(_user("u1", "Ana"))
    await users.create_user(_user("k1", "Diego", UserRole.CONSULTANT))

    consultants = await users.list_users_by_role(UserRole.CONSULTANT)

    assert [u.id for u in consultants] == ["k1"]


@pytest.mark.asyncio
async def test_update_user_whitelists_columns(users: UserRepository, store: InMemoryStore) -> None:
    await users.create_user(_user("u1", "Ana"))

    updated = await users.update_user(
        "u1", {"name": "Ana Souza", "client_type": ClientType.INTERESTED, "role": "administrator"}
    )

    assert updated is not None
    assert updated.name == "Ana Souza"
    assert updated.client_type is ClientType.INTERESTED
    assert updated.role is UserRole.CLIENT
    assert store.tables["users"][0]["role"] == "client"


@pytest.mark.asyncio
async def test_delete_and_count_users(users: UserRepository) -> None:
    await users.create_user(_user("u1", "Ana"))
    await users.create_user(_user("u2", "Bruno"))
    assert await users.count_users() == 2

    assert await users.delete_user("u1") is True
    assert await users.count_users() == 1
    assert await users.get_user("u1") is None


@pytest.mark.asyncio
async def test_user_documents(store: InMemoryStore) -> None:
    repo = UserDocumentRepository(store)

    doc = await repo.upload_user_document("u1", "RG.pdf", "identity", "https://u/rg.pdf")
    assert doc is not None
    assert doc.category == "identity"
    assert [d.id for d in await repo.get_user_documents("u1")] == [doc.id]

    assert await repo.delete_user_document(doc.id) is True
    assert await repo.get_user_documents("u1") == []


@pytest.mark.asyncio
async def test_notifications_unread_only(store: InMemoryStore) -> None:
    repo = NotificationRepository(store)
    await repo.create_notification("u1", "Nova tarefa", "Envie o RG", notification_type=NotificationType.TASK)
    await repo.create_notification("u1", "Mensagem", "Oi", link="/projects/p1")

    unread = await repo.get_user_notifications("u1")
    assert [n.title for n in unread] == ["Mensagem", "Nova tarefa"]
    assert unread[1].type == "task"

    assert await repo.mark_notification_as_read(unread[0].id) is True
    assert [n.title for n in await repo.get_user_notifications("u1")] == ["Nova tarefa"]


@pytest.mark.asyncio
async def test_get_user_by_email_is_one_filtered_query(users: UserRepository, store: InMemoryStore) -> None:
    await users.create_user(User(id="u1", name="Ana", email="ana_b@example.com", role=UserRole.CLIENT))
    await users.create_user(User(id="u2", name="Bruno", email="anaxb@example.com", role=UserRole.CLIENT))
    store.calls.clear()

    found = await users.get_user_by_email("ANA_B@example.com")

    assert found is not None
    assert found.id == "u1"
    assert store.count_calls("users", "select") == 1
    assert store.count_calls("partner_qualification_data", "select") == 1


@pytest.mark.asyncio
async def test_get_user_by_email_wildcards_match_literally(users: UserRepository) -> None:
    await users.create_user(User(id="u1", name="Ana", email="ana_b@example.com", role=UserRole.CLIENT))

    assert await users.get_user_by_email("anaxb@example.com") is None
    assert await users.get_user_by_email("ana%@example.com") is None


@pytest.mark.asyncio
async def test_get_user_by_email_failure_returns_none(users: UserRepository, store: InMemoryStore) -> None:
    store.fail_next("users", "select")
    assert await users.get_user_by_email("ana@example.com") is None
