"""Unit tests for row <-> DTO mapping."""

from planejar.application.dtos.project import Asset, CompanyData, Phase2Data, Phase2Partner
from planejar.application.dtos.records import Document, Task
from planejar.application.dtos.user import QualificationData, User
from planejar.domain.enums import (
    AssetStatus,
    ChatChannel,
    ClientType,
    PhaseStatus,
    ProjectStatus,
    ReviewStatus,
    TaskStatus,
    UserRole,
)
from planejar.infrastructure.repositories.mappers import (
    asset_to_row,
    chat_message_from_row,
    phase1_from_row,
    phase2_from_rows,
    phase2_to_row,
    project_from_rows,
    qualification_to_row,
    task_from_row,
    user_from_row,
    user_to_row,
)


def test_user_row_mapping() -> None:
    user = User(
        id="u1",
        name="Maria",
        email="maria@example.com",
        role=UserRole.CLIENT,
        client_type=ClientType.PARTNER,
    )
    row = user_to_row(user)
    assert row["role"] == "client"
    assert row["client_type"] == "partner"

    mapped = user_from_row(row, QualificationData(cpf="1"))
    assert mapped.role is UserRole.CLIENT
    assert mapped.client_type is ClientType.PARTNER
    assert mapped.qualification_data == QualificationData(cpf="1")
    assert mapped.documents == []


def test_user_from_row_without_client_type() -> None:
    user = user_from_row({"id": "u2", "name": "Diego", "email": "d@x.com", "role": "consultant"})
    assert user.role is UserRole.CONSULTANT
    assert user.client_type is None
    assert user.requires_password_change is False


def test_qualification_to_row_keys_by_user() -> None:
    row = qualification_to_row("u1", QualificationData(cpf="111", declares_income_tax=True))
    assert row["user_id"] == "u1"
    assert row["cpf"] == "111"
    assert row["declares_income_tax"] is True


def test_task_from_row_maps_creator() -> None:
    task = task_from_row(
        {
            "id": "t1",
            "description": "Enviar certidões",
            "phase_id": 2,
            "status": "completed",
            "assignee_id": "c1",
            "created_by": "k1",
            "created_at": "2026-01-01T00:00:00+00:00",
        }
    )
    assert task.created_by == "k1"
    assert task.status is TaskStatus.COMPLETED
    assert task.phase_id == 2


def test_chat_message_from_row() -> None:
    message = chat_message_from_row(
        {
            "id": "m1",
            "chat_type": "internal",
            "author_id": "k1",
            "author_name": "Diego",
            "author_role": "consultant",
            "content": "Oi",
            "created_at": "2026-01-01T00:00:00+00:00",
        }
    )
    assert message.channel is ChatChannel.INTERNAL
    assert message.author_role is UserRole.CONSULTANT
    assert message.timestamp == "2026-01-01T00:00:00+00:00"


def test_phase1_from_row_defaults_flags() -> None:
    data = phase1_from_row({"project_id": "p1", "objectives": "Sucessão", "is_form_completed": None})
    assert data.objectives == "Sucessão"
    assert data.is_form_completed is False
    assert data.meeting_scheduled is False


def test_phase2_company_data_and_partners() -> None:
    data = Phase2Data(
        company_data=CompanyData(name="Holding XYZ", capital="100000"),
        partners=[Phase2Partner(user_id="c1", name="João", participation=50)],
        status=ReviewStatus.PENDING_CONSULTANT_REVIEW,
        process_status="in_progress",
    )
    row = phase2_to_row("p1", data)
    assert row["company_data"]["name"] == "Holding XYZ"
    assert row["status"] == "pending_consultant_review"
    assert row["process_status"] == "in_progress"

    mapped = phase2_from_rows(
        {"id": "ph2", **row},
        [{"user_id": "c1", "name": "João", "participation": "50", "is_administrator": True}],
    )
    assert mapped.company_data.name == "Holding XYZ"
    assert mapped.partners[0].participation == 50.0
    assert mapped.partners[0].is_administrator is True
    assert mapped.status is ReviewStatus.PENDING_CONSULTANT_REVIEW


def test_asset_to_row_drops_blank_id() -> None:
    asset = Asset(id="", owner_partner_id="c1", type="property", description="Apto", value=100.0)
    row = asset_to_row("ph3", asset)
    assert "id" not in row
    assert row["phase_3_data_id"] == "ph3"
    assert row["status"] == AssetStatus.PENDING.value


def test_project_from_rows_derives_phase_status_and_places_records() -> None:
    project = project_from_rows(
        {"id": "p1", "name": "Holding", "status": "in-progress", "current_phase_id": 3},
        client_ids=["c1"],
        documents=[Document(id="d1", name="a.pdf", url="u", phase_id=2)],
        tasks=[Task(id="t1", description="x", phase_id=3)],
    )

    assert len(project.phases) == 10
    assert [p.status for p in project.phases[:4]] == [
        PhaseStatus.COMPLETED,
        PhaseStatus.COMPLETED,
        PhaseStatus.IN_PROGRESS,
        PhaseStatus.PENDING,
    ]
    assert [d.id for d in project.phase(2).documents] == ["d1"]
    assert [t.id for t in project.phase(3).tasks] == ["t1"]
    assert project.phase(1).documents == []
    assert project.phase(4).data["status"] == "pending_draft"
    assert project.client_ids == ["c1"]


def test_project_from_rows_completed_project_has_all_phases_completed() -> None:
    project = project_from_rows(
        {"id": "p1", "name": "Holding", "status": "completed", "current_phase_id": 7}
    )
    assert project.status is ProjectStatus.COMPLETED
    assert all(p.status is PhaseStatus.COMPLETED for p in project.phases)
