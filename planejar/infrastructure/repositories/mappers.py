"""Row <-> DTO mapping for the relational store.

Rows are plain dicts keyed by snake_case column names. *_from_row builds
a view-model; *_to_row builds the insert/upsert payload.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from planejar.application.dtos.project import (
    Asset,
    CompanyData,
    Phase1Data,
    Phase2Data,
    Phase2Partner,
    Phase3Data,
    Project,
    initial_project_phases,
)
from planejar.application.dtos.records import (
    ChatMessage,
    Document,
    LogEntry,
    Notification,
    Task,
)
from planejar.application.dtos.user import QualificationData, User, UserDocument
from planejar.domain.enums import (
    AssetStatus,
    ChatChannel,
    ClientType,
    DocumentStatus,
    PhaseStatus,
    ProjectStatus,
    ReviewStatus,
    TaskStatus,
    UserRole,
)

# Users


def qualification_from_row(row: dict[str, Any]) -> QualificationData:
    return QualificationData(
        cpf=row.get("cpf"),
        rg=row.get("rg"),
        marital_status=row.get("marital_status"),
        property_regime=row.get("property_regime"),
        birth_date=row.get("birth_date"),
        nationality=row.get("nationality"),
        address=row.get("address"),
        phone=row.get("phone"),
        declares_income_tax=row.get("declares_income_tax"),
    )


def qualification_to_row(user_id: str, data: QualificationData) -> dict[str, Any]:
    return {"user_id": user_id, **asdict(data)}


def user_document_from_row(row: dict[str, Any]) -> UserDocument:
    return UserDocument(
        id=row["id"],
        name=row.get("name", ""),
        category=row.get("category", "other"),
        url=row.get("url", ""),
        uploaded_at=row.get("uploaded_at"),
    )


def user_from_row(
    row: dict[str, Any],
    qualification: QualificationData | None = None,
    documents: list[UserDocument] | None = None,
) -> User:
    client_type = row.get("client_type")
    return User(
        id=row["id"],
        name=row.get("name", ""),
        email=row.get("email", ""),
        role=UserRole(row.get("role", UserRole.CLIENT.value)),
        avatar_url=row.get("avatar_url"),
        client_type=ClientType(client_type) if client_type else None,
        requires_password_change=bool(row.get("requires_password_change")),
        qualification_data=qualification,
        documents=list(documents or []),
    )


def user_to_row(user: User) -> dict[str, Any]:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "role": user.role.value,
        "avatar_url": user.avatar_url,
        "client_type": user.client_type.value if user.client_type else None,
        "requires_password_change": user.requires_password_change,
    }


# Project records


def document_from_row(row: dict[str, Any]) -> Document:
    return Document(
        id=row["id"],
        name=row.get("name", ""),
        url=row.get("url", ""),
        phase_id=int(row.get("phase_id") or 0),
        type=row.get("type"),
        uploaded_at=row.get("uploaded_at"),
        uploaded_by=row.get("uploaded_by"),
        version=int(row.get("version") or 1),
        status=DocumentStatus(row.get("status") or DocumentStatus.ACTIVE.value),
    )


def task_from_row(row: dict[str, Any]) -> Task:
    return Task(
        id=row["id"],
        description=row.get("description", ""),
        phase_id=int(row.get("phase_id") or 0),
        status=TaskStatus(row.get("status") or TaskStatus.PENDING.value),
        assignee_id=row.get("assignee_id"),
        created_by=row.get("created_by"),
        created_at=row.get("created_at"),
    )


def chat_message_from_row(row: dict[str, Any]) -> ChatMessage:
    channel = row.get("chat_type")
    return ChatMessage(
        id=row["id"],
        author_id=row.get("author_id", ""),
        author_name=row.get("author_name", ""),
        author_role=UserRole(row.get("author_role") or UserRole.CLIENT.value),
        content=row.get("content", ""),
        timestamp=row.get("created_at"),
        channel=ChatChannel(channel) if channel else None,
    )


def log_entry_from_row(row: dict[str, Any]) -> LogEntry:
    return LogEntry(
        id=row["id"],
        actor_id=row.get("actor_id", ""),
        actor_name=row.get("actor_name", ""),
        action=row.get("action", ""),
        timestamp=row.get("created_at"),
    )


def notification_from_row(row: dict[str, Any]) -> Notification:
    return Notification(
        id=row["id"],
        recipient_id=row.get("recipient_id", ""),
        title=row.get("title", ""),
        message=row.get("message", ""),
        link=row.get("link"),
        is_read=bool(row.get("is_read")),
        type=row.get("type"),
        created_at=row.get("created_at"),
    )


# Phase data

_PHASE1_COLUMNS = (
    "diagnostic_summary",
    "objectives",
    "family_composition",
    "main_assets",
    "partners",
    "existing_companies",
    "meeting_date_time",
    "meeting_link",
    "meeting_minutes",
    "consultant_checklist",
)


def phase1_from_row(row: dict[str, Any]) -> Phase1Data:
    data = Phase1Data(**{column: row.get(column) for column in _PHASE1_COLUMNS})
    data.is_form_completed = bool(row.get("is_form_completed"))
    data.meeting_scheduled = bool(row.get("meeting_scheduled"))
    return data


def phase1_to_row(project_id: str, data: Phase1Data) -> dict[str, Any]:
    return {"project_id": project_id, **asdict(data)}


def phase2_partner_from_row(row: dict[str, Any]) -> Phase2Partner:
    participation = row.get("participation")
    return Phase2Partner(
        user_id=row.get("user_id", ""),
        name=row.get("name", ""),
        is_administrator=bool(row.get("is_administrator")),
        participation=float(participation) if participation is not None else None,
        data_status=row.get("data_status") or "pending",
    )


def phase2_partner_to_row(phase2_id: str, partner: Phase2Partner) -> dict[str, Any]:
    return {"phase_2_data_id": phase2_id, **asdict(partner)}


def phase2_from_rows(row: dict[str, Any], partner_rows: list[dict[str, Any]]) -> Phase2Data:
    company = row.get("company_data") or {}
    return Phase2Data(
        company_data=CompanyData(
            name=company.get("name", ""),
            capital=company.get("capital", ""),
            type=company.get("type", ""),
            address=company.get("address", ""),
            cnaes=company.get("cnaes", ""),
        ),
        partners=[phase2_partner_from_row(p) for p in partner_rows],
        status=ReviewStatus(row.get("status") or ReviewStatus.PENDING_CLIENT.value),
        process_status=row.get("process_status") or "pending_start",
    )


def phase2_to_row(project_id: str, data: Phase2Data) -> dict[str, Any]:
    return {
        "project_id": project_id,
        "company_data": asdict(data.company_data),
        "status": data.status.value,
        "process_status": data.process_status,
    }


def _optional_float(value: Any) -> float | None:
    return float(value) if value is not None else None


def asset_from_row(row: dict[str, Any]) -> Asset:
    return Asset(
        id=row["id"],
        owner_partner_id=row.get("owner_partner_id", ""),
        type=row.get("type", "other"),
        description=row.get("description", ""),
        value=_optional_float(row.get("value")),
        market_value=_optional_float(row.get("market_value")),
        status=AssetStatus(row.get("status") or AssetStatus.PENDING.value),
        document_id=row.get("document_id"),
    )


def asset_to_row(phase3_id: str, asset: Asset) -> dict[str, Any]:
    row = asdict(asset)
    row["status"] = asset.status.value
    row["phase_3_data_id"] = phase3_id
    if not row["id"]:
        del row["id"]
    return row


def phase3_from_rows(row: dict[str, Any], asset_rows: list[dict[str, Any]]) -> Phase3Data:
    return Phase3Data(
        assets=[asset_from_row(a) for a in asset_rows],
        status=ReviewStatus(row.get("status") or ReviewStatus.PENDING_CLIENT.value),
    )


# Projects


def _phase_status(phase_id: int, current_phase_id: int, project_status: ProjectStatus) -> PhaseStatus:
    if project_status is ProjectStatus.COMPLETED or phase_id < current_phase_id:
        return PhaseStatus.COMPLETED
    if phase_id == current_phase_id:
        return PhaseStatus.IN_PROGRESS
    return PhaseStatus.PENDING


def project_from_rows(
    row: dict[str, Any],
    *,
    client_ids: list[str] | None = None,
    internal_chat: list[ChatMessage] | None = None,
    client_chat: list[ChatMessage] | None = None,
    activity_log: list[LogEntry] | None = None,
    documents: list[Document] | None = None,
    tasks: list[Task] | None = None,
    phase1: Phase1Data | None = None,
    phase2: Phase2Data | None = None,
    phase3: Phase3Data | None = None,
) -> Project:
    """Assemble a Project from its row and the separately fetched related sets.

    Phases start from the fixed ten-phase template; stored phase 1-3 data
    replaces the blank template data, and documents and tasks are placed
    by phase_id.
    """
    status = ProjectStatus(row.get("status") or ProjectStatus.IN_PROGRESS.value)
    current_phase_id = int(row.get("current_phase_id") or 1)
    stored = {1: phase1, 2: phase2, 3: phase3}
    phases = initial_project_phases()
    for phase in phases:
        phase.status = _phase_status(phase.id, current_phase_id, status)
        if stored.get(phase.id) is not None:
            phase.data = stored[phase.id]
        phase.documents = [d for d in documents or [] if d.phase_id == phase.id]
        phase.tasks = [t for t in tasks or [] if t.phase_id == phase.id]
    return Project(
        id=row["id"],
        name=row.get("name", ""),
        status=status,
        current_phase_id=current_phase_id,
        consultant_id=row.get("consultant_id"),
        auxiliary_id=row.get("auxiliary_id"),
        client_ids=list(client_ids or []),
        phases=phases,
        internal_chat=list(internal_chat or []),
        client_chat=list(client_chat or []),
        activity_log=list(activity_log or []),
        post_completion_status=row.get("post_completion_status"),
    )
