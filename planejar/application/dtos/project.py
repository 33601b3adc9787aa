"""DTOs for projects and their ten phases.

A Project is assembled from the projects row plus one query per related
set (clients, chats, activity log, documents, phase 1-3 tables). Phases
4-10 have no table of their own and carry template data.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any

from planejar.application.dtos.records import ChatMessage, Document, LogEntry, Task
from planejar.core.constants import PHASE_DEFAULT_DATA, PHASE_DEFINITIONS
from planejar.domain.enums import (
    AssetStatus,
    PhaseStatus,
    ProjectStatus,
    ReviewStatus,
)


@dataclass
class Phase1Data:
    """Diagnostic and planning data (phase_1_data)."""

    diagnostic_summary: str | None = None
    objectives: str | None = None
    family_composition: str | None = None
    main_assets: str | None = None
    partners: str | None = None
    existing_companies: str | None = None
    is_form_completed: bool = False
    meeting_scheduled: bool = False
    meeting_date_time: str | None = None
    meeting_link: str | None = None
    meeting_minutes: str | None = None
    consultant_checklist: dict[str, Any] | None = None


@dataclass
class CompanyData:
    name: str = ""
    capital: str = ""
    type: str = ""
    address: str = ""
    cnaes: str = ""


@dataclass
class Phase2Partner:
    user_id: str
    name: str
    is_administrator: bool = False
    participation: float | None = None
    data_status: str = "pending"


@dataclass
class Phase2Data:
    """Company formation data (phase_2_data + phase_2_partners)."""

    company_data: CompanyData = field(default_factory=CompanyData)
    partners: list[Phase2Partner] = field(default_factory=list)
    status: ReviewStatus = ReviewStatus.PENDING_CLIENT
    process_status: str = "pending_start"


@dataclass
class Asset:
    """Asset declared for transfer into the holding (assets)."""

    id: str
    owner_partner_id: str
    type: str
    description: str
    value: float | None = None
    market_value: float | None = None
    status: AssetStatus = AssetStatus.PENDING
    document_id: str | None = None


@dataclass
class Phase3Data:
    """Asset declarations (phase_3_data + assets)."""

    assets: list[Asset] = field(default_factory=list)
    status: ReviewStatus = ReviewStatus.PENDING_CLIENT


PhaseData = Phase1Data | Phase2Data | Phase3Data | dict[str, Any]


@dataclass
class Phase:
    id: int
    title: str
    description: str
    status: PhaseStatus = PhaseStatus.PENDING
    tasks: list[Task] = field(default_factory=list)
    documents: list[Document] = field(default_factory=list)
    data: PhaseData | None = None


@dataclass
class Project:
    """Case file: status, current phase, people involved and the ten phases."""

    id: str
    name: str
    status: ProjectStatus
    current_phase_id: int
    consultant_id: str | None
    auxiliary_id: str | None = None
    client_ids: list[str] = field(default_factory=list)
    phases: list[Phase] = field(default_factory=list)
    internal_chat: list[ChatMessage] = field(default_factory=list)
    client_chat: list[ChatMessage] = field(default_factory=list)
    activity_log: list[LogEntry] = field(default_factory=list)
    post_completion_status: str | None = None

    def phase(self, phase_id: int) -> Phase | None:
        """Return the phase with the given id, or None."""
        for phase in self.phases:
            if phase.id == phase_id:
                return phase
        return None


def _initial_phase_data(phase_id: int) -> PhaseData:
    if phase_id == 1:
        return Phase1Data()
    if phase_id == 2:
        return Phase2Data()
    if phase_id == 3:
        return Phase3Data()
    return copy.deepcopy(PHASE_DEFAULT_DATA[phase_id])


def initial_project_phases() -> list[Phase]:
    """Return a blank set of the ten phases; phase 1 starts in progress."""
    return [
        Phase(
            id=phase_id,
            title=title,
            description=description,
            status=PhaseStatus.IN_PROGRESS if phase_id == 1 else PhaseStatus.PENDING,
            data=_initial_phase_data(phase_id),
        )
        for phase_id, title, description in PHASE_DEFINITIONS
    ]
