"""Demo data seeding, status, export and wipe for the hosted backend.

Seeds one user per role plus a demo project so a fresh deployment can be
used right away. Every step checks for existing data first, so running
initialize_database() twice creates nothing the second time.
clear_database() deletes every row and is meant for test environments
only.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, TypedDict

from planejar.application.dtos.project import Phase1Data
from planejar.application.dtos.user import QualificationData
from planejar.application.interfaces.providers import IRelationalStore
from planejar.application.services.auth_service import AuthService
from planejar.domain.enums import ClientType, UserRole
from planejar.domain.exceptions import ProviderError
from planejar.infrastructure.repositories.project_repo import ProjectRepository
from planejar.infrastructure.repositories.user_repo import UserRepository
from planejar.infrastructure.supabase.tables import DELETION_ORDER
from planejar.shared.utils.datetime import utc_now_iso

logger = logging.getLogger(__name__)

EXPORT_FORMAT_VERSION = "1.0"

# Matches every real row id in a delete filter (ids are UUIDs, never nil).
NIL_UUID = "00000000-0000-0000-0000-000000000000"


class SeedUser(TypedDict):
    """Demo account created by seed_test_users."""

    email: str
    password: str
    name: str
    role: UserRole
    client_type: ClientType | None


DEMO_USERS: list[SeedUser] = [
    {
        "email": "admin@planejar.com",
        "password": "admin123",
        "name": "Administrador",
        "role": UserRole.ADMINISTRATOR,
        "client_type": None,
    },
    {
        "email": "diego.garcia@grupociatos.com.br",
        "password": "250500",
        "name": "Diego Garcia",
        "role": UserRole.CONSULTANT,
        "client_type": None,
    },
    {
        "email": "joao.completo@email.com",
        "password": "123123",
        "name": "João da Silva Completo",
        "role": UserRole.CLIENT,
        "client_type": ClientType.PARTNER,
    },
    {
        "email": "maria.completo@email.com",
        "password": "123123",
        "name": "Maria Souza Completo",
        "role": UserRole.CLIENT,
        "client_type": ClientType.PARTNER,
    },
    {
        "email": "servicos@grupociatos.com.br",
        "password": "123456",
        "name": "Gisele Pego",
        "role": UserRole.AUXILIARY,
        "client_type": None,
    },
]

DEMO_CONSULTANT_EMAIL = "diego.garcia@grupociatos.com.br"
DEMO_CLIENT_EMAILS = ("joao.completo@email.com", "maria.completo@email.com")
DEMO_PROJECT_NAME = "Holding Família Completo"

DEMO_PHASE1 = Phase1Data(
    objectives="Proteção patrimonial e planejamento sucessório.",
    family_composition="João (patriarca), Maria (esposa), Pedro (filho), Ana (filha).",
    main_assets="2 apartamentos, 1 sala comercial, participações na ABC Ltda, R$ 500.000 em investimentos.",
    partners="João da Silva Completo e Maria Souza Completo.",
    existing_companies="ABC Comércio Ltda.",
    meeting_link="https://meet.google.com/example",
)

DEMO_QUALIFICATION: dict[str, QualificationData] = {
    "joao.completo@email.com": QualificationData(
        cpf="111.222.333-44",
        rg="12.345.678-9",
        marital_status="casado",
        property_regime="comunhao_parcial",
        birth_date="1965-05-20",
        nationality="Brasileiro",
        address="Rua das Flores, 123, São Paulo, SP",
        phone="11987654321",
        declares_income_tax=True,
    ),
    "maria.completo@email.com": QualificationData(
        cpf="222.333.444-55",
        rg="23.456.789-0",
        marital_status="casado",
        property_regime="comunhao_parcial",
        birth_date="1968-08-15",
        nationality="Brasileira",
        address="Rua das Flores, 123, São Paulo, SP",
        phone="11987654322",
        declares_income_tax=True,
    ),
}


@dataclass
class MigrationReport:
    success: bool
    message: str
    details: list[str] = field(default_factory=list)


@dataclass
class MigrationStatus:
    is_seeded: bool
    user_count: int
    project_count: int


def demo_credentials() -> list[str]:
    """Credential lines printed after a successful initialization."""
    labels = {
        UserRole.ADMINISTRATOR: "Admin",
        UserRole.CONSULTANT: "Consultant",
        UserRole.AUXILIARY: "Auxiliary",
    }
    lines: list[str] = []
    client_number = 0
    for user in DEMO_USERS:
        if user["role"] is UserRole.CLIENT:
            client_number += 1
            label = f"Client {client_number}"
        else:
            label = labels[user["role"]]
        lines.append(f"- {label}: {user['email']} / {user['password']}")
    return lines


class DataMigrationService:
    """Seeds, inspects, exports and wipes demo data."""

    def __init__(
        self,
        auth: AuthService,
        users: UserRepository,
        projects: ProjectRepository,
        store: IRelationalStore,
    ) -> None:
        self._auth = auth
        self._users = users
        self._projects = projects
        self._store = store

    async def is_database_seeded(self) -> bool:
        """True when the users table has at least one row."""
        return await self._users.count_users() > 0

    async def seed_test_users(self) -> bool:
        """Create the demo accounts that do not exist yet.

        Returns True when every demo account exists afterwards.
        """
        failed: list[str] = []
        for seed in DEMO_USERS:
            if await self._auth.get_user_by_email(seed["email"]) is not None:
                logger.info("User %s already exists, skipping", seed["email"])
                continue
            result = await self._auth.sign_up(
                seed["email"],
                seed["password"],
                seed["name"],
                seed["role"],
                seed["client_type"],
            )
            if result is None:
                logger.error(
                    "Failed to create user %s: %s", seed["email"], self._auth.last_error_message
                )
                failed.append(seed["email"])
            else:
                logger.info("Created user %s (%s)", seed["email"], seed["role"].value)
        return not failed

    async def seed_test_project(self) -> bool:
        """Create the demo project with both clients, phase 1 data and qualification data."""
        consultant = await self._users.get_user_by_email(DEMO_CONSULTANT_EMAIL)
        clients = [await self._users.get_user_by_email(email) for email in DEMO_CLIENT_EMAILS]
        if consultant is None or any(c is None for c in clients):
            logger.error("Demo users missing; run seed_test_users first")
            return False

        existing = await self._projects.list_projects_by_consultant(consultant.id)
        if existing:
            logger.info("Demo project already exists (%s), skipping", existing[0].id)
            return True

        project = await self._projects.create_project(
            DEMO_PROJECT_NAME,
            consultant.id,
            client_ids=[c.id for c in clients if c is not None],
        )
        if project is None:
            return False
        logger.info("Created project %s (%s)", DEMO_PROJECT_NAME, project.id)

        if not await self._projects.phase_data.update_phase1_data(project.id, DEMO_PHASE1):
            return False
        for client in clients:
            if client is None:
                continue
            qualification = DEMO_QUALIFICATION[client.email.lower()]
            if not await self._users.update_qualification_data(client.id, qualification):
                return False
        return True

    async def initialize_database(self) -> MigrationReport:
        """Seed users then the demo project; no-op when data already exists."""
        if await self.is_database_seeded():
            return MigrationReport(
                success=True,
                message="Database is already initialized with data",
                details=["Database contains data - no action taken"],
            )

        details = ["Database is empty - starting initialization"]
        if not await self.seed_test_users():
            details.append("✗ Failed to seed test users")
            return MigrationReport(False, "Database initialization failed during user seeding", details)
        details.append("✓ Test users created successfully")

        if not await self.seed_test_project():
            details.append("✗ Failed to seed test project")
            return MigrationReport(False, "Database initialization failed during project seeding", details)
        details.append("✓ Test project created successfully")

        details.extend(["", "Database initialization complete!", "", "Test Credentials:"])
        details.extend(demo_credentials())
        return MigrationReport(True, "Database initialized successfully", details)

    async def clear_database(self) -> bool:
        """Delete every row, children before parents. Never run against production.

        Identity accounts are not removed; the public key cannot delete them.
        """
        logger.warning("Clearing all application tables")
        for table in DELETION_ORDER:
            try:
                await self._store.table(table).delete().neq("id", NIL_UUID).execute()
            except ProviderError as exc:
                logger.error("Error clearing %s: %s", table, exc.diagnostics())
                return False
        return True

    async def get_status(self) -> MigrationStatus:
        user_count = await self._users.count_users()
        project_count = await self._projects.count_projects()
        return MigrationStatus(
            is_seeded=user_count > 0,
            user_count=user_count,
            project_count=project_count,
        )

    async def export_database(self) -> dict[str, Any] | None:
        """Snapshot of users and projects as JSON-ready dicts (backup)."""
        users = await self._users.list_users()
        projects = await self._projects.list_projects()
        return {
            "timestamp": utc_now_iso(),
            "version": EXPORT_FORMAT_VERSION,
            "data": {
                "users": [
                    {
                        "id": u.id,
                        "name": u.name,
                        "email": u.email,
                        "role": u.role.value,
                        "client_type": u.client_type.value if u.client_type else None,
                        "qualification_data": asdict(u.qualification_data) if u.qualification_data else None,
                    }
                    for u in users
                ],
                "projects": [
                    {
                        "id": p.id,
                        "name": p.name,
                        "status": p.status.value,
                        "current_phase_id": p.current_phase_id,
                        "client_ids": list(p.client_ids),
                    }
                    for p in projects
                ],
            },
        }
