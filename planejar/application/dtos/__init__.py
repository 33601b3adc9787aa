"""Application DTOs (view-models built from store rows)."""

from planejar.application.dtos.auth import (
    AuthResponse,
    AuthResult,
    AuthSession,
    AuthUser,
    PasswordCheck,
)
from planejar.application.dtos.project import (
    Asset,
    CompanyData,
    Phase,
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

__all__ = [
    "Asset",
    "AuthResponse",
    "AuthResult",
    "AuthSession",
    "AuthUser",
    "ChatMessage",
    "CompanyData",
    "Document",
    "LogEntry",
    "Notification",
    "PasswordCheck",
    "Phase",
    "Phase1Data",
    "Phase2Data",
    "Phase2Partner",
    "Phase3Data",
    "Project",
    "QualificationData",
    "Task",
    "User",
    "UserDocument",
    "initial_project_phases",
]
