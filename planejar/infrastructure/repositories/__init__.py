"""Repositories over the hosted relational store and object storage."""

from planejar.infrastructure.repositories.activity_log_repo import ActivityLogRepository
from planejar.infrastructure.repositories.asset_repo import AssetRepository
from planejar.infrastructure.repositories.chat_repo import ChatRepository
from planejar.infrastructure.repositories.document_repo import DocumentRepository
from planejar.infrastructure.repositories.file_repo import FileRepository
from planejar.infrastructure.repositories.notification_repo import NotificationRepository
from planejar.infrastructure.repositories.phase_data_repo import PhaseDataRepository
from planejar.infrastructure.repositories.project_client_repo import ProjectClientRepository
from planejar.infrastructure.repositories.project_repo import ProjectRepository
from planejar.infrastructure.repositories.task_repo import TaskRepository
from planejar.infrastructure.repositories.user_document_repo import UserDocumentRepository
from planejar.infrastructure.repositories.user_repo import UserRepository

__all__ = [
    "ActivityLogRepository",
    "AssetRepository",
    "ChatRepository",
    "DocumentRepository",
    "FileRepository",
    "NotificationRepository",
    "PhaseDataRepository",
    "ProjectClientRepository",
    "ProjectRepository",
    "TaskRepository",
    "UserDocumentRepository",
    "UserRepository",
]
