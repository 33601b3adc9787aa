"""DTOs for project child records: documents, tasks, chat, activity log, notifications."""

from dataclasses import dataclass

from planejar.domain.enums import (
    ChatChannel,
    DocumentStatus,
    TaskStatus,
    UserRole,
)


@dataclass
class Document:
    """Metadata of a project document; the blob lives in object storage."""

    id: str
    name: str
    url: str
    phase_id: int
    type: str | None = "pdf"
    uploaded_at: str | None = None
    uploaded_by: str | None = None
    version: int = 1
    status: DocumentStatus = DocumentStatus.ACTIVE


@dataclass
class Task:
    id: str
    description: str
    phase_id: int
    status: TaskStatus = TaskStatus.PENDING
    assignee_id: str | None = None
    created_by: str | None = None
    created_at: str | None = None


@dataclass
class ChatMessage:
    """Append-only chat line. channel is None for messages not yet sent."""

    id: str
    author_id: str
    author_name: str
    author_role: UserRole
    content: str
    timestamp: str | None = None
    channel: ChatChannel | None = None


@dataclass
class LogEntry:
    """Append-only audit line: who did what."""

    id: str
    actor_id: str
    actor_name: str
    action: str
    timestamp: str | None = None


@dataclass
class Notification:
    id: str
    recipient_id: str
    title: str
    message: str
    link: str | None = None
    is_read: bool = False
    type: str | None = None
    created_at: str | None = None
