"""Client-side session store: who is signed in and which data they see.

State machine:
    UNINITIALIZED -> LOADING -> AUTHENTICATED | ANONYMOUS
    AUTHENTICATED <-> ANONYMOUS (login / logout / SIGNED_OUT)
    any -> PASSWORD_RECOVERY on the PASSWORD_RECOVERY event; left to
    ANONYMOUS by complete_password_reset().

Every reload takes a new generation number; a reload whose generation is
no longer current when its queries finish is discarded.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from planejar.application.dtos.project import Project
from planejar.application.dtos.records import ChatMessage, Document, Task
from planejar.application.dtos.user import User
from planejar.domain.enums import (
    AuthErrorKind,
    AuthEvent,
    ChatChannel,
    SessionState,
    UserRole,
)
from planejar.domain.exceptions import AuthInvalidCredentialsError

if TYPE_CHECKING:
    from collections.abc import Callable

    from planejar.application.dtos.auth import AuthSession
    from planejar.application.services.auth_service import AuthService
    from planejar.infrastructure.repositories.file_repo import FileRepository
    from planejar.infrastructure.repositories.project_repo import ProjectRepository
    from planejar.infrastructure.repositories.user_repo import UserRepository

logger = logging.getLogger(__name__)


def visible_projects(projects: list[Project], user: User | None) -> list[Project]:
    """Projects the user may see: clients only their own, other roles all."""
    if user is None:
        return []
    if user.role is UserRole.CLIENT:
        return [p for p in projects if user.id in p.client_ids]
    return list(projects)


class SessionController:
    """Holds the signed-in user, the user list and the visible projects."""

    def __init__(
        self,
        auth: AuthService,
        users: UserRepository,
        projects: ProjectRepository,
        files: FileRepository,
    ) -> None:
        self._auth = auth
        self._users = users
        self._projects = projects
        self._files = files
        self.state = SessionState.UNINITIALIZED
        self.current_user: User | None = None
        self.users: list[User] = []
        self.projects: list[Project] = []
        self._generation = 0
        self._unsubscribe: Callable[[], None] | None = None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_authenticated(self) -> bool:
        return self.state is SessionState.AUTHENTICATED

    # Lifecycle

    async def initialize(self) -> None:
        """Subscribe to auth events, restore the current user and load data.

        Falls back to the persisted session when the identity provider has
        no session in memory (a fresh process).
        """
        if self._unsubscribe is None:
            self._unsubscribe = self._auth.on_auth_state_change(self._handle_auth_event)
        self.state = SessionState.LOADING
        user = await self._auth.get_current_user()
        if user is None and await self._auth.restore_session() is not None:
            user = await self._auth.get_current_user()
        await self._settle(user)

    async def shutdown(self) -> None:
        """Stop listening to auth events."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def _settle(self, user: User | None) -> None:
        if user is None:
            self._clear()
            self.state = SessionState.ANONYMOUS
            return
        self.current_user = user
        self.state = SessionState.AUTHENTICATED
        await self.reload()

    def _clear(self) -> None:
        self._generation += 1
        self.current_user = None
        self.users = []
        self.projects = []

    async def _handle_auth_event(self, event: AuthEvent, session: AuthSession | None) -> None:
        logger.debug("Auth event %s in state %s", event.value, self.state.value)
        if event is AuthEvent.PASSWORD_RECOVERY:
            self.state = SessionState.PASSWORD_RECOVERY
            return
        if event is AuthEvent.SIGNED_OUT:
            self._clear()
            self.state = SessionState.ANONYMOUS
            return
        if self.state in (SessionState.PASSWORD_RECOVERY, SessionState.LOADING):
            return
        if event in (AuthEvent.SIGNED_IN, AuthEvent.TOKEN_REFRESHED) and session is not None:
            if self.current_user is not None and self.current_user.id == session.user.id:
                return
            self.state = SessionState.LOADING
            await self._settle(await self._users.get_user(session.user.id))

    async def login(self, email: str, password: str) -> User | None:
        """Sign in and load data.

        Raises:
            AuthInvalidCredentialsError: The e-mail/password pair was rejected.
        """
        self.state = SessionState.LOADING
        result = await self._auth.sign_in(email, password)
        if result is None:
            self._clear()
            self.state = SessionState.ANONYMOUS
            if self._auth.last_error_kind is AuthErrorKind.INVALID_CREDENTIALS:
                raise AuthInvalidCredentialsError()
            return None
        await self._settle(result.user)
        await self._auth.persist_session()
        return result.user

    async def logout(self) -> bool:
        ok = await self._auth.sign_out()
        await self._auth.clear_persisted_session()
        self._clear()
        self.state = SessionState.ANONYMOUS
        return ok

    async def complete_password_reset(self, new_password: str) -> bool:
        """Set the new password, then sign out; the user logs in again."""
        if self.state is not SessionState.PASSWORD_RECOVERY:
            logger.warning("complete_password_reset called outside password recovery")
            return False
        if not await self._auth.update_password(new_password):
            return False
        await self._auth.sign_out()
        self._clear()
        self.state = SessionState.ANONYMOUS
        return True

    # Data

    async def reload(self) -> bool:
        """Fetch users and role-filtered projects.

        Returns False when the result was discarded because a newer reload
        (or a sign-out) started meanwhile.
        """
        self._generation += 1
        generation = self._generation
        user = self.current_user
        users = await self._users.list_users()
        projects = await self._projects.list_projects()
        if generation != self._generation:
            logger.debug("Discarding stale reload %d (current %d)", generation, self._generation)
            return False
        self.users = users
        self.projects = visible_projects(projects, user)
        return True

    def get_project(self, project_id: str) -> Project | None:
        for project in self.projects:
            if project.id == project_id:
                return project
        return None

    def _replace_project(self, project: Project) -> None:
        if not visible_projects([project], self.current_user):
            self._drop_project(project.id)
            return
        for index, existing in enumerate(self.projects):
            if existing.id == project.id:
                self.projects[index] = project
                return
        self.projects.insert(0, project)

    def _drop_project(self, project_id: str) -> None:
        self.projects = [p for p in self.projects if p.id != project_id]

    async def _refresh_project(self, project_id: str) -> Project | None:
        project = await self._projects.get_project(project_id)
        if project is not None:
            self._replace_project(project)
        return project

    def _actor(self, operation: str) -> User | None:
        if self.current_user is None:
            logger.warning("%s requires a signed-in user", operation)
        return self.current_user

    # Write-through operations

    async def create_project(
        self,
        name: str,
        consultant_id: str,
        client_ids: list[str] | None = None,
        auxiliary_id: str | None = None,
    ) -> Project | None:
        project = await self._projects.create_project(
            name, consultant_id, auxiliary_id=auxiliary_id, client_ids=client_ids
        )
        if project is not None:
            self._replace_project(project)
        return project

    async def update_project(self, project_id: str, updates: dict[str, Any]) -> Project | None:
        project = await self._projects.update_project(project_id, updates)
        if project is not None:
            self._replace_project(project)
        return project

    async def delete_project(self, project_id: str) -> bool:
        ok = await self._projects.delete_project(project_id)
        if ok:
            self._drop_project(project_id)
        return ok

    async def add_client_to_project(self, project_id: str, client_id: str) -> bool:
        ok = await self._projects.clients.add_client_to_project(project_id, client_id)
        if ok:
            await self._refresh_project(project_id)
        return ok

    async def create_task(
        self,
        project_id: str,
        phase_id: int,
        description: str,
        assignee_id: str | None = None,
    ) -> Task | None:
        actor = self._actor("create_task")
        if actor is None:
            return None
        task = await self._projects.tasks.create_task(
            project_id, phase_id, description, created_by=actor.id, assignee_id=assignee_id
        )
        if task is not None:
            await self._refresh_project(project_id)
        return task

    async def update_task(self, project_id: str, task_id: str, updates: dict[str, Any]) -> Task | None:
        task = await self._projects.tasks.update_task(task_id, updates)
        if task is not None:
            await self._refresh_project(project_id)
        return task

    async def send_chat_message(
        self, project_id: str, channel: ChatChannel, content: str
    ) -> ChatMessage | None:
        actor = self._actor("send_chat_message")
        if actor is None:
            return None
        if channel is ChatChannel.INTERNAL and actor.role is UserRole.CLIENT:
            logger.warning("Client %s cannot post to the internal chat", actor.id)
            return None
        draft = ChatMessage(
            id="",
            author_id=actor.id,
            author_name=actor.name,
            author_role=actor.role,
            content=content,
        )
        message = await self._projects.chat.send_message(project_id, channel, draft)
        if message is not None:
            await self._refresh_project(project_id)
        return message

    async def add_activity_log(self, project_id: str, action: str) -> bool:
        actor = self._actor("add_activity_log")
        if actor is None:
            return False
        ok = await self._projects.activity_log.add_log_entry(project_id, actor.id, actor.name, action)
        if ok:
            await self._refresh_project(project_id)
        return ok

    async def upload_phase_document(
        self,
        project_id: str,
        phase_id: int,
        file_name: str,
        content: bytes,
        content_type: str = "application/pdf",
    ) -> Document | None:
        """Store the file, record its metadata, and refresh the project."""
        actor = self._actor("upload_phase_document")
        if actor is None:
            return None
        url = await self._files.upload_project_document(project_id, phase_id, file_name, content, content_type)
        if url is None:
            return None
        doc_type = "pdf" if "pdf" in content_type.lower() else "other"
        document = await self._projects.documents.upload_document(
            project_id, phase_id, file_name, url, uploaded_by=actor.id, doc_type=doc_type
        )
        if document is not None:
            await self._refresh_project(project_id)
        return document

    async def delete_document(self, project_id: str, document_id: str) -> bool:
        ok = await self._projects.documents.delete_document(document_id)
        if ok:
            await self._refresh_project(project_id)
        return ok

    async def delete_user(self, user_id: str) -> bool:
        ok = await self._users.delete_user(user_id)
        if ok:
            self.users = [u for u in self.users if u.id != user_id]
            for project in self.projects:
                if user_id in project.client_ids:
                    project.client_ids = [c for c in project.client_ids if c != user_id]
        return ok
