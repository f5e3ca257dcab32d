"""
Repository adapters.

Callers use these instead of a concrete repository. At call time each
operation resolves the backing implementation through
``get_base_repository`` and, for user-scoped operations, reads the current
user id from the auth context and passes it down. Errors from the delegate,
including ``NotAuthenticatedError`` when nobody is signed in, propagate
unchanged.
"""

import logging
from collections.abc import Callable
from typing import Any, Optional

from ..auth import AuthContext, get_auth_context
from ..config.constants import DEFAULT_SESSION_TYPE
from .backend import (
    BackendKnowledgeRepository,
    BackendMessageRepository,
    BackendPresetRepository,
    BackendSessionRepository,
    BackendSummaryRepository,
    BackendTranscriptRepository,
    BackendUserRepository,
)
from .base import UNSET
from .client import BackendAPIClient

logger = logging.getLogger(__name__)

_BACKEND_REPOSITORIES = {
    "session": BackendSessionRepository,
    "message": BackendMessageRepository,
    "user": BackendUserRepository,
    "preset": BackendPresetRepository,
    "knowledge": BackendKnowledgeRepository,
    "stt": BackendTranscriptRepository,
    "summary": BackendSummaryRepository,
}

_default_client: Optional[BackendAPIClient] = None


def get_backend_client() -> BackendAPIClient:
    """Shared client for adapters that were not given one."""
    global _default_client
    if _default_client is None:
        _default_client = BackendAPIClient()
    return _default_client


def get_base_repository(kind: str, client: Optional[BackendAPIClient] = None):
    """
    Resolve the implementation behind an adapter.

    Local SQLite and Firebase storage have been removed, so this always
    returns the backend API repository for ``kind``.
    """
    try:
        repository_class = _BACKEND_REPOSITORIES[kind]
    except KeyError:
        raise ValueError(f"Unknown repository kind: {kind}") from None
    return repository_class(client or get_backend_client())


class _RepositoryAdapter:
    kind: str = ""

    def __init__(
        self,
        client: Optional[BackendAPIClient] = None,
        auth: Optional[AuthContext] = None,
        resolver: Optional[Callable[[], Any]] = None,
    ):
        self._client = client
        self._auth = auth
        self._resolver = resolver

    @property
    def auth(self) -> AuthContext:
        return self._auth or get_auth_context()

    def _repository(self):
        if self._resolver is not None:
            return self._resolver()
        return get_base_repository(self.kind, self._client)

    def _uid(self) -> str:
        return self.auth.get_current_user_id()


class SessionRepositoryAdapter(_RepositoryAdapter):
    kind = "session"

    async def get_by_id(self, id: str) -> Optional[dict]:
        return await self._repository().get_by_id(id)

    async def create(self, type: str = DEFAULT_SESSION_TYPE) -> str:
        return await self._repository().create(self._uid(), type)

    async def get_all_by_user_id(self) -> list[dict]:
        return await self._repository().get_all_by_user_id(self._uid())

    async def update_title(self, id: str, title: str) -> dict:
        return await self._repository().update_title(id, title)

    async def delete_with_related_data(self, id: str) -> dict:
        return await self._repository().delete_with_related_data(id)

    async def end(self, id: str) -> dict:
        return await self._repository().end(id)

    async def update_type(self, id: str, type: str) -> dict:
        return await self._repository().update_type(id, type)

    async def touch(self, id: str) -> dict:
        return await self._repository().touch(id)

    async def get_or_create_active(self, requested_type: str = DEFAULT_SESSION_TYPE) -> str:
        return await self._repository().get_or_create_active(self._uid(), requested_type)

    async def end_all_active_sessions(self) -> dict:
        return await self._repository().end_all_active_sessions(self._uid())


class MessageRepositoryAdapter(_RepositoryAdapter):
    kind = "message"

    async def add_ai_message(self, session_id: str, role: str, content: str, model: str = "unknown") -> dict:
        uid = self._uid()
        try:
            return await self._repository().add_ai_message(uid, session_id, role, content, model)
        except Exception as e:
            logger.error(
                f"add_ai_message failed: {type(e).__name__}: {e}",
                extra={"uid": uid, "session_id": session_id, "role": role},
            )
            raise

    async def get_all_ai_messages_by_session_id(self, session_id: str) -> list[dict]:
        return await self._repository().get_all_ai_messages_by_session_id(session_id)


class UserRepositoryAdapter(_RepositoryAdapter):
    kind = "user"

    async def find_or_create(self, user: dict) -> dict:
        # The user object already carries its uid
        return await self._repository().find_or_create(user)

    async def get_by_id(self) -> Optional[dict]:
        return await self._repository().get_by_id(self._uid())

    async def update(self, **fields: Any) -> dict:
        return await self._repository().update(self._uid(), **fields)

    async def set_migration_complete(self) -> dict:
        return await self._repository().set_migration_complete(self._uid())

    async def delete_by_id(self) -> dict:
        return await self._repository().delete_by_id(self._uid())


class PresetRepositoryAdapter(_RepositoryAdapter):
    kind = "preset"

    async def get_presets(self) -> list[dict]:
        return await self._repository().get_presets(self._uid())

    async def get_preset_templates(self) -> list[dict]:
        return await self._repository().get_preset_templates()

    async def create(self, title: str, prompt: str) -> dict:
        return await self._repository().create(self._uid(), title, prompt)

    async def update(self, id: str, title: str, prompt: str) -> dict:
        return await self._repository().update(id, self._uid(), title, prompt)

    async def delete(self, id: str) -> dict:
        return await self._repository().delete(id, self._uid())


class KnowledgeRepositoryAdapter(_RepositoryAdapter):
    kind = "knowledge"

    async def list_documents(self, folder_id: Any = UNSET) -> list[dict]:
        return await self._repository().list_documents(self._uid(), folder_id)

    async def get_document(self, id: str) -> Optional[dict]:
        return await self._repository().get_document(id, self._uid())

    async def create_document(self, title: str, content: str, folder_id: Optional[str] = None) -> dict:
        return await self._repository().create_document(self._uid(), title, content, folder_id)

    async def delete_document(self, id: str) -> dict:
        return await self._repository().delete_document(id, self._uid())

    async def move_document(self, id: str, folder_id: Optional[str]) -> dict:
        return await self._repository().move_document(id, self._uid(), folder_id)

    async def list_folders(self, parent_id: Optional[str] = None) -> list[dict]:
        return await self._repository().list_folders(self._uid(), parent_id)

    async def create_folder(self, name: str, parent_id: Optional[str] = None) -> dict:
        return await self._repository().create_folder(self._uid(), name, parent_id)

    async def delete_folder(self, id: str) -> dict:
        return await self._repository().delete_folder(id, self._uid())


class TranscriptRepositoryAdapter(_RepositoryAdapter):
    kind = "stt"

    async def add_transcript(self, session_id: str, speaker: str, text: str) -> dict:
        return await self._repository().add_transcript(self._uid(), session_id, speaker, text)

    async def get_all_transcripts_by_session_id(self, session_id: str) -> list[dict]:
        return await self._repository().get_all_transcripts_by_session_id(session_id)


class SummaryRepositoryAdapter(_RepositoryAdapter):
    kind = "summary"

    async def save_summary(
        self,
        session_id: str,
        tldr: str,
        text: str,
        bullet_json: Any,
        action_json: Any,
        model: str = "unknown",
    ) -> dict:
        return await self._repository().save_summary(
            self._uid(), session_id, tldr, text, bullet_json, action_json, model
        )

    async def get_summary_by_session_id(self, session_id: str) -> Optional[dict]:
        return await self._repository().get_summary_by_session_id(session_id)


session_repository = SessionRepositoryAdapter()
message_repository = MessageRepositoryAdapter()
user_repository = UserRepositoryAdapter()
preset_repository = PresetRepositoryAdapter()
knowledge_repository = KnowledgeRepositoryAdapter()
transcript_repository = TranscriptRepositoryAdapter()
summary_repository = SummaryRepositoryAdapter()
