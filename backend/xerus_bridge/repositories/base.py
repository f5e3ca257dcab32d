"""
Capability sets for data access.

Each abstract class is the operation set one entity exposes. The remote
backend implementations and the retired local-storage tombstones both
implement these, so callers depend only on the interface.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

# Sentinel for "no folder filter" so that None can mean "root folder"
UNSET: Any = object()


class SessionRepository(ABC):
    """Conversation sessions owned by a user."""

    @abstractmethod
    async def get_by_id(self, id: str) -> Optional[dict]:
        pass

    @abstractmethod
    async def create(self, uid: str, type: str = "ask") -> str:
        """Create a session and return its id."""
        pass

    @abstractmethod
    async def get_all_by_user_id(self, uid: str) -> list[dict]:
        pass

    @abstractmethod
    async def update_title(self, id: str, title: str) -> dict:
        pass

    @abstractmethod
    async def delete_with_related_data(self, id: str) -> dict:
        pass

    @abstractmethod
    async def end(self, id: str) -> dict:
        pass

    @abstractmethod
    async def update_type(self, id: str, type: str) -> dict:
        pass

    @abstractmethod
    async def touch(self, id: str) -> dict:
        pass

    @abstractmethod
    async def get_or_create_active(self, uid: str, requested_type: str = "ask") -> str:
        pass

    @abstractmethod
    async def end_all_active_sessions(self, uid: str) -> dict:
        pass


class MessageRepository(ABC):
    """Messages appended to a session by the ask feature."""

    @abstractmethod
    async def add_ai_message(
        self, uid: str, session_id: str, role: str, content: str, model: str = "unknown"
    ) -> dict:
        pass

    @abstractmethod
    async def get_all_ai_messages_by_session_id(self, session_id: str) -> list[dict]:
        pass


class UserRepository(ABC):
    @abstractmethod
    async def find_or_create(self, user: dict) -> dict:
        pass

    @abstractmethod
    async def get_by_id(self, uid: str) -> Optional[dict]:
        pass

    @abstractmethod
    async def update(self, uid: str, **fields: Any) -> dict:
        pass

    @abstractmethod
    async def set_migration_complete(self, uid: str) -> dict:
        pass

    @abstractmethod
    async def delete_by_id(self, uid: str) -> dict:
        pass


class PresetRepository(ABC):
    """Prompt presets: shared templates plus each user's own presets."""

    @abstractmethod
    async def get_presets(self, uid: str) -> list[dict]:
        pass

    @abstractmethod
    async def get_preset_templates(self) -> list[dict]:
        pass

    @abstractmethod
    async def create(self, uid: str, title: str, prompt: str) -> dict:
        pass

    @abstractmethod
    async def update(self, id: str, uid: str, title: str, prompt: str) -> dict:
        pass

    @abstractmethod
    async def delete(self, id: str, uid: str) -> dict:
        pass


class TranscriptRepository(ABC):
    """Speech-to-text lines captured during a listen session."""

    @abstractmethod
    async def add_transcript(self, uid: str, session_id: str, speaker: str, text: str) -> dict:
        pass

    @abstractmethod
    async def get_all_transcripts_by_session_id(self, session_id: str) -> list[dict]:
        pass


class SummaryRepository(ABC):
    """The generated summary of a listen session, one per session."""

    @abstractmethod
    async def save_summary(
        self,
        uid: str,
        session_id: str,
        tldr: str,
        text: str,
        bullet_json: Any,
        action_json: Any,
        model: str = "unknown",
    ) -> dict:
        """Create or replace the summary for ``session_id``."""
        pass

    @abstractmethod
    async def get_summary_by_session_id(self, session_id: str) -> Optional[dict]:
        pass


class KnowledgeRepository(ABC):
    """Knowledge-base documents organised in a folder tree."""

    @abstractmethod
    async def list_documents(self, uid: str, folder_id: Any = UNSET) -> list[dict]:
        """List documents; ``folder_id`` filters by folder when given."""
        pass

    @abstractmethod
    async def get_document(self, id: str, uid: str) -> Optional[dict]:
        pass

    @abstractmethod
    async def create_document(
        self, uid: str, title: str, content: str, folder_id: Optional[str] = None
    ) -> dict:
        pass

    @abstractmethod
    async def delete_document(self, id: str, uid: str) -> dict:
        pass

    @abstractmethod
    async def move_document(self, id: str, uid: str, folder_id: Optional[str]) -> dict:
        """Move a document into ``folder_id``; None moves it to the root."""
        pass

    @abstractmethod
    async def list_folders(self, uid: str, parent_id: Optional[str] = None) -> list[dict]:
        pass

    @abstractmethod
    async def create_folder(self, uid: str, name: str, parent_id: Optional[str] = None) -> dict:
        pass

    @abstractmethod
    async def delete_folder(self, id: str, uid: str) -> dict:
        pass
