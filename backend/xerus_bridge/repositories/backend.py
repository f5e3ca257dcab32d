"""
Backend API repositories.

Remote implementations of the capability sets in ``base``. Each one talks to
the backend over ``BackendAPIClient`` and reshapes responses where the
callers expect a different format (conversations are exposed as sessions).
"""

import asyncio
import logging
import time
from datetime import datetime
from typing import Any, Optional

from ..config.constants import DEFAULT_SESSION_TYPE, MESSAGE_ROLES
from .base import (
    UNSET,
    KnowledgeRepository,
    MessageRepository,
    PresetRepository,
    SessionRepository,
    SummaryRepository,
    TranscriptRepository,
    UserRepository,
)
from .client import BackendAPIClient

logger = logging.getLogger(__name__)


def conversation_to_session(conversation: dict) -> dict:
    """Convert a backend conversation to the session shape callers use."""
    metadata = conversation.get("metadata") or {}
    return {
        "id": conversation["id"],
        "uid": conversation.get("user_id"),
        "members": [conversation.get("user_id")],
        "title": conversation.get("title"),
        "session_type": conversation.get("agentType") or metadata.get("session_type") or DEFAULT_SESSION_TYPE,
        "started_at": conversation.get("created_at"),
        "updated_at": conversation.get("updated_at"),
        "ended_at": metadata.get("ended_at"),
        "metadata": metadata,
    }


class BackendSessionRepository(SessionRepository):
    def __init__(self, client: BackendAPIClient):
        self.client = client

    async def get_by_id(self, id: str) -> Optional[dict]:
        result = await self.client.get(f"conversations/{id}", allow_404=True)
        if result is None:
            logger.debug(f"Conversation not found: {id}")
            return None
        return conversation_to_session(result)

    async def create(self, uid: str, type: str = DEFAULT_SESSION_TYPE) -> str:
        result = await self.client.post(
            "conversations",
            user_id=uid,
            json={
                "title": f"Session @ {datetime.now().strftime('%H:%M:%S')}",
                "agentType": type,
                "metadata": {},
            },
        )
        logger.info(f"Created session {result['id']} for user {uid}")
        return result["id"]

    async def get_all_by_user_id(self, uid: str) -> list[dict]:
        conversations = await self.client.get("conversations", user_id=uid, params={"limit": 50})
        return [conversation_to_session(c) for c in conversations or []]

    async def update_title(self, id: str, title: str) -> dict:
        await self.client.put(f"conversations/{id}", json={"title": title})
        return {"changes": 1}

    async def delete_with_related_data(self, id: str) -> dict:
        # Already gone counts as deleted
        await self.client.delete(f"conversations/{id}", allow_404=True)
        return {"success": True}

    async def end(self, id: str) -> dict:
        await self.client.put(f"conversations/{id}", json={"metadata": {"ended_at": int(time.time())}})
        return {"changes": 1}

    async def update_type(self, id: str, type: str) -> dict:
        await self.client.put(f"conversations/{id}", json={"metadata": {"session_type": type}})
        return {"changes": 1}

    async def touch(self, id: str) -> dict:
        result = await self.client.put(
            f"conversations/{id}",
            json={"metadata": {"last_touched": int(time.time())}},
            allow_404=True,
        )
        if result is None:
            logger.warning(f"Session {id} does not exist - it will be created when needed")
            return {"changes": 0}
        return {"changes": 1}

    async def get_or_create_active(self, uid: str, requested_type: str = DEFAULT_SESSION_TYPE) -> str:
        sessions = await self.get_all_by_user_id(uid)
        active = next((s for s in sessions if not s["ended_at"]), None)
        if active is None:
            logger.info("No active session for user. Creating new.")
            return await self.create(uid, requested_type)

        if active["session_type"] == "ask" and requested_type == "listen":
            await self.update_type(active["id"], "listen")
            logger.info(f"Promoted session {active['id']} to 'listen' type.")

        touched = await self.touch(active["id"])
        if touched["changes"] == 0:
            logger.warning("Active session not found in backend, creating new session")
            return await self.create(uid, requested_type)
        return active["id"]

    async def end_all_active_sessions(self, uid: str) -> dict:
        sessions = await self.get_all_by_user_id(uid)
        active = [s for s in sessions if not s["ended_at"]]
        if not active:
            return {"changes": 0}
        await asyncio.gather(*(self.end(s["id"]) for s in active))
        logger.info(f"Ended {len(active)} active session(s) for user.")
        return {"changes": len(active)}


class BackendMessageRepository(MessageRepository):
    def __init__(self, client: BackendAPIClient):
        self.client = client

    async def add_ai_message(
        self, uid: str, session_id: str, role: str, content: str, model: str = "unknown"
    ) -> dict:
        if role not in MESSAGE_ROLES:
            raise ValueError(f"Invalid message role '{role}'. Expected one of: {', '.join(MESSAGE_ROLES)}")
        result = await self.client.post(
            f"conversations/{session_id}/messages",
            user_id=uid,
            json={
                "role": role,
                "content": content,
                "model": model,
                "uid": uid,
                "processingTime": None,
                "tokenCount": None,
            },
        )
        return {"id": result.get("id") or result.get("messageId")}

    async def get_all_ai_messages_by_session_id(self, session_id: str) -> list[dict]:
        result = await self.client.get(f"conversations/{session_id}")
        return (result or {}).get("messages") or []


class BackendUserRepository(UserRepository):
    def __init__(self, client: BackendAPIClient):
        self.client = client

    async def find_or_create(self, user: dict) -> dict:
        return await self.client.post(
            "user/find-or-create",
            user_id=user.get("uid"),
            json={
                "uid": user.get("uid"),
                "email": user.get("email"),
                "display_name": user.get("display_name") or user.get("displayName"),
            },
        )

    async def get_by_id(self, uid: str) -> Optional[dict]:
        return await self.client.get(f"user/{uid}", user_id=uid, allow_404=True)

    async def update(self, uid: str, **fields: Any) -> dict:
        return await self.client.put("user/profile", user_id=uid, json=fields)

    async def set_migration_complete(self, uid: str) -> dict:
        return await self.client.put("user/preferences", user_id=uid, json={"migration_complete": True})

    async def delete_by_id(self, uid: str) -> dict:
        await self.client.delete("user/account", user_id=uid)
        return {"success": True}


class BackendPresetRepository(PresetRepository):
    def __init__(self, client: BackendAPIClient):
        self.client = client

    async def get_presets(self, uid: str) -> list[dict]:
        return await self.client.get("presets", user_id=uid) or []

    async def get_preset_templates(self) -> list[dict]:
        return await self.client.get("presets/templates") or []

    async def create(self, uid: str, title: str, prompt: str) -> dict:
        return await self.client.post("presets", user_id=uid, json={"title": title, "prompt": prompt})

    async def update(self, id: str, uid: str, title: str, prompt: str) -> dict:
        return await self.client.put(f"presets/{id}", user_id=uid, json={"title": title, "prompt": prompt})

    async def delete(self, id: str, uid: str) -> dict:
        await self.client.delete(f"presets/{id}", user_id=uid)
        return {"success": True}


class BackendTranscriptRepository(TranscriptRepository):
    def __init__(self, client: BackendAPIClient):
        self.client = client

    async def add_transcript(self, uid: str, session_id: str, speaker: str, text: str) -> dict:
        result = await self.client.post(
            f"conversations/{session_id}/transcripts",
            user_id=uid,
            json={"speaker": speaker, "text": text},
        )
        return {"id": (result or {}).get("id")}

    async def get_all_transcripts_by_session_id(self, session_id: str) -> list[dict]:
        return await self.client.get(f"conversations/{session_id}/transcripts") or []


class BackendSummaryRepository(SummaryRepository):
    def __init__(self, client: BackendAPIClient):
        self.client = client

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
        await self.client.put(
            f"conversations/{session_id}/summary",
            user_id=uid,
            json={
                "tldr": tldr,
                "text": text,
                "bullet_json": bullet_json,
                "action_json": action_json,
                "model": model,
            },
        )
        return {"changes": 1}

    async def get_summary_by_session_id(self, session_id: str) -> Optional[dict]:
        return await self.client.get(f"conversations/{session_id}/summary", allow_404=True)


class BackendKnowledgeRepository(KnowledgeRepository):
    def __init__(self, client: BackendAPIClient):
        self.client = client

    async def list_documents(self, uid: str, folder_id: Any = UNSET) -> list[dict]:
        params = None
        if folder_id is not UNSET:
            params = {"folder_id": "null" if folder_id is None else str(folder_id)}
        return await self.client.get("knowledge", user_id=uid, params=params) or []

    async def get_document(self, id: str, uid: str) -> Optional[dict]:
        return await self.client.get(f"knowledge/{id}", user_id=uid, allow_404=True)

    async def create_document(
        self, uid: str, title: str, content: str, folder_id: Optional[str] = None
    ) -> dict:
        return await self.client.post(
            "knowledge",
            user_id=uid,
            json={"title": title, "content": content, "folder_id": folder_id},
        )

    async def delete_document(self, id: str, uid: str) -> dict:
        await self.client.delete(f"knowledge/{id}", user_id=uid)
        return {"success": True}

    async def move_document(self, id: str, uid: str, folder_id: Optional[str]) -> dict:
        return await self.client.post(
            f"knowledge/{id}/move",
            user_id=uid,
            json={"folder_id": None if folder_id is None else str(folder_id)},
        )

    async def list_folders(self, uid: str, parent_id: Optional[str] = None) -> list[dict]:
        params = {"parent_id": "null" if parent_id is None else str(parent_id)}
        return await self.client.get("knowledge/folders", user_id=uid, params=params) or []

    async def create_folder(self, uid: str, name: str, parent_id: Optional[str] = None) -> dict:
        return await self.client.post(
            "knowledge/folders", user_id=uid, json={"name": name, "parent_id": parent_id}
        )

    async def delete_folder(self, id: str, uid: str) -> dict:
        await self.client.delete(f"knowledge/folders/{id}", user_id=uid)
        return {"success": True}
