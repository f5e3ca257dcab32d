"""
Repository layer.

Adapters give callers a stable interface; behind them ``get_base_repository``
picks the implementation, which is always the backend API now that local
storage has been removed.
"""

from .adapters import (
    KnowledgeRepositoryAdapter,
    MessageRepositoryAdapter,
    PresetRepositoryAdapter,
    SessionRepositoryAdapter,
    SummaryRepositoryAdapter,
    TranscriptRepositoryAdapter,
    UserRepositoryAdapter,
    get_backend_client,
    get_base_repository,
    knowledge_repository,
    message_repository,
    preset_repository,
    session_repository,
    summary_repository,
    transcript_repository,
    user_repository,
)
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

__all__ = [
    "BackendAPIClient",
    "KnowledgeRepository",
    "KnowledgeRepositoryAdapter",
    "MessageRepository",
    "MessageRepositoryAdapter",
    "PresetRepository",
    "PresetRepositoryAdapter",
    "SessionRepository",
    "SessionRepositoryAdapter",
    "SummaryRepository",
    "SummaryRepositoryAdapter",
    "TranscriptRepository",
    "TranscriptRepositoryAdapter",
    "UNSET",
    "UserRepository",
    "UserRepositoryAdapter",
    "get_backend_client",
    "get_base_repository",
    "knowledge_repository",
    "message_repository",
    "preset_repository",
    "session_repository",
    "summary_repository",
    "transcript_repository",
    "user_repository",
]
