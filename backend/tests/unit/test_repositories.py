"""
Unit tests for the repository layer.

Covers:
- Removed local-storage repositories failing on every operation
- Adapter identity injection and delegation
- Backend implementation selection and response shaping
"""
import inspect
from unittest.mock import AsyncMock, MagicMock

import pytest

from xerus_bridge.auth import AuthContext
from xerus_bridge.errors import BackendAPIError, NotAuthenticatedError, RepositoryRemovedError
from xerus_bridge.repositories import (
    UNSET,
    KnowledgeRepositoryAdapter,
    MessageRepositoryAdapter,
    PresetRepositoryAdapter,
    SessionRepositoryAdapter,
    SummaryRepositoryAdapter,
    TranscriptRepositoryAdapter,
    UserRepositoryAdapter,
    get_base_repository,
)
from xerus_bridge.repositories.backend import (
    BackendKnowledgeRepository,
    BackendMessageRepository,
    BackendPresetRepository,
    BackendSessionRepository,
    BackendSummaryRepository,
    BackendTranscriptRepository,
    BackendUserRepository,
    conversation_to_session,
)
from xerus_bridge.repositories.removed import (
    REMOVED_REPOSITORIES,
    RemovedOllamaModelRepository,
    RemovedPermissionRepository,
    RemovedPresetRepository,
    RemovedProviderSettingsRepository,
    RemovedSessionRepository,
    RemovedSettingsRepository,
    RemovedShortcutsRepository,
    RemovedSummaryRepository,
    RemovedTranscriptRepository,
    RemovedUserModelSelectionsRepository,
)

USER_ID = "user-123"


# No arguments, the old positional shape, and an options object plus extras
CALL_SHAPES = [
    ((), {}),
    (("x", "y", "z"), {}),
    (({"uid": "u", "title": "t", "prompt": "p"}, "extra"), {"unexpected": True}),
]


def removed_operations():
    for repository_class in REMOVED_REPOSITORIES:
        for name, method in inspect.getmembers(repository_class(), inspect.iscoroutinefunction):
            if not name.startswith("_"):
                yield pytest.param(method, id=f"{repository_class.__name__}.{name}")


def mock_repository():
    """Delegate double whose async methods record their arguments."""
    repository = MagicMock()
    for name in (
        "create",
        "get_all_by_user_id",
        "get_by_id",
        "get_or_create_active",
        "end_all_active_sessions",
        "touch",
        "add_ai_message",
        "get_presets",
        "update",
        "delete",
        "list_documents",
        "move_document",
        "list_folders",
        "add_transcript",
        "get_all_transcripts_by_session_id",
        "save_summary",
    ):
        setattr(repository, name, AsyncMock(return_value={"ok": True}))
    return repository


@pytest.mark.unit
class TestRemovedRepositories:
    @pytest.mark.parametrize("method", list(removed_operations()))
    @pytest.mark.parametrize("args, kwargs", CALL_SHAPES, ids=["no-args", "positional", "options-and-extras"])
    async def test_every_operation_raises(self, method, args, kwargs):
        with pytest.raises(RepositoryRemovedError) as exc_info:
            await method(*args, **kwargs)
        message = str(exc_info.value)
        assert "removed" in message
        assert "backend API" in message

    async def test_outdated_call_shapes_still_report_removal(self):
        with pytest.raises(RepositoryRemovedError):
            await RemovedSessionRepository().get_by_id()
        with pytest.raises(RepositoryRemovedError):
            await RemovedPresetRepository().create({"uid": "u", "title": "t", "prompt": "p"})

    def test_removed_repositories_cover_all_operations(self):
        for repository_class in REMOVED_REPOSITORIES:
            assert not inspect.isabstract(repository_class)

    @pytest.mark.parametrize(
        "repository_class, operations",
        [
            (RemovedTranscriptRepository, {"add_transcript", "get_all_transcripts_by_session_id"}),
            (RemovedSummaryRepository, {"save_summary", "get_summary_by_session_id"}),
            (RemovedShortcutsRepository, {"get_all_keybinds", "upsert_keybinds"}),
            (RemovedPermissionRepository, {"mark_permissions_as_completed", "check_permissions_completed"}),
            (RemovedUserModelSelectionsRepository, {"get", "upsert", "remove"}),
            (
                RemovedProviderSettingsRepository,
                {"get_by_provider", "get_all_by_uid", "upsert", "remove", "remove_all_by_uid"},
            ),
        ],
    )
    def test_retired_stores_keep_their_operation_names(self, repository_class, operations):
        names = {
            name
            for name, _ in inspect.getmembers(repository_class(), inspect.iscoroutinefunction)
            if not name.startswith("_")
        }
        assert names == operations

    def test_ollama_and_settings_tombstones(self):
        ollama = {name for name, _ in inspect.getmembers(RemovedOllamaModelRepository(), inspect.iscoroutinefunction)}
        settings = {name for name, _ in inspect.getmembers(RemovedSettingsRepository(), inspect.iscoroutinefunction)}
        assert len(ollama) == 8
        assert {"get_installed_models", "update_install_status"} <= ollama
        assert {"get_auto_update", "set_auto_update", "create_preset"} <= settings


@pytest.mark.unit
class TestBaseRepositoryResolution:
    @pytest.mark.parametrize(
        "kind, expected",
        [
            ("session", BackendSessionRepository),
            ("message", BackendMessageRepository),
            ("user", BackendUserRepository),
            ("preset", BackendPresetRepository),
            ("knowledge", BackendKnowledgeRepository),
            ("stt", BackendTranscriptRepository),
            ("summary", BackendSummaryRepository),
        ],
    )
    def test_always_backend(self, kind, expected):
        client = MagicMock()
        repository = get_base_repository(kind, client)
        assert isinstance(repository, expected)
        assert repository.client is client

    def test_unknown_kind(self):
        with pytest.raises(ValueError, match="Unknown repository kind"):
            get_base_repository("sqlite", MagicMock())


@pytest.mark.unit
class TestSessionAdapter:
    async def test_create_injects_current_user(self, auth):
        repository = mock_repository()
        adapter = SessionRepositoryAdapter(auth=auth, resolver=lambda: repository)

        await adapter.create("listen")

        repository.create.assert_awaited_once_with(USER_ID, "listen")

    async def test_uid_read_at_call_time(self):
        auth = AuthContext()
        repository = mock_repository()
        adapter = SessionRepositoryAdapter(auth=auth, resolver=lambda: repository)

        auth.sign_in("first")
        await adapter.get_all_by_user_id()
        auth.sign_in("second")
        await adapter.get_all_by_user_id()

        calls = [c.args for c in repository.get_all_by_user_id.await_args_list]
        assert calls == [("first",), ("second",)]

    async def test_id_operations_pass_through(self, auth):
        repository = mock_repository()
        adapter = SessionRepositoryAdapter(auth=auth, resolver=lambda: repository)

        await adapter.get_by_id("s-1")
        await adapter.touch("s-1")

        repository.get_by_id.assert_awaited_once_with("s-1")
        repository.touch.assert_awaited_once_with("s-1")

    async def test_user_scoped_calls_without_user_fail(self):
        repository = mock_repository()
        adapter = SessionRepositoryAdapter(auth=AuthContext(), resolver=lambda: repository)

        with pytest.raises(NotAuthenticatedError):
            await adapter.get_or_create_active("ask")
        repository.get_or_create_active.assert_not_called()

    async def test_delegate_errors_propagate(self, auth):
        repository = mock_repository()
        repository.end_all_active_sessions.side_effect = BackendAPIError(503, "Service Unavailable")
        adapter = SessionRepositoryAdapter(auth=auth, resolver=lambda: repository)

        with pytest.raises(BackendAPIError) as exc_info:
            await adapter.end_all_active_sessions()
        assert exc_info.value.status_code == 503


@pytest.mark.unit
class TestOtherAdapters:
    async def test_message_adapter_injects_uid_and_reraises(self, auth):
        repository = mock_repository()
        repository.add_ai_message.side_effect = ValueError("Invalid message role 'bot'")
        adapter = MessageRepositoryAdapter(auth=auth, resolver=lambda: repository)

        with pytest.raises(ValueError):
            await adapter.add_ai_message("s-1", "bot", "hi")
        repository.add_ai_message.assert_awaited_once_with(USER_ID, "s-1", "bot", "hi", "unknown")

    async def test_user_adapter(self, auth):
        repository = mock_repository()
        adapter = UserRepositoryAdapter(auth=auth, resolver=lambda: repository)

        await adapter.get_by_id()
        await adapter.update(display_name="New")

        repository.get_by_id.assert_awaited_once_with(USER_ID)
        repository.update.assert_awaited_once_with(USER_ID, display_name="New")

    async def test_preset_adapter_argument_order(self, auth):
        repository = mock_repository()
        adapter = PresetRepositoryAdapter(auth=auth, resolver=lambda: repository)

        await adapter.get_presets()
        await adapter.update("p-1", "Title", "Prompt")
        await adapter.delete("p-1")

        repository.get_presets.assert_awaited_once_with(USER_ID)
        repository.update.assert_awaited_once_with("p-1", USER_ID, "Title", "Prompt")
        repository.delete.assert_awaited_once_with("p-1", USER_ID)

    async def test_knowledge_adapter(self, auth):
        repository = mock_repository()
        adapter = KnowledgeRepositoryAdapter(auth=auth, resolver=lambda: repository)

        await adapter.list_documents()
        await adapter.list_documents(None)
        await adapter.move_document("doc-1", None)
        await adapter.list_folders()

        assert [c.args for c in repository.list_documents.await_args_list] == [
            (USER_ID, UNSET),
            (USER_ID, None),
        ]
        repository.move_document.assert_awaited_once_with("doc-1", USER_ID, None)
        repository.list_folders.assert_awaited_once_with(USER_ID, None)

    async def test_transcript_adapter(self, auth):
        repository = mock_repository()
        adapter = TranscriptRepositoryAdapter(auth=auth, resolver=lambda: repository)

        await adapter.add_transcript("s-1", "Me", "hello there")
        await adapter.get_all_transcripts_by_session_id("s-1")

        repository.add_transcript.assert_awaited_once_with(USER_ID, "s-1", "Me", "hello there")
        repository.get_all_transcripts_by_session_id.assert_awaited_once_with("s-1")

    async def test_summary_adapter_injects_uid(self, auth):
        repository = mock_repository()
        adapter = SummaryRepositoryAdapter(auth=auth, resolver=lambda: repository)

        await adapter.save_summary("s-1", "short", "long", ["b"], ["a"])

        repository.save_summary.assert_awaited_once_with(USER_ID, "s-1", "short", "long", ["b"], ["a"], "unknown")

    async def test_transcript_adapter_requires_user(self):
        repository = mock_repository()
        adapter = TranscriptRepositoryAdapter(auth=AuthContext(), resolver=lambda: repository)

        with pytest.raises(NotAuthenticatedError):
            await adapter.add_transcript("s-1", "Me", "hi")
        repository.add_transcript.assert_not_called()


def backend_client_double():
    client = MagicMock()
    client.get = AsyncMock()
    client.post = AsyncMock()
    client.put = AsyncMock()
    client.delete = AsyncMock()
    return client


@pytest.mark.unit
class TestBackendSessionRepository:
    def test_conversation_to_session(self):
        session = conversation_to_session(
            {
                "id": "c-1",
                "user_id": USER_ID,
                "title": "Chat",
                "agentType": "listen",
                "created_at": 1,
                "updated_at": 2,
                "metadata": {"ended_at": 3},
            }
        )
        assert session["uid"] == USER_ID
        assert session["members"] == [USER_ID]
        assert session["session_type"] == "listen"
        assert session["started_at"] == 1
        assert session["ended_at"] == 3

    async def test_get_or_create_active_creates_when_none_active(self):
        client = backend_client_double()
        client.get.return_value = [{"id": "old", "user_id": USER_ID, "metadata": {"ended_at": 10}}]
        client.post.return_value = {"id": "new"}

        session_id = await BackendSessionRepository(client).get_or_create_active(USER_ID, "listen")

        assert session_id == "new"
        assert client.post.await_args.kwargs["json"]["agentType"] == "listen"

    async def test_get_or_create_active_promotes_ask_to_listen(self):
        client = backend_client_double()
        client.get.return_value = [{"id": "c-1", "user_id": USER_ID, "agentType": "ask", "metadata": {}}]
        client.put.return_value = {"id": "c-1"}

        session_id = await BackendSessionRepository(client).get_or_create_active(USER_ID, "listen")

        assert session_id == "c-1"
        bodies = [c.kwargs["json"] for c in client.put.await_args_list]
        assert bodies[0] == {"metadata": {"session_type": "listen"}}
        assert "last_touched" in bodies[1]["metadata"]

    async def test_touch_missing_session_reports_no_changes(self):
        client = backend_client_double()
        client.put.return_value = None
        assert await BackendSessionRepository(client).touch("gone") == {"changes": 0}

    async def test_end_all_active_sessions(self):
        client = backend_client_double()
        client.get.return_value = [
            {"id": "a", "user_id": USER_ID, "metadata": {}},
            {"id": "b", "user_id": USER_ID, "metadata": {"ended_at": 5}},
            {"id": "c", "user_id": USER_ID, "metadata": {}},
        ]

        result = await BackendSessionRepository(client).end_all_active_sessions(USER_ID)

        assert result == {"changes": 2}
        ended = sorted(c.args[0] for c in client.put.await_args_list)
        assert ended == ["conversations/a", "conversations/c"]


@pytest.mark.unit
class TestBackendMessageRepository:
    async def test_invalid_role_rejected_before_request(self):
        client = backend_client_double()
        with pytest.raises(ValueError, match="Invalid message role"):
            await BackendMessageRepository(client).add_ai_message(USER_ID, "s-1", "bot", "hi")
        client.post.assert_not_called()

    async def test_add_message(self):
        client = backend_client_double()
        client.post.return_value = {"messageId": "m-1"}

        result = await BackendMessageRepository(client).add_ai_message(USER_ID, "s-1", "assistant", "hello", "gpt")

        assert result == {"id": "m-1"}
        assert client.post.await_args.args == ("conversations/s-1/messages",)
        assert client.post.await_args.kwargs["user_id"] == USER_ID
        assert client.post.await_args.kwargs["json"]["model"] == "gpt"


@pytest.mark.unit
class TestBackendListenRepositories:
    async def test_add_transcript(self):
        client = backend_client_double()
        client.post.return_value = {"id": "t-1"}

        result = await BackendTranscriptRepository(client).add_transcript(USER_ID, "s-1", "Them", "hi")

        assert result == {"id": "t-1"}
        assert client.post.await_args.args == ("conversations/s-1/transcripts",)
        assert client.post.await_args.kwargs["json"] == {"speaker": "Them", "text": "hi"}

    async def test_transcripts_default_to_empty_list(self):
        client = backend_client_double()
        client.get.return_value = None
        assert await BackendTranscriptRepository(client).get_all_transcripts_by_session_id("s-1") == []

    async def test_save_summary(self):
        client = backend_client_double()

        result = await BackendSummaryRepository(client).save_summary(USER_ID, "s-1", "tl;dr", "body", [], [], "gpt")

        assert result == {"changes": 1}
        assert client.put.await_args.args == ("conversations/s-1/summary",)
        assert client.put.await_args.kwargs["json"]["model"] == "gpt"

    async def test_missing_summary_is_none(self):
        client = backend_client_double()
        client.get.return_value = None

        assert await BackendSummaryRepository(client).get_summary_by_session_id("s-1") is None
        assert client.get.await_args.kwargs == {"allow_404": True}
