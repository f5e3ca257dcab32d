"""
Local-storage repositories - REMOVED.

This functionality has been migrated to backend API endpoints. The classes
keep the old operation names so any remaining caller fails loudly with
RepositoryRemovedError instead of silently reading stale local data. Every
operation accepts any arguments: an outdated call shape still gets the
removal error, never a TypeError. Delete this module once nothing
references it.
"""

from typing import Any

from ..errors import RepositoryRemovedError
from .base import (
    MessageRepository,
    PresetRepository,
    SessionRepository,
    SummaryRepository,
    TranscriptRepository,
    UserRepository,
)


def _removed(name: str):
    async def operation(self, *args: Any, **kwargs: Any) -> Any:
        raise RepositoryRemovedError()

    operation.__name__ = operation.__qualname__ = name
    return operation


class RemovedSessionRepository(SessionRepository):
    get_by_id = _removed("get_by_id")
    create = _removed("create")
    get_all_by_user_id = _removed("get_all_by_user_id")
    update_title = _removed("update_title")
    delete_with_related_data = _removed("delete_with_related_data")
    end = _removed("end")
    update_type = _removed("update_type")
    touch = _removed("touch")
    get_or_create_active = _removed("get_or_create_active")
    end_all_active_sessions = _removed("end_all_active_sessions")


class RemovedMessageRepository(MessageRepository):
    add_ai_message = _removed("add_ai_message")
    get_all_ai_messages_by_session_id = _removed("get_all_ai_messages_by_session_id")


class RemovedUserRepository(UserRepository):
    find_or_create = _removed("find_or_create")
    get_by_id = _removed("get_by_id")
    update = _removed("update")
    set_migration_complete = _removed("set_migration_complete")
    delete_by_id = _removed("delete_by_id")


class RemovedPresetRepository(PresetRepository):
    get_presets = _removed("get_presets")
    get_preset_templates = _removed("get_preset_templates")
    create = _removed("create")
    update = _removed("update")
    delete = _removed("delete")


class RemovedTranscriptRepository(TranscriptRepository):
    add_transcript = _removed("add_transcript")
    get_all_transcripts_by_session_id = _removed("get_all_transcripts_by_session_id")


class RemovedSummaryRepository(SummaryRepository):
    save_summary = _removed("save_summary")
    get_summary_by_session_id = _removed("get_summary_by_session_id")


# The stores below never moved to the backend API; they have no capability set.


class RemovedSettingsRepository:
    get_presets = _removed("get_presets")
    get_preset_templates = _removed("get_preset_templates")
    create_preset = _removed("create_preset")
    update_preset = _removed("update_preset")
    delete_preset = _removed("delete_preset")
    get_auto_update = _removed("get_auto_update")
    set_auto_update = _removed("set_auto_update")


class RemovedShortcutsRepository:
    get_all_keybinds = _removed("get_all_keybinds")
    upsert_keybinds = _removed("upsert_keybinds")


class RemovedPermissionRepository:
    mark_permissions_as_completed = _removed("mark_permissions_as_completed")
    check_permissions_completed = _removed("check_permissions_completed")


class RemovedOllamaModelRepository:
    get_all_models = _removed("get_all_models")
    get_model = _removed("get_model")
    upsert_model = _removed("upsert_model")
    update_install_status = _removed("update_install_status")
    initialize_default_models = _removed("initialize_default_models")
    delete_model = _removed("delete_model")
    get_installed_models = _removed("get_installed_models")
    get_installing_models = _removed("get_installing_models")


class RemovedUserModelSelectionsRepository:
    get = _removed("get")
    upsert = _removed("upsert")
    remove = _removed("remove")


class RemovedProviderSettingsRepository:
    get_by_provider = _removed("get_by_provider")
    get_all_by_uid = _removed("get_all_by_uid")
    upsert = _removed("upsert")
    remove = _removed("remove")
    remove_all_by_uid = _removed("remove_all_by_uid")


REMOVED_REPOSITORIES = (
    RemovedSessionRepository,
    RemovedMessageRepository,
    RemovedUserRepository,
    RemovedPresetRepository,
    RemovedTranscriptRepository,
    RemovedSummaryRepository,
    RemovedSettingsRepository,
    RemovedShortcutsRepository,
    RemovedPermissionRepository,
    RemovedOllamaModelRepository,
    RemovedUserModelSelectionsRepository,
    RemovedProviderSettingsRepository,
)
