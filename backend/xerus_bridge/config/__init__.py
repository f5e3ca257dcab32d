"""
Configuration module.

This module provides a centralized configuration system with:
- Settings: Environment-based configuration using Pydantic Settings v2
- Constants: Error codes, icon tables, repository messages
- Validation: Configuration validation functions

Example:
    from xerus_bridge.config import settings, DUPLICATE_COLUMN
"""

from .settings import settings, Settings

from .constants import (
    DUPLICATE_COLUMN,
    DUPLICATE_TABLE,
    UNDEFINED_TABLE,
    REMOVED_REPOSITORY_MESSAGE,
    MESSAGE_ROLES,
    DEFAULT_SESSION_TYPE,
    ICON_CONTENT_TYPES,
    DEFAULT_ICON_CONTENT_TYPE,
    KNOWN_ICON_NAMES,
    ICON_PROXY_PATH,
    TOOL_ICON_FILES,
)

from .validation import (
    validate_config,
    log_configuration,
    mask_secret,
    mask_database_url,
)

__all__ = [
    # Settings
    "settings",
    "Settings",
    # Constants
    "DUPLICATE_COLUMN",
    "DUPLICATE_TABLE",
    "UNDEFINED_TABLE",
    "REMOVED_REPOSITORY_MESSAGE",
    "MESSAGE_ROLES",
    "DEFAULT_SESSION_TYPE",
    "ICON_CONTENT_TYPES",
    "DEFAULT_ICON_CONTENT_TYPE",
    "KNOWN_ICON_NAMES",
    "ICON_PROXY_PATH",
    "TOOL_ICON_FILES",
    # Validation
    "validate_config",
    "log_configuration",
    "mask_secret",
    "mask_database_url",
]
