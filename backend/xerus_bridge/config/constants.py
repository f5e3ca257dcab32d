"""
Application constants.

Fixed values shared by the migration scripts, the repository layer
and the icon proxy.
"""

# ============================================================================
# DATABASE ERROR CODES (PostgreSQL SQLSTATE)
# ============================================================================

DUPLICATE_COLUMN = "42701"
DUPLICATE_TABLE = "42P07"
UNDEFINED_TABLE = "42P01"

# ============================================================================
# REPOSITORIES
# ============================================================================

REMOVED_REPOSITORY_MESSAGE = (
    "SQLite repository has been removed. Use backend API endpoints instead."
)

MESSAGE_ROLES = ("user", "assistant", "system")

DEFAULT_SESSION_TYPE = "ask"

# ============================================================================
# ICON PROXY
# ============================================================================

ICON_CONTENT_TYPES = {
    ".svg": "image/svg+xml",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
}
DEFAULT_ICON_CONTENT_TYPE = "image/png"

# Icon files that must be resolvable for static export
KNOWN_ICON_NAMES = [
    "gmail_new_logo_icon.png",
    "GitHub-logo-768x432.png",
    "weather_logo.png",
    "Google-Calendar-Logo.png",
    "atlassian-logo.png",
    "firecrawl_logo.png",
    "tavily-color.png",
]

ICON_PROXY_PATH = "/api/tools/icons"

# tool_name -> icon file served by the backend
TOOL_ICON_FILES = {
    "firecrawl": "firecrawl_logo.png",
    "web_search": "tavily-color.png",
    "google_calendar": "Google-Calendar-Logo.png",
    "github-remote": "GitHub-logo-768x432.png",
    "gmail-remote": "gmail_new_logo_icon.png",
    "weather-remote": "weather_logo.png",
    "atlassian-remote": "atlassian-logo.png",
}
