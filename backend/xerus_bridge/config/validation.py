"""
Configuration validation functions.

This module provides validation functions to ensure required settings are
present and well formed before a script or the app starts.
"""

import logging
import os

from .settings import settings

logger = logging.getLogger(__name__)

SUPPORTED_DATABASE_SCHEMES = ("postgresql://", "postgres://", "postgresql+psycopg2://", "sqlite://")


def validate_config() -> None:
    """
    Validate configuration on startup.

    Raises ValueError if required configuration is missing or invalid.

    Can be skipped by setting SKIP_CONFIG_VALIDATION=true environment variable.
    """
    if os.getenv("SKIP_CONFIG_VALIDATION", "false").lower() == "true":
        logger.info("Skipping configuration validation (SKIP_CONFIG_VALIDATION=true)")
        return

    errors: list[str] = []
    warnings: list[str] = []

    if not settings.database_url:
        errors.append("DATABASE_URL environment variable is not set.")
    elif not settings.database_url.startswith(SUPPORTED_DATABASE_SCHEMES):
        errors.append(
            "DATABASE_URL must start with one of: " + ", ".join(SUPPORTED_DATABASE_SCHEMES)
        )

    if not settings.api_base_url.startswith(("http://", "https://")):
        errors.append(f"API_BASE_URL must be an http(s) URL, got: {settings.api_base_url}")

    if not settings.backend_token:
        errors.append("BACKEND_TOKEN environment variable is not set.")
    elif settings.is_production and settings.backend_token == "development_token":
        warnings.append("BACKEND_TOKEN is still the development token in production")

    if settings.environment not in ("development", "production", "test"):
        warnings.append(f"Unknown ENVIRONMENT value: {settings.environment}")

    for warning in warnings:
        logger.warning(f"Configuration warning: {warning}")

    if errors:
        raise ValueError("Configuration errors:\n  - " + "\n  - ".join(errors))


def mask_secret(value: str | None, visible: int = 4) -> str:
    """Mask a secret, keeping only the first few characters."""
    if not value:
        return "<not set>"
    if len(value) <= visible:
        return "****"
    return f"{value[:visible]}****"


def mask_database_url(url: str) -> str:
    """Hide the password part of a database URL."""
    if "@" not in url or "://" not in url:
        return url
    scheme, rest = url.split("://", 1)
    credentials, host = rest.rsplit("@", 1)
    if ":" in credentials:
        user = credentials.split(":", 1)[0]
        return f"{scheme}://{user}:****@{host}"
    return url


def log_configuration() -> None:
    """Log the active configuration with secrets masked."""
    logger.info("Configuration:")
    logger.info(f"  Environment: {settings.environment}")
    logger.info(f"  Database: {mask_database_url(settings.database_url)}")
    logger.info(f"  Backend API: {settings.backend_api_url}")
    logger.info(f"  Backend token: {mask_secret(settings.backend_token)}")
    logger.info(f"  Deepgram key: {mask_secret(settings.deepgram_api_key, visible=8)}")
    logger.info(f"  Debug: {settings.debug}, perf logs: {settings.perf_logs}")
