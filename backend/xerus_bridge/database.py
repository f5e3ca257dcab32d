"""
Database engine and connection management.

Sets up a pooled SQLAlchemy engine for the managed PostgreSQL instance.
SSL is required only in production. SQLite URLs are accepted for local
development and tests.
"""

import logging
from collections.abc import Generator
from contextlib import contextmanager
from typing import Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.pool import NullPool

from .config import settings
from .config.validation import mask_database_url

logger = logging.getLogger(__name__)

_engine: Optional[Engine] = None


def build_engine(database_url: Optional[str] = None, production: Optional[bool] = None) -> Engine:
    """
    Create an engine for ``database_url`` (defaults to settings).

    Args:
        database_url: SQLAlchemy URL; postgres:// is normalised to postgresql://
        production: Require SSL; defaults to ``settings.is_production``
    """
    url = database_url or settings.database_url
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    production = settings.is_production if production is None else production

    logger.info(f"[DB] Using database: {mask_database_url(url)}")

    if url.startswith("postgresql"):
        connect_args = {"connect_timeout": 10}
        if production:
            connect_args["sslmode"] = "require"
        return create_engine(
            url,
            pool_size=5,  # Scripts hold one connection at a time
            max_overflow=5,
            pool_pre_ping=True,
            pool_recycle=3600,
            pool_timeout=30,
            connect_args=connect_args,
        )

    if url.startswith("sqlite"):
        engine = create_engine(
            url,
            connect_args={"check_same_thread": False, "timeout": 20.0},
            poolclass=NullPool,
        )

        @event.listens_for(engine, "connect")
        def set_sqlite_pragma(dbapi_conn, connection_record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    return create_engine(url, pool_pre_ping=True)


def get_engine() -> Engine:
    """Return the process-wide engine, creating it on first use."""
    global _engine
    if _engine is None:
        _engine = build_engine()
    return _engine


def dispose_engine() -> None:
    """Close all pooled connections and forget the engine."""
    global _engine
    if _engine is not None:
        _engine.dispose()
        _engine = None


@contextmanager
def connect(engine: Optional[Engine] = None) -> Generator[Connection, None, None]:
    """
    Acquire one connection and always release it.

    Usage:
        with connect() as conn:
            conn.execute(text("SELECT 1"))
    """
    engine = engine or get_engine()
    conn = engine.connect()
    try:
        yield conn
    finally:
        conn.close()
