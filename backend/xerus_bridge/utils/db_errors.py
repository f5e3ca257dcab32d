"""
Centralized database error classification for PostgreSQL (psycopg2) and SQLite errors.
"""

from dataclasses import dataclass

from sqlalchemy.exc import DBAPIError

from ..config.constants import DUPLICATE_COLUMN, DUPLICATE_TABLE


@dataclass
class ClassifiedDBError:
    """Parsed error information from a database exception."""

    message: str
    code: str | None
    detail: str | None
    hint: str | None
    is_duplicate_column: bool
    is_duplicate_table: bool
    original_exception: Exception


def classify_db_error(exception: Exception) -> ClassifiedDBError:
    """
    Extract structured error information from a database exception.

    Handles SQLAlchemy-wrapped DBAPI errors (unwrapping ``.orig``) as well as raw
    driver exceptions. psycopg2 exposes the SQLSTATE as ``pgcode`` and the
    server diagnostics on ``diag``; SQLite only gives a message.
    """
    orig = exception.orig if isinstance(exception, DBAPIError) and exception.orig is not None else exception

    code: str | None = getattr(orig, "pgcode", None) or getattr(orig, "code", None)
    if code is not None and not isinstance(code, str):
        code = str(code)

    detail: str | None = None
    hint: str | None = None
    diag = getattr(orig, "diag", None)
    if diag is not None:
        detail = getattr(diag, "message_detail", None)
        hint = getattr(diag, "message_hint", None)

    primary = getattr(diag, "message_primary", None) if diag is not None else None
    message = primary or str(orig).strip() or type(orig).__name__

    lowered = message.lower()
    is_duplicate_column = code == DUPLICATE_COLUMN or "duplicate column name" in lowered
    is_duplicate_table = code == DUPLICATE_TABLE or (
        "table" in lowered and "already exists" in lowered and not is_duplicate_column
    )

    return ClassifiedDBError(
        message=message,
        code=code,
        detail=detail,
        hint=hint,
        is_duplicate_column=is_duplicate_column,
        is_duplicate_table=is_duplicate_table,
        original_exception=exception,
    )
