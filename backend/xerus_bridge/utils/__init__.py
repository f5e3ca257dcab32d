"""Shared helpers."""

from .db_errors import ClassifiedDBError, classify_db_error

__all__ = ["ClassifiedDBError", "classify_db_error"]
