"""
Migration runner and packaged SQL resources.

SQL files live in ``sql/`` and are ordered by their numeric filename prefix.
"""

from .runner import (
    SQL_DIR,
    MigrationResult,
    MigrationRunner,
    VerificationQuery,
    add_column,
    columns_of,
    count_by,
    indexes_of,
    render_table,
    routines_named,
    split_statements,
    table_exists,
)

__all__ = [
    "SQL_DIR",
    "MigrationResult",
    "MigrationRunner",
    "VerificationQuery",
    "add_column",
    "columns_of",
    "count_by",
    "indexes_of",
    "render_table",
    "routines_named",
    "split_statements",
    "table_exists",
]
