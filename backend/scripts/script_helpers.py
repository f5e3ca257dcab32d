#!/usr/bin/env python3
"""
Helper functions shared by the operator scripts.

Console banners, logging setup, and the fatal-error policy: print the
message with its structured fields and return exit status 1.
"""

import logging
from collections.abc import Callable

from sqlalchemy.exc import SQLAlchemyError

from xerus_bridge.errors import MigrationError
from xerus_bridge.utils.db_errors import classify_db_error


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def banner(title: str, out: Callable[[str], None] = print) -> None:
    out(f"\n{'=' * 60}")
    out(title)
    out(f"{'=' * 60}\n")


def report_failure(error: Exception, out: Callable[[str], None] = print) -> int:
    """
    Print a fatal error and return the exit status for it.

    MigrationError and database errors are printed with code, detail and hint
    when the driver provided them.
    """
    if isinstance(error, MigrationError):
        lines = error.describe()
    elif isinstance(error, SQLAlchemyError):
        classified = classify_db_error(error)
        lines = MigrationError(
            classified.message, code=classified.code, detail=classified.detail, hint=classified.hint
        ).describe()
    else:
        lines = [f"[ERROR] {type(error).__name__}: {error}"]

    for line in lines:
        out(line)
    return 1
