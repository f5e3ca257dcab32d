#!/usr/bin/env python3
"""
Create the user_credentials table for OAuth token and API key storage.

Each row belongs to exactly one user: created on first link, updated on
token refresh, deleted on unlink. A missing table after the migration is
treated as a failure.
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

# Add backend directory to path
backend_dir = Path(__file__).parent.parent.parent
sys.path.insert(0, str(backend_dir))

from scripts.script_helpers import banner, configure_logging, report_failure
from xerus_bridge.database import build_engine, dispose_engine
from xerus_bridge.migrations import MigrationRunner, columns_of, indexes_of

MIGRATION = "005_create_user_credentials_table.sql"


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Create the user_credentials table")
    parser.add_argument("--database-url", help="Override DATABASE_URL")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    banner("[START] Creating User Credentials Table...")

    engine = build_engine(args.database_url) if args.database_url else None
    try:
        MigrationRunner(engine).run(
            MIGRATION,
            [columns_of("user_credentials"), indexes_of("user_credentials")],
        )
    except Exception as e:
        return report_failure(e)
    finally:
        if engine is not None:
            engine.dispose()
        dispose_engine()

    print("\n[OK] user_credentials table is ready for OAuth token storage!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
