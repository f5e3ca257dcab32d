#!/usr/bin/env python3
"""
Apply one SQL migration and verify it.

Defaults to the agent user isolation migration (004), verified by listing the
new agents columns, the access functions it creates, and agent counts per
agent_type. Any failure, including an empty verification result, exits 1.
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
from xerus_bridge.migrations import (
    MigrationRunner,
    VerificationQuery,
    columns_of,
    count_by,
    routines_named,
)

DEFAULT_MIGRATION = "004_add_user_agent_isolation.sql"


def agent_isolation_checks() -> list[VerificationQuery]:
    return [
        columns_of("agents", ["user_id", "agent_type", "created_by"]),
        routines_named("get_user_agents", "can_user_access_agent"),
        count_by("agents", "agent_type"),
    ]


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Apply a SQL migration and verify the result")
    parser.add_argument("migration", nargs="?", default=DEFAULT_MIGRATION, help="SQL file name or path")
    parser.add_argument(
        "--mode",
        choices=("batch", "statements"),
        default="batch",
        help="Send the file as one batch or statement by statement",
    )
    parser.add_argument("--database-url", help="Override DATABASE_URL")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    banner(f"[START] Migration: {Path(args.migration).name}")

    engine = build_engine(args.database_url) if args.database_url else None
    runner = MigrationRunner(engine)
    checks = agent_isolation_checks() if Path(args.migration).name == DEFAULT_MIGRATION else []

    try:
        runner.run(args.migration, checks, mode=args.mode)
    except Exception as e:
        return report_failure(e)
    finally:
        if engine is not None:
            engine.dispose()
        dispose_engine()

    print("\n[OK] Migration verification completed successfully!")
    if checks:
        print("\nNext steps:")
        print("  1. Restart the backend service")
        print("  2. Create agents as different users")
        print("  3. Verify each user only sees system, shared and their own agents")
    return 0


if __name__ == "__main__":
    sys.exit(main())
