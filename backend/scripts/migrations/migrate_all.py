#!/usr/bin/env python3
"""
Run every packaged SQL migration in filename order.

There is no record of applied migrations; every file runs each time, so each
must be idempotent. The first failure stops the run with exit status 1.
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
from xerus_bridge.migrations import SQL_DIR, MigrationRunner


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Run all SQL migrations in order")
    parser.add_argument("--directory", type=Path, default=SQL_DIR, help="Directory of *.sql files")
    parser.add_argument("--database-url", help="Override DATABASE_URL")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    banner("[START] Starting database migrations...")

    engine = build_engine(args.database_url) if args.database_url else None
    try:
        results = MigrationRunner(engine, sql_dir=args.directory).run_all(args.directory)
    except Exception as e:
        print("[ERROR] Migration process failed")
        return report_failure(e)
    finally:
        if engine is not None:
            engine.dispose()
        dispose_engine()

    skipped = sum(len(r.skipped) for r in results)
    print(f"\n[SUCCESS] All {len(results)} migration(s) completed successfully!")
    if skipped:
        print(f"[INFO]  {skipped} statement(s) skipped because the column already existed")
    return 0


if __name__ == "__main__":
    sys.exit(main())
