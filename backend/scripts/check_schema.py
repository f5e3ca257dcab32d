#!/usr/bin/env python3
"""
Print the column layout of one or more tables, plus the configured tool icons.

Read-only. Exits 1 if a table does not exist or a query fails.
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

# Add backend directory to path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

from scripts.script_helpers import banner, configure_logging, report_failure
from xerus_bridge.database import build_engine, connect, dispose_engine
from xerus_bridge.migrations import MigrationRunner, VerificationQuery, columns_of

DEFAULT_TABLES = ["tool_configurations", "users"]


def tool_icons() -> VerificationQuery:
    return VerificationQuery(
        title="Existing tools",
        statement="SELECT tool_name, icon FROM tool_configurations ORDER BY tool_name",
        formatter=lambda row: f"  {row['tool_name']}: {row['icon'] or 'No icon'}",
    )


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Show table schemas")
    parser.add_argument("tables", nargs="*", default=DEFAULT_TABLES)
    parser.add_argument("--no-tools", action="store_true", help="Skip the tool icon listing")
    parser.add_argument("--database-url", help="Override DATABASE_URL")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    banner("Schema Check")

    engine = build_engine(args.database_url) if args.database_url else None
    runner = MigrationRunner(engine)
    queries = [columns_of(table) for table in args.tables]
    if not args.no_tools and "tool_configurations" in args.tables:
        queries.append(tool_icons())

    try:
        with connect(engine) as conn:
            runner.verify(conn, queries)
    except Exception as e:
        return report_failure(e)
    finally:
        if engine is not None:
            engine.dispose()
        dispose_engine()
    return 0


if __name__ == "__main__":
    sys.exit(main())
