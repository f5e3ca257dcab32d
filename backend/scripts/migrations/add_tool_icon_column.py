#!/usr/bin/env python3
"""
Migration script to add the icon column to tool_configurations and fill in icon URLs.

Icons are either absolute backend URLs (default) or relative URLs served by
the frontend icon proxy (--relative).

This script is idempotent - safe to run multiple times. An existing icon
column is reported and skipped, and the update phase always runs.
"""

import argparse
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Optional

# Add backend directory to path
backend_dir = Path(__file__).parent.parent.parent
sys.path.insert(0, str(backend_dir))

from sqlalchemy import text
from sqlalchemy.engine import Engine

from scripts.script_helpers import banner, configure_logging, report_failure
from xerus_bridge.config import ICON_PROXY_PATH, TOOL_ICON_FILES, settings
from xerus_bridge.database import build_engine, connect, dispose_engine
from xerus_bridge.migrations import add_column


def icon_mappings(relative: bool = False, base_url: Optional[str] = None) -> dict[str, str]:
    """tool_name -> icon URL."""
    if relative:
        prefix = ICON_PROXY_PATH
    else:
        prefix = f"{(base_url or settings.backend_api_url).rstrip('/')}/tools/icons"
    return {tool: f"{prefix}/{icon}" for tool, icon in TOOL_ICON_FILES.items()}


def icon_file_name(icon_url: Optional[str]) -> str:
    if not icon_url:
        return "No icon"
    return icon_url[icon_url.rfind("/") + 1 :]


def add_icon_column_and_update(
    engine: Optional[Engine] = None,
    relative: bool = False,
    base_url: Optional[str] = None,
    out: Callable[[str], None] = print,
) -> dict[str, int]:
    """
    Add the icon column, update icon URLs and list the result.

    Returns:
        Rows affected per tool name
    """
    updated: dict[str, int] = {}
    with connect(engine) as conn:
        out("[LOADING] Adding icon column to tool_configurations...")
        add_column(conn, "tool_configurations", "icon", "TEXT", out=out)

        out("\n[LOADING] Updating tool icons...")
        for tool_name, icon_url in icon_mappings(relative, base_url).items():
            result = conn.execute(
                text("UPDATE tool_configurations SET icon = :icon WHERE tool_name = :tool_name"),
                {"icon": icon_url, "tool_name": tool_name},
            )
            updated[tool_name] = result.rowcount
            out(f"[OK] Updated {tool_name}: {result.rowcount} row(s) affected")
        conn.commit()

        out("\n[TASKS] Current tools with icons:")
        tools = conn.execute(text("SELECT tool_name, icon FROM tool_configurations ORDER BY tool_name"))
        for tool in tools.mappings():
            out(f"  {tool['tool_name']}: {icon_file_name(tool['icon'])}")

    out("\n[OK] Icon column added and tools updated successfully!")
    return updated


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Add tool_configurations.icon and set tool icon URLs")
    parser.add_argument("--relative", action="store_true", help="Use relative URLs for the frontend icon proxy")
    parser.add_argument("--base-url", help="Backend API root for absolute icon URLs")
    parser.add_argument("--database-url", help="Override DATABASE_URL")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    banner("Migration: Add Icon Column to tool_configurations")

    engine = build_engine(args.database_url) if args.database_url else None
    try:
        add_icon_column_and_update(engine, relative=args.relative, base_url=args.base_url)
    except Exception as e:
        return report_failure(e)
    finally:
        if engine is not None:
            engine.dispose()
        dispose_engine()
    return 0


if __name__ == "__main__":
    sys.exit(main())
