#!/usr/bin/env python3
"""
Create the users, conversations and messages tables and seed the default users.

A conversation belongs to one user and a message to one conversation;
message roles are limited to user, assistant and system. Seed users are
upserted, so re-running refreshes them instead of failing.

PostgreSQL only (uses gen_random_uuid and JSONB).
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

# Add backend directory to path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

from sqlalchemy import text
from sqlalchemy.engine import Engine

from scripts.script_helpers import banner, configure_logging, report_failure
from xerus_bridge.database import build_engine, connect, dispose_engine

SCHEMA = [
    (
        "users",
        """
        CREATE TABLE IF NOT EXISTS users (
            id VARCHAR(255) PRIMARY KEY,
            email VARCHAR(255) UNIQUE NOT NULL,
            display_name VARCHAR(255),
            role VARCHAR(50) DEFAULT 'user',
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
        """,
    ),
    (
        "conversations",
        """
        CREATE TABLE IF NOT EXISTS conversations (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            user_id VARCHAR(255) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            title VARCHAR(500) NOT NULL,
            agent_type VARCHAR(100) DEFAULT 'general',
            metadata JSONB DEFAULT '{}',
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
        """,
    ),
    (
        "messages",
        """
        CREATE TABLE IF NOT EXISTS messages (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            conversation_id UUID NOT NULL REFERENCES conversations(id) ON DELETE CASCADE,
            role VARCHAR(50) NOT NULL CHECK (role IN ('user', 'assistant', 'system')),
            content TEXT NOT NULL,
            agent_config JSONB DEFAULT '{}',
            tool_calls JSONB DEFAULT '[]',
            processing_time INTEGER,
            token_count INTEGER,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
        """,
    ),
]

INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_conversations_user_id ON conversations(user_id)",
    "CREATE INDEX IF NOT EXISTS idx_messages_conversation_id ON messages(conversation_id, created_at)",
]

SEED_USERS = [
    {"id": "assistant@xerus", "email": "assistant@xerus.ai", "display_name": "Test Assistant", "role": "admin"},
    {"id": "admin_user", "email": "admin@xerus.ai", "display_name": "Admin User", "role": "admin"},
]

UPSERT_USER = text(
    """
    INSERT INTO users (id, email, display_name, role)
    VALUES (:id, :email, :display_name, :role)
    ON CONFLICT (id) DO UPDATE SET
        email = EXCLUDED.email,
        display_name = EXCLUDED.display_name,
        role = EXCLUDED.role,
        updated_at = CURRENT_TIMESTAMP
    """
)


def setup_schema(engine: Optional[Engine] = None) -> None:
    with connect(engine) as conn:
        print("[TOOL] Setting up conversations schema...")
        for table, ddl in SCHEMA:
            conn.execute(text(ddl))
            print(f"[OK] {table.capitalize()} table created")
        for ddl in INDEXES:
            conn.execute(text(ddl))
        print("[OK] Indexes created")

        for user in SEED_USERS:
            conn.execute(UPSERT_USER, user)
            print(f"[OK] User {user['id']} created/updated")
        conn.commit()

    print("\n[SUCCESS] Database schema setup complete!")


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Create conversation tables and seed users")
    parser.add_argument("--database-url", help="Override DATABASE_URL")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    banner("Conversations Schema Setup")

    engine = build_engine(args.database_url) if args.database_url else None
    try:
        setup_schema(engine)
    except Exception as e:
        return report_failure(e)
    finally:
        if engine is not None:
            engine.dispose()
        dispose_engine()
    return 0


if __name__ == "__main__":
    sys.exit(main())
