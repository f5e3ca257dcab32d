#!/usr/bin/env python3
"""
Exercise knowledge document moves against the running backend API.

Moves the first document into the first folder, checks the folder listing,
then moves it back to the root (folder_id null) and checks that it left the
folder and shows up unfiled. Needs at least one document and one folder
for the given user.
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional

# Add backend directory to path
backend_dir = Path(__file__).parent.parent.parent
sys.path.insert(0, str(backend_dir))

from scripts.script_helpers import banner, configure_logging
from xerus_bridge.auth import get_auth_context
from xerus_bridge.errors import BridgeError
from xerus_bridge.repositories import BackendAPIClient, KnowledgeRepositoryAdapter

DEFAULT_USER = "admin_user"


def _ids(documents: list[dict]) -> set:
    return {doc.get("id") for doc in documents}


async def check_document_move(repository: KnowledgeRepositoryAdapter, out=print) -> bool:
    """Run the move round trip. Returns False on the first failed check."""
    documents = await repository.list_documents()
    folders = await repository.list_folders()
    out(f"[INFO] {len(documents)} document(s), {len(folders)} folder(s)")
    if not documents or not folders:
        out("[SKIP] Need at least one document and one folder")
        return False

    document, folder = documents[0], folders[0]
    out(f"[INFO] Moving '{document.get('title')}' into '{folder.get('name')}'")

    await repository.move_document(document["id"], folder["id"])
    in_folder = await repository.list_documents(folder["id"])
    if document["id"] not in _ids(in_folder):
        out("[ERROR] Document not found in target folder after move")
        return False
    out("[OK] Document listed in target folder")

    await repository.move_document(document["id"], None)
    in_folder = await repository.list_documents(folder["id"])
    if document["id"] in _ids(in_folder):
        out("[ERROR] Document still listed in folder after moving to root")
        return False

    unfiled = {doc["id"]: doc for doc in await repository.list_documents()}
    moved = unfiled.get(document["id"])
    if moved is None or moved.get("folder_id") is not None:
        out("[ERROR] Document not at root after moving back")
        return False
    out("[OK] Document moved back to root")
    return True


async def _run(user_id: str) -> int:
    auth = get_auth_context()
    auth.sign_in(user_id)
    try:
        async with BackendAPIClient() as client:
            repository = KnowledgeRepositoryAdapter(client=client, auth=auth)
            return 0 if await check_document_move(repository) else 1
    except BridgeError as e:
        print(f"[ERROR] {e}")
        return 1
    finally:
        auth.sign_out()


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Check knowledge document moves")
    parser.add_argument("--user-id", default=DEFAULT_USER)
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    banner("Document Move Check")
    return asyncio.run(_run(args.user_id))


if __name__ == "__main__":
    sys.exit(main())
