"""
Shared test fixtures and configuration for pytest.

Provides:
- Environment defaults (set before xerus_bridge is imported)
- A file-backed SQLite engine per test
- An auth context with a signed-in user
- An in-memory knowledge backend served through httpx.MockTransport
"""
import json
import os

import httpx
import pytest

# Set required environment variables for tests before settings are loaded
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SKIP_CONFIG_VALIDATION", "true")
os.environ.setdefault("API_BASE_URL", "http://backend.test/api")
os.environ.setdefault("BACKEND_TOKEN", "test-backend-token")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from xerus_bridge.auth import AuthContext
from xerus_bridge.database import build_engine
from xerus_bridge.repositories import BackendAPIClient

TEST_API_URL = "http://backend.test/api/v1"
TEST_USER_ID = "user-123"


@pytest.fixture
def sqlite_engine(tmp_path):
    """
    Fresh SQLite database file for each test.

    A file rather than :memory: so every pooled connection sees the same data.
    """
    engine = build_engine(f"sqlite:///{tmp_path / 'test.db'}", production=False)
    yield engine
    engine.dispose()


@pytest.fixture
def auth():
    """Auth context with TEST_USER_ID signed in."""
    context = AuthContext()
    context.sign_in(TEST_USER_ID, email="user@example.com")
    return context


class FakeKnowledgeBackend:
    """
    Minimal stand-in for the backend knowledge endpoints.

    Holds documents and folders in memory and records every request so tests
    can inspect paths, headers and query strings.
    """

    def __init__(self):
        self.documents = {
            "doc-1": {"id": "doc-1", "title": "Meeting notes", "content": "...", "folder_id": None},
            "doc-2": {"id": "doc-2", "title": "Roadmap", "content": "...", "folder_id": "folder-b"},
        }
        self.folders = {
            "folder-a": {"id": "folder-a", "name": "Projects", "parent_id": None},
            "folder-b": {"id": "folder-b", "name": "Archive", "parent_id": None},
        }
        self.requests: list[httpx.Request] = []

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/api/v1/")
        parts = path.split("/")

        if request.method == "GET" and path == "knowledge":
            folder_id = request.url.params.get("folder_id")
            documents = list(self.documents.values())
            if folder_id == "null":
                documents = [d for d in documents if d["folder_id"] is None]
            elif folder_id is not None:
                documents = [d for d in documents if d["folder_id"] == folder_id]
            return httpx.Response(200, json=documents)

        if request.method == "GET" and path == "knowledge/folders":
            return httpx.Response(200, json=list(self.folders.values()))

        if request.method == "POST" and len(parts) == 3 and parts[0] == "knowledge" and parts[2] == "move":
            document = self.documents.get(parts[1])
            if document is None:
                return httpx.Response(404, json={"error": "Document not found"})
            folder_id = json.loads(request.content)["folder_id"]
            if folder_id is not None and folder_id not in self.folders:
                return httpx.Response(400, json={"error": "Folder not found"})
            document["folder_id"] = folder_id
            return httpx.Response(200, json=document)

        if request.method == "GET" and len(parts) == 2 and parts[0] == "knowledge":
            document = self.documents.get(parts[1])
            if document is None:
                return httpx.Response(404, json={"error": "Document not found"})
            return httpx.Response(200, json=document)

        return httpx.Response(404, json={"error": "Not found"})


@pytest.fixture
def knowledge_backend():
    return FakeKnowledgeBackend()


@pytest.fixture
async def backend_client(knowledge_backend):
    """BackendAPIClient wired to the in-memory knowledge backend."""
    client = BackendAPIClient(
        base_url=TEST_API_URL,
        token="test-token",
        transport=httpx.MockTransport(knowledge_backend.handle),
    )
    yield client
    await client.aclose()
