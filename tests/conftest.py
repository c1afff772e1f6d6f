"""
Pytest configuration and shared fixtures for repo-indexer tests.
"""

import hashlib
import json
from pathlib import Path

import httpx
import pytest
from qdrant_client import QdrantClient
from qdrant_client.http.exceptions import UnexpectedResponse

from repo_indexer.config import IndexerSettings
from repo_indexer.core.embeddings import Embedder
from repo_indexer.storage.qdrant import QdrantVectorStore

VECTOR_SIZE = 8


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload or {})

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        return self._payload


class FakeSession:
    """Records POSTs and answers them from a handler or a fixed queue."""

    def __init__(self, handler=None, responses=None):
        self.handler = handler
        self.responses = list(responses or [])
        self.calls = []

    def post(self, url, json=None, timeout=None):
        self.calls.append({"url": url, "json": json, "timeout": timeout})
        if self.handler is not None:
            return self.handler(url, json)
        return self.responses.pop(0)


def hash_vector(text, dim=VECTOR_SIZE):
    digest = hashlib.sha256(text.encode("utf-8")).digest()
    return [b / 255.0 + 0.01 for b in digest[:dim]]


class HashEmbedder(Embedder):
    """Deterministic embedder; optionally rejects texts above a line count."""

    def __init__(self, max_lines=None, fail_on=None):
        self.max_lines = max_lines
        self.fail_on = fail_on
        self.calls = []

    def embed_one(self, text):
        self.calls.append(text)
        if self.fail_on and self.fail_on in text:
            raise RuntimeError("embedding backend exploded")
        if self.max_lines is not None and len(text.split("\n")) > self.max_lines:
            return None
        return hash_vector(text)


def unexpected_response(status, body=b"", reason="Error"):
    """Build the error qdrant-client raises for a non-2xx answer."""
    return UnexpectedResponse(status_code=status, reason_phrase=reason, content=body, headers=httpx.Headers())


def bad_request(_kwargs):
    return unexpected_response(400, b"nope", "Bad Request")


def unavailable(_kwargs):
    return unexpected_response(503, b"overloaded", "Service Unavailable")


class RecordingClient:
    """Wraps a client and records or breaks selected calls.

    ``fail`` maps a method name to a callable taking the call kwargs; a
    returned exception is raised instead of delegating, ``None`` lets the
    call through.
    """

    def __init__(self, client, fail=None):
        self._client = client
        self.fail = fail or {}
        self.calls = []

    def __getattr__(self, name):
        target = getattr(self._client, name)

        def wrapper(*args, **kwargs):
            self.calls.append((name, kwargs))
            if name in self.fail:
                error = self.fail[name](kwargs)
                if error is not None:
                    raise error
            return target(*args, **kwargs)

        return wrapper


@pytest.fixture
def settings():
    """Small windows so tests produce several chunks per file."""
    return IndexerSettings(
        max_chunk_lines=20,
        overlap_lines=5,
        max_file_bytes=10_000,
        vector_size=VECTOR_SIZE,
        collection_name="test_collection",
    )


@pytest.fixture
def qdrant_client():
    """qdrant-client local mode, no server needed."""
    client = QdrantClient(":memory:")
    yield client
    client.close()


@pytest.fixture
def sleeps():
    """Records retry delays instead of sleeping."""
    return []


@pytest.fixture
def memory_store(qdrant_client, sleeps):
    """A QdrantVectorStore over qdrant-client's in-process local mode."""
    store = QdrantVectorStore(qdrant_client, "test_collection", sleep=sleeps.append)
    store.ensure_collection(vector_size=VECTOR_SIZE)
    return store


@pytest.fixture
def embedder():
    """Deterministic embedder that accepts everything."""
    return HashEmbedder()


@pytest.fixture
def project_root(tmp_path):
    """Create a temporary project with a few source files."""
    root = tmp_path / "project"
    root.mkdir()

    (root / "main.py").write_text(
        "\n".join(f"print('main line {i}')" for i in range(1, 51))
    )
    (root / "utils.py").write_text(
        "def process_data(data):\n"
        "    '''Process input data.'''\n"
        "    return [item.strip() for item in data]\n"
    )
    lib = root / "lib"
    lib.mkdir()
    (lib / "helper.ts").write_text(
        "export function formatOutput(text: string): string {\n"
        "  return text.toUpperCase()\n"
        "}\n"
    )
    yield root


def write_file(root: Path, rel: str, content: str) -> None:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
