"""Factory for creating vector store instances (Qdrant only)."""

from __future__ import annotations

import re
from typing import Optional

from qdrant_client import QdrantClient

from ..config import IndexerSettings
from .base import VectorStore
from .qdrant import QdrantVectorStore


def sanitize_collection_name(name: str) -> str:
    name = re.sub(r"[^a-zA-Z0-9_-]", "_", name)
    if name and not name[0].isalpha() and name[0] != "_":
        name = "_" + name
    return name


def make_vector_store(
    settings: IndexerSettings,
    collection_name: Optional[str] = None,
    client: Optional[QdrantClient] = None,
) -> VectorStore:
    if client is None:
        client = QdrantClient(url=settings.vector_store_url, timeout=int(settings.request_timeout))
    name = sanitize_collection_name(collection_name or settings.collection_name)
    return QdrantVectorStore(client=client, collection_name=name)
