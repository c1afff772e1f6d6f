"""Abstract vector storage interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional, Set

from ..core.models import CollectionInfo, Point


class VectorStoreError(RuntimeError):
    """A vector store call failed permanently (or exhausted its retries)."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class VectorStore(ABC):
    """Abstract base class for vector storage backends bound to one collection."""

    collection_name: str

    @abstractmethod
    def ensure_collection(self, reset: bool = False, vector_size: int = 768) -> None:
        """Create the collection and its payload indexes if missing."""
        pass

    @abstractmethod
    def drop_collection(self, name: Optional[str] = None) -> None:
        """Best-effort delete of a collection (this one by default)."""
        pass

    @abstractmethod
    def upsert_points(self, points: List[Point]) -> None:
        pass

    @abstractmethod
    def delete_by_path(self, path: str) -> None:
        pass

    @abstractmethod
    def get_file_hash(self, path: str) -> Optional[str]:
        """Stored file hash for a path, or None if the path has no points."""
        pass

    @abstractmethod
    def list_all_paths(self) -> Set[str]:
        pass

    @abstractmethod
    def list_collections_extended(self) -> List[CollectionInfo]:
        pass

    @abstractmethod
    def count_points(self, path: Optional[str] = None) -> int:
        pass
