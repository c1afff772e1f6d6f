"""Indexer Interface."""

from __future__ import annotations

from ..core.models import FileIndexResult, IndexRunSummary


class Indexer:
    """Abstract base class for project indexing."""

    def index(self, reset: bool = False) -> IndexRunSummary:
        raise NotImplementedError

    def index_single_file(self, rel_path: str) -> FileIndexResult:
        raise NotImplementedError
