"""Data models for repo-indexer."""

from __future__ import annotations

import dataclasses
import enum
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from .identity import sha1_hex


@dataclasses.dataclass
class SourceFile:
    """A project file as read for one indexing pass."""

    path: str
    size: int
    text: str
    file_hash: str

    @classmethod
    def read(cls, root: Path, rel_path: str) -> "SourceFile":
        abs_path = root / rel_path
        size = abs_path.stat().st_size
        # Decode the raw bytes so line endings reach the hash untouched
        text = abs_path.read_bytes().decode("utf-8", errors="replace")
        return cls(path=rel_path, size=size, text=text, file_hash=sha1_hex(text))


@dataclasses.dataclass
class Chunk:
    """A line range of a file, 1-based and inclusive."""

    start_line: int
    end_line: int
    text: str

    @property
    def line_count(self) -> int:
        return len(self.text.split("\n"))


@dataclasses.dataclass
class Point:
    """A vector store record."""

    id: str
    vector: List[float]
    payload: Dict[str, Any]


class ChangeStatus(str, enum.Enum):
    UNCHANGED = "unchanged"
    NEW = "new"
    MODIFIED = "modified"


class FileIndexResult(BaseModel):
    indexed: bool
    chunks: Optional[int] = None
    reason: Optional[Literal["unchanged", "too_large", "excluded"]] = None


class CollectionInfo(BaseModel):
    name: str
    count: int = 0


class IndexRunSummary(BaseModel):
    """Outcome of a full indexing pass."""

    collection: str
    files: Dict[str, FileIndexResult] = Field(default_factory=dict)
    failed: Dict[str, str] = Field(default_factory=dict)
    deleted: List[str] = Field(default_factory=list)

    @property
    def indexed_count(self) -> int:
        return sum(1 for r in self.files.values() if r.indexed)

    @property
    def unchanged_count(self) -> int:
        return sum(1 for r in self.files.values() if r.reason == "unchanged")

    @property
    def too_large_count(self) -> int:
        return sum(1 for r in self.files.values() if r.reason == "too_large")

    @property
    def total_chunks(self) -> int:
        return sum(r.chunks or 0 for r in self.files.values())
