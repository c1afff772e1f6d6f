"""Core functionality for repo-indexer."""

from .models import (
    Chunk,
    ChangeStatus,
    CollectionInfo,
    FileIndexResult,
    IndexRunSummary,
    Point,
    SourceFile,
)
from .identity import sha1_hex, sha1_to_uuid, stable_point_id
from .chunking import AdaptiveSplitter, chunk_by_lines, split_chunk, get_language_for_file
from .embeddings import Embedder, EmbeddingError, OllamaEmbedder, make_embedder
from .symbols import SymbolExtractor, flatten_symbols

__all__ = [
    "Chunk",
    "ChangeStatus",
    "CollectionInfo",
    "FileIndexResult",
    "IndexRunSummary",
    "Point",
    "SourceFile",
    "sha1_hex",
    "sha1_to_uuid",
    "stable_point_id",
    "AdaptiveSplitter",
    "chunk_by_lines",
    "split_chunk",
    "get_language_for_file",
    "Embedder",
    "EmbeddingError",
    "OllamaEmbedder",
    "make_embedder",
    "SymbolExtractor",
    "flatten_symbols",
]
