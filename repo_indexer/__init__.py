"""Incremental Qdrant indexing of a source tree with local Ollama embeddings."""

from .config import IndexerSettings, load_config
from .core import FileIndexResult, IndexRunSummary
from .indexing import ProjectIndexer, build_index, index_single_file, make_indexer

__version__ = "0.1.0"

__all__ = [
    "IndexerSettings",
    "load_config",
    "FileIndexResult",
    "IndexRunSummary",
    "ProjectIndexer",
    "build_index",
    "index_single_file",
    "make_indexer",
]
