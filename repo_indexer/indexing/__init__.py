"""Indexing functionality for repo-indexer."""

from .change_detector import ChangeDetector
from .files import (
    ToIndexConfig,
    iter_files,
    list_project_files,
    load_to_index_config,
    should_index_file,
)
from .indexer import ProjectIndexer, build_index, index_single_file, make_indexer

__all__ = [
    "ChangeDetector",
    "ProjectIndexer",
    "build_index",
    "index_single_file",
    "make_indexer",
    "iter_files",
    "list_project_files",
    "load_to_index_config",
    "should_index_file",
    "ToIndexConfig",
]
