"""Project indexing: full passes and single-file updates."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Set

from ..config import IndexerSettings
from ..core import (
    AdaptiveSplitter,
    ChangeStatus,
    Embedder,
    FileIndexResult,
    IndexRunSummary,
    Point,
    SourceFile,
    SymbolExtractor,
    chunk_by_lines,
    flatten_symbols,
    get_language_for_file,
    make_embedder,
    stable_point_id,
)
from ..storage import VectorStore, make_vector_store
from ..utils import file_size
from .base import Indexer
from .change_detector import ChangeDetector
from .files import list_project_files, should_index_file

logger = logging.getLogger(__name__)

# One writer per collection within a process; see DESIGN.md
_collection_locks: Dict[str, threading.Lock] = {}
_collection_locks_guard = threading.Lock()


def _collection_lock(name: str) -> threading.Lock:
    with _collection_locks_guard:
        return _collection_locks.setdefault(name, threading.Lock())


class ProjectIndexer(Indexer):

    def __init__(
        self,
        root: Path,
        store: VectorStore,
        embedder: Embedder,
        settings: IndexerSettings,
        symbol_extractor: Optional[SymbolExtractor] = None,
        list_files: Optional[Callable[[Path, IndexerSettings], Iterable[str]]] = None,
        should_index: Optional[Callable[[Path, str, IndexerSettings], bool]] = None,
    ):
        self.root = Path(root)
        self.store = store
        self.embedder = embedder
        self.settings = settings
        self.symbol_extractor = symbol_extractor
        self.list_files = list_files or list_project_files
        self.should_index = should_index or should_index_file
        self.detector = ChangeDetector(store)
        self._lock = _collection_lock(store.collection_name)

    def _extract_symbols(self, source: SourceFile, lang: str) -> List[Dict]:
        if self.symbol_extractor is None:
            return []
        try:
            return list(self.symbol_extractor(source.text, lang))
        except Exception as e:
            logger.warning(f"Symbol extraction failed for {source.path}: {e}")
            return []

    def index_file(self, rel_path: str) -> FileIndexResult:
        """Bring the stored points for one file in line with its current content."""
        if file_size(self.root / rel_path) > self.settings.max_file_bytes:
            return FileIndexResult(indexed=False, reason="too_large")

        source = SourceFile.read(self.root, rel_path)
        status = self.detector.prepare(source)
        if status is ChangeStatus.UNCHANGED:
            return FileIndexResult(indexed=False, reason="unchanged")

        lang = get_language_for_file(rel_path)
        symbols = self._extract_symbols(source, lang)
        symbol_meta = flatten_symbols(symbols)

        chunks = chunk_by_lines(source.text, self.settings.max_chunk_lines, self.settings.overlap_lines)
        splitter = AdaptiveSplitter(self.embedder.embed_one, overlap=self.settings.overlap_lines)
        embedded = splitter.embed_chunks(chunks)

        points: List[Point] = []
        for chunk, vector in embedded:
            points.append(
                Point(
                    id=stable_point_id(rel_path, chunk.start_line, chunk.end_line),
                    vector=vector,
                    payload={
                        **symbol_meta,
                        "path": rel_path,
                        "lang": lang,
                        "start_line": chunk.start_line,
                        "end_line": chunk.end_line,
                        "text": chunk.text,
                        "file_hash": source.file_hash,
                        "symbols": symbols,
                    },
                )
            )

        self.store.upsert_points(points)
        logger.debug(f"Indexed {rel_path} ({status.value}): {len(points)} chunks")
        return FileIndexResult(indexed=True, chunks=len(points))

    def remove_deleted_files(self, current_paths: Set[str]) -> List[str]:
        """Delete points for every stored path that is no longer in the project."""
        stale = sorted(self.store.list_all_paths() - set(current_paths))
        for path in stale:
            self.store.delete_by_path(path)
        if stale:
            logger.info(f"Removed {len(stale)} deleted files from '{self.store.collection_name}'")
        return stale

    def index(self, reset: bool = False) -> IndexRunSummary:
        with self._lock:
            self.store.ensure_collection(reset=reset, vector_size=self.settings.vector_size)
            files = list(self.list_files(self.root, self.settings))

            summary = IndexRunSummary(collection=self.store.collection_name)
            summary.deleted = self.remove_deleted_files(set(files))

            for rel in files:
                try:
                    result = self.index_file(rel)
                except Exception as e:
                    logger.error(f"Indexing {rel} failed: {e}")
                    summary.failed[rel] = str(e)
                    continue
                summary.files[rel] = result
                if result.indexed:
                    logger.info(f"Indexing {rel}... OK ({result.chunks})")
                else:
                    logger.info(f"Indexing {rel}... Skipped ({result.reason})")

            logger.info(
                f"Indexed {summary.indexed_count} files ({summary.total_chunks} chunks), "
                f"{summary.unchanged_count} unchanged, {summary.too_large_count} too large, "
                f"{len(summary.failed)} failed, {len(summary.deleted)} removed"
            )
            return summary

    def index_single_file(self, rel_path: str) -> FileIndexResult:
        if not self.should_index(self.root, rel_path, self.settings):
            logger.debug(f"Skipping {rel_path}: not an indexing candidate")
            return FileIndexResult(indexed=False, reason="excluded")
        with self._lock:
            return self.index_file(rel_path)


def make_indexer(
    root: Path,
    settings: IndexerSettings,
    collection_name: Optional[str] = None,
    symbol_extractor: Optional[SymbolExtractor] = None,
) -> ProjectIndexer:
    store = make_vector_store(settings, collection_name=collection_name)
    embedder = make_embedder(settings)
    return ProjectIndexer(root, store, embedder, settings, symbol_extractor=symbol_extractor)


def build_index(
    root: Path,
    settings: IndexerSettings,
    reset: bool = False,
    collection_name: Optional[str] = None,
) -> IndexRunSummary:
    """Run a full indexing pass (Wrapper)."""
    indexer = make_indexer(root, settings, collection_name=collection_name)
    return indexer.index(reset=reset)


def index_single_file(
    root: Path,
    rel_path: str,
    settings: IndexerSettings,
    collection_name: Optional[str] = None,
) -> FileIndexResult:
    """Re-index one changed file without the full diff step (Wrapper)."""
    indexer = make_indexer(root, settings, collection_name=collection_name)
    return indexer.index_single_file(rel_path)
