"""Content-hash based change detection against the vector store."""

from __future__ import annotations

import logging

from ..core.models import ChangeStatus, SourceFile
from ..storage.base import VectorStore

logger = logging.getLogger(__name__)


class ChangeDetector:

    def __init__(self, store: VectorStore):
        self.store = store

    def detect(self, source: SourceFile) -> ChangeStatus:
        stored_hash = self.store.get_file_hash(source.path)
        if stored_hash is None:
            return ChangeStatus.NEW
        if stored_hash == source.file_hash:
            return ChangeStatus.UNCHANGED
        return ChangeStatus.MODIFIED

    def prepare(self, source: SourceFile) -> ChangeStatus:
        """Classify the file and purge its stale points when it was modified."""
        status = self.detect(source)
        if status is ChangeStatus.MODIFIED:
            logger.debug(f"{source.path} changed, deleting previous points")
            self.store.delete_by_path(source.path)
        return status
