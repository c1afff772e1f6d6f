"""Qdrant vector database backend."""

from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional, Set

from qdrant_client import QdrantClient
from qdrant_client.models import (
    Distance,
    FieldCondition,
    Filter,
    FilterSelector,
    MatchValue,
    PayloadSchemaType,
    PointStruct,
    VectorParams,
)

from ..core.models import CollectionInfo, Point
from .base import VectorStore, VectorStoreError
from .retry import call_with_retry

logger = logging.getLogger(__name__)

PAYLOAD_INDEXES = [
    ("path", PayloadSchemaType.KEYWORD),
    ("lang", PayloadSchemaType.KEYWORD),
    ("file_hash", PayloadSchemaType.KEYWORD),
    ("kind", PayloadSchemaType.KEYWORD),
    ("symbol_names", PayloadSchemaType.TEXT),
    ("symbol_references", PayloadSchemaType.TEXT),
    ("symbol_kinds", PayloadSchemaType.KEYWORD),
    ("unity_tags", PayloadSchemaType.KEYWORD),
]

SCROLL_PAGE_SIZE = 1000


def _path_filter(path: str) -> Filter:
    return Filter(must=[FieldCondition(key="path", match=MatchValue(value=path))])


class QdrantVectorStore(VectorStore):

    def __init__(
        self,
        client: QdrantClient,
        collection_name: str,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.client = client
        self.collection_name = collection_name
        self._sleep = sleep

    def _call(self, fn, *args, **kwargs):
        return call_with_retry(fn, *args, sleep=self._sleep, **kwargs)

    def _collection_names(self) -> List[str]:
        response = self._call(self.client.get_collections)
        return [c.name for c in response.collections]

    def ensure_collection(self, reset: bool = False, vector_size: int = 768) -> None:
        if reset:
            self.drop_collection()

        if self.collection_name in self._collection_names():
            return

        self._call(
            self.client.create_collection,
            collection_name=self.collection_name,
            vectors_config=VectorParams(size=vector_size, distance=Distance.COSINE),
        )
        logger.info(f"Created collection '{self.collection_name}' (size={vector_size}, distance=cosine)")
        self._create_payload_indexes()

    def _create_payload_indexes(self) -> None:
        for field_name, schema in PAYLOAD_INDEXES:
            try:
                self._call(
                    self.client.create_payload_index,
                    collection_name=self.collection_name,
                    field_name=field_name,
                    field_schema=schema,
                    wait=True,
                )
            except VectorStoreError as e:
                logger.warning(f"Failed creating payload index '{field_name}' on '{self.collection_name}': {e}")

    def drop_collection(self, name: Optional[str] = None) -> None:
        target = name or self.collection_name
        try:
            self._call(self.client.delete_collection, collection_name=target)
            logger.info(f"Dropped collection '{target}'")
        except VectorStoreError as e:
            logger.warning(f"Error dropping collection '{target}': {e}")

    def upsert_points(self, points: List[Point]) -> None:
        if not points:
            return
        structs = [PointStruct(id=p.id, vector=p.vector, payload=p.payload) for p in points]
        self._call(
            self.client.upsert,
            collection_name=self.collection_name,
            points=structs,
            wait=True,
        )
        logger.debug(f"Upserted {len(structs)} points into '{self.collection_name}'")

    def delete_by_path(self, path: str) -> None:
        self._call(
            self.client.delete,
            collection_name=self.collection_name,
            points_selector=FilterSelector(filter=_path_filter(path)),
            wait=True,
        )

    def get_file_hash(self, path: str) -> Optional[str]:
        points, _ = self._call(
            self.client.scroll,
            collection_name=self.collection_name,
            scroll_filter=_path_filter(path),
            limit=1,
            with_payload=True,
            with_vectors=False,
        )
        if not points:
            return None
        return (points[0].payload or {}).get("file_hash")

    def list_all_paths(self, page_size: int = SCROLL_PAGE_SIZE) -> Set[str]:
        paths: Set[str] = set()
        offset = None
        while True:
            points, next_offset = self._call(
                self.client.scroll,
                collection_name=self.collection_name,
                limit=page_size,
                offset=offset,
                with_payload=["path"],
                with_vectors=False,
            )
            for point in points:
                path = (point.payload or {}).get("path")
                if path:
                    paths.add(path)
            if next_offset is None:
                break
            offset = next_offset
        return paths

    def count_points(self, path: Optional[str] = None) -> int:
        result = self._call(
            self.client.count,
            collection_name=self.collection_name,
            count_filter=_path_filter(path) if path else None,
            exact=True,
        )
        return result.count

    def list_collections_extended(self) -> List[CollectionInfo]:
        out: List[CollectionInfo] = []
        for name in self._collection_names():
            count = 0
            try:
                count = self._call(self.client.count, collection_name=name, exact=True).count
            except VectorStoreError as e:
                logger.warning(f"Failed counting points in '{name}': {e}")
            out.append(CollectionInfo(name=name, count=count))
        return out
