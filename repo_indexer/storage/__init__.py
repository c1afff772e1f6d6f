"""Vector storage backends (Qdrant only)."""

from .base import VectorStore, VectorStoreError
from .factory import make_vector_store, sanitize_collection_name
from .qdrant import QdrantVectorStore
from .retry import backoff_delay, call_with_retry, is_retryable_error

__all__ = [
    "VectorStore",
    "VectorStoreError",
    "QdrantVectorStore",
    "make_vector_store",
    "sanitize_collection_name",
    "backoff_delay",
    "call_with_retry",
    "is_retryable_error",
]
