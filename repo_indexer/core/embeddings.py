"""Embedding models for semantic search."""

from __future__ import annotations

import logging
from typing import List, Optional

import requests

from ..config import IndexerSettings

logger = logging.getLogger(__name__)

# Substrings Ollama puts in the error body when the prompt exceeds the model window
TOO_LARGE_SIGNATURES = ("context length", "input length", "too large")


class EmbeddingError(RuntimeError):
    """Embedding request failed for a reason other than input size."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


def is_too_large_error(body: str) -> bool:
    lowered = (body or "").lower()
    return any(sig in lowered for sig in TOO_LARGE_SIGNATURES)


class Embedder:
    """Abstract base class for embedding models."""

    def embed_one(self, text: str) -> Optional[List[float]]:
        """Embed a single text.

        Returns None when the model rejects the input as too large; the caller
        is expected to split the text and retry.
        """
        raise NotImplementedError


class OllamaEmbedder(Embedder):
    """Embedder backed by an Ollama ``/api/embeddings`` endpoint."""

    def __init__(
        self,
        base_url: str,
        model: str,
        session: Optional[requests.Session] = None,
        timeout: float = 60.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.session = session or requests.Session()
        self.timeout = timeout

    @property
    def url(self) -> str:
        return f"{self.base_url}/api/embeddings"

    def embed_one(self, text: str) -> Optional[List[float]]:
        try:
            response = self.session.post(
                self.url,
                json={"model": self.model, "prompt": text},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise EmbeddingError(f"Embedding request to {self.url} failed: {e}") from e

        if not response.ok:
            body = response.text
            if is_too_large_error(body):
                logger.debug(f"Embedding rejected as too large ({len(text)} chars)")
                return None
            raise EmbeddingError(
                f"Ollama embeddings failed: {response.status_code} {body}",
                status_code=response.status_code,
                body=body,
            )

        data = response.json()
        embedding = data.get("embedding") if isinstance(data, dict) else None
        if not embedding:
            return None
        return [float(x) for x in embedding]


def make_embedder(settings: IndexerSettings, session: Optional[requests.Session] = None) -> Embedder:
    """Create embedder from settings."""
    return OllamaEmbedder(
        base_url=settings.embedding_url,
        model=settings.embed_model,
        session=session,
        timeout=settings.request_timeout,
    )
