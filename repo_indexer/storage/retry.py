"""Retry policy for vector store calls.

qdrant-client raises:
- UnexpectedResponse: the server answered with a non-2xx status (exc.status_code)
- ResponseHandlingException: the request never completed (exc.source holds the
  underlying httpx error)

Server errors (5xx), rate limiting (429) and network failures are retried with
exponential backoff. Every other status fails on the first attempt.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional, TypeVar

import httpx
import tenacity
from qdrant_client.http.exceptions import ResponseHandlingException, UnexpectedResponse

from .base import VectorStoreError

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_RETRIES = 3
BASE_DELAY_SECONDS = 0.5


def backoff_delay(attempt: int) -> float:
    """Seconds to wait after the given failed attempt (1-based): 1s, 2s, 4s, ..."""
    return (2 ** attempt) * BASE_DELAY_SECONDS


def is_retryable_error(exc: BaseException) -> bool:
    if isinstance(exc, UnexpectedResponse):
        status = exc.status_code or 0
        return status >= 500 or status == 429
    return isinstance(exc, (ResponseHandlingException, httpx.TransportError))


def _response_body(exc: UnexpectedResponse) -> str:
    content = exc.content or b""
    if isinstance(content, bytes):
        return content.decode("utf-8", errors="replace")
    return str(content)


def _wait(retry_state: tenacity.RetryCallState) -> float:
    return backoff_delay(retry_state.attempt_number)


def _log_retry(retry_state: tenacity.RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    if exc is None:
        return

    source_info = ""
    if isinstance(exc, ResponseHandlingException) and exc.source:
        source_info = f" (source: {type(exc.source).__name__}: {exc.source})"

    logger.warning(
        f"[RETRY] Vector store attempt {retry_state.attempt_number} failed: "
        f"{type(exc).__name__}: {exc}{source_info}"
    )


def call_with_retry(
    fn: Callable[..., T],
    *args,
    sleep: Callable[[float], None] = time.sleep,
    max_retries: int = MAX_RETRIES,
    **kwargs,
) -> T:
    """Call ``fn`` with up to ``max_retries`` retries on transient failures.

    Failures surface as VectorStoreError carrying the HTTP status and response
    body when the server produced one.
    """
    retrying = tenacity.Retrying(
        retry=tenacity.retry_if_exception(is_retryable_error),
        stop=tenacity.stop_after_attempt(max_retries + 1),
        wait=_wait,
        sleep=sleep,
        before_sleep=_log_retry,
        reraise=True,
    )
    try:
        return retrying(fn, *args, **kwargs)
    except UnexpectedResponse as e:
        body = _response_body(e)
        raise VectorStoreError(
            f"Vector store request failed: {e.status_code} {body}",
            status_code=e.status_code,
            body=body,
        ) from e
    except (ResponseHandlingException, httpx.TransportError) as e:
        source: Optional[BaseException] = getattr(e, "source", None) or e
        raise VectorStoreError(f"Vector store unreachable: {source}") from e
