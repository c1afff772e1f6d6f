"""Line-based chunking and adaptive re-splitting of oversized chunks."""

from __future__ import annotations

import logging
import os
from collections import deque
from typing import Callable, Deque, List, Optional, Tuple

from .models import Chunk

logger = logging.getLogger(__name__)

# Chunks at or below this many lines are dropped instead of split when rejected
MIN_SPLIT_LINES = 15

EXT_TO_LANG = {
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".py": "python",
    ".java": "java",
    ".kt": "kotlin",
    ".cs": "csharp",
    ".cpp": "cpp",
    ".cc": "cpp",
    ".hpp": "cpp",
    ".c": "c",
    ".h": "c",
    ".go": "go",
    ".rs": "rust",
    ".swift": "swift",
    ".php": "php",
    ".rb": "ruby",
    ".lua": "lua",
}


def get_language_for_file(filename: str) -> str:
    """Get language name from file extension, 'text' when unknown."""
    _, ext = os.path.splitext(filename)
    return EXT_TO_LANG.get(ext.lower(), "text")


def chunk_by_lines(text: str, max_lines: int, overlap: int) -> List[Chunk]:
    """Split text into windows of ``max_lines`` lines sharing ``overlap`` lines.

    The last window always ends at end-of-file. A window starts at
    ``max(prev_end - overlap, prev_start + 1)`` so the scan always advances.
    """
    if max_lines < 1:
        raise ValueError(f"max_lines must be >= 1, got {max_lines}")
    if overlap < 0:
        raise ValueError(f"overlap must be >= 0, got {overlap}")

    lines = text.split("\n")
    chunks: List[Chunk] = []
    start = 0
    while start < len(lines):
        end = min(start + max_lines, len(lines))
        chunks.append(Chunk(start_line=start + 1, end_line=end, text="\n".join(lines[start:end])))
        if end >= len(lines):
            break
        start = max(end - overlap, start + 1)
    return chunks


def split_chunk(chunk: Chunk, overlap: int) -> Tuple[Chunk, Chunk]:
    """Bisect a chunk at its midpoint; the halves share ``min(overlap, n // 4)`` lines each side."""
    lines = chunk.text.split("\n")
    n = len(lines)
    split_overlap = min(overlap, n // 4)
    mid = n // 2
    left_end = min(n, mid + split_overlap)
    right_start = max(0, mid - split_overlap)

    left = Chunk(
        start_line=chunk.start_line,
        end_line=chunk.start_line + left_end - 1,
        text="\n".join(lines[:left_end]),
    )
    right = Chunk(
        start_line=chunk.start_line + right_start,
        end_line=chunk.end_line,
        text="\n".join(lines[right_start:]),
    )
    return left, right


class AdaptiveSplitter:
    """Embeds chunks from a FIFO work queue, halving any the model rejects as too large.

    Split halves go to the front of the queue so output stays in file order.
    Rejected chunks of ``min_split_lines`` lines or fewer are dropped. Any
    exception raised by ``embed`` propagates to the caller.
    """

    def __init__(
        self,
        embed: Callable[[str], Optional[List[float]]],
        overlap: int,
        min_split_lines: int = MIN_SPLIT_LINES,
    ) -> None:
        self.embed = embed
        self.overlap = overlap
        self.min_split_lines = min_split_lines

    def embed_chunks(self, chunks: List[Chunk]) -> List[Tuple[Chunk, List[float]]]:
        queue: Deque[Chunk] = deque(chunks)
        embedded: List[Tuple[Chunk, List[float]]] = []

        while queue:
            chunk = queue.popleft()
            vector = self.embed(chunk.text)
            if vector:
                embedded.append((chunk, vector))
                continue

            if chunk.line_count > self.min_split_lines:
                left, right = split_chunk(chunk, self.overlap)
                logger.debug(
                    f"Splitting lines {chunk.start_line}-{chunk.end_line} into "
                    f"{left.start_line}-{left.end_line} and {right.start_line}-{right.end_line}"
                )
                queue.appendleft(right)
                queue.appendleft(left)
            else:
                logger.debug(f"Dropping unembeddable chunk at lines {chunk.start_line}-{chunk.end_line}")

        return embedded
