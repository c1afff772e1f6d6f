"""
Tests for line chunking and adaptive splitting.
"""

import pytest

from repo_indexer.core.chunking import (
    AdaptiveSplitter,
    chunk_by_lines,
    get_language_for_file,
    split_chunk,
)
from repo_indexer.core.models import Chunk


def numbered(n):
    return "\n".join(f"line {i}" for i in range(1, n + 1))


class TestChunkByLines:
    """Test line-window chunking."""

    def test_thousand_line_file(self):
        """500-line windows with 50 lines overlap give three chunks."""
        chunks = chunk_by_lines(numbered(1000), max_lines=500, overlap=50)

        assert [(c.start_line, c.end_line) for c in chunks] == [
            (1, 500),
            (451, 950),
            (901, 1000),
        ]
        assert chunks[0].text.split("\n")[0] == "line 1"
        assert chunks[1].text.split("\n")[0] == "line 451"
        assert chunks[2].text.split("\n")[-1] == "line 1000"

    def test_small_file_single_chunk(self):
        """Test a short file fits in one chunk."""
        chunks = chunk_by_lines(numbered(10), max_lines=500, overlap=50)
        assert len(chunks) == 1
        assert (chunks[0].start_line, chunks[0].end_line) == (1, 10)
        assert chunks[0].text == numbered(10)

    def test_exact_window_size(self):
        """Test a file of exactly one window yields one chunk."""
        chunks = chunk_by_lines(numbered(500), max_lines=500, overlap=50)
        assert [(c.start_line, c.end_line) for c in chunks] == [(1, 500)]

    def test_overlap_not_larger_than_window_still_advances(self):
        """Overlap >= window would stall; the start must still move forward."""
        chunks = chunk_by_lines(numbered(5), max_lines=2, overlap=5)
        starts = [c.start_line for c in chunks]
        assert starts == sorted(set(starts))
        assert chunks[-1].end_line == 5

    def test_no_overlap(self):
        """Test zero overlap gives adjacent windows."""
        chunks = chunk_by_lines(numbered(10), max_lines=4, overlap=0)
        assert [(c.start_line, c.end_line) for c in chunks] == [(1, 4), (5, 8), (9, 10)]

    def test_last_chunk_ends_at_eof(self):
        """Test the final window reaches the last line."""
        chunks = chunk_by_lines(numbered(123), max_lines=20, overlap=5)
        assert chunks[-1].end_line == 123

    def test_empty_text(self):
        """Test empty text yields one empty chunk."""
        chunks = chunk_by_lines("", max_lines=10, overlap=2)
        assert len(chunks) == 1
        assert chunks[0].text == ""

    def test_invalid_parameters(self):
        """Test bad window settings raise ValueError."""
        with pytest.raises(ValueError):
            chunk_by_lines("a", max_lines=0, overlap=0)
        with pytest.raises(ValueError):
            chunk_by_lines("a", max_lines=10, overlap=-1)


class TestSplitChunk:
    """Test chunk bisection."""

    def test_halves_cover_original_range(self):
        """Test halves span the original with capped overlap."""
        chunk = Chunk(start_line=101, end_line=140, text=numbered(40))
        left, right = split_chunk(chunk, overlap=50)

        # overlap capped at 40 // 4 = 10 lines either side of the midpoint
        assert (left.start_line, left.end_line) == (101, 130)
        assert (right.start_line, right.end_line) == (111, 140)
        assert left.line_count == 30
        assert right.line_count == 30

    def test_halves_text_matches_lines(self):
        """Test half texts match their line numbers."""
        chunk = Chunk(start_line=1, end_line=20, text=numbered(20))
        left, right = split_chunk(chunk, overlap=2)

        assert (left.start_line, left.end_line) == (1, 12)
        assert (right.start_line, right.end_line) == (9, 20)
        assert left.text.split("\n")[-1] == "line 12"
        assert right.text.split("\n")[0] == "line 9"

    def test_zero_overlap(self):
        """Test zero overlap splits at the midpoint."""
        chunk = Chunk(start_line=1, end_line=20, text=numbered(20))
        left, right = split_chunk(chunk, overlap=0)
        assert (left.start_line, left.end_line) == (1, 10)
        assert (right.start_line, right.end_line) == (11, 20)


class ScriptedEmbed:
    """Rejects texts longer than max_lines; records every attempt."""

    def __init__(self, max_lines):
        self.max_lines = max_lines
        self.attempts = []

    def __call__(self, text):
        lines = text.split("\n")
        self.attempts.append((lines[0], lines[-1]))
        if len(lines) > self.max_lines:
            return None
        return [1.0, 0.0]


class TestAdaptiveSplitter:
    """Test adaptive re-splitting of rejected chunks."""

    def test_accepts_all_chunks(self):
        """Test accepted chunks pass through in order."""
        chunks = chunk_by_lines(numbered(50), max_lines=20, overlap=5)
        embed = ScriptedEmbed(max_lines=100)
        embedded = AdaptiveSplitter(embed, overlap=5).embed_chunks(chunks)
        assert [c for c, _ in embedded] == chunks

    def test_oversized_chunk_replaced_by_halves(self):
        """Test a rejected chunk is replaced by its halves."""
        chunk = Chunk(start_line=1, end_line=40, text=numbered(40))
        embed = ScriptedEmbed(max_lines=30)

        embedded = AdaptiveSplitter(embed, overlap=50).embed_chunks([chunk])

        ranges = [(c.start_line, c.end_line) for c, _ in embedded]
        assert ranges == [(1, 30), (11, 40)]
        assert ranges[0][0] == chunk.start_line
        assert ranges[-1][1] == chunk.end_line

    def test_recurses_until_accepted(self):
        """Test halves are split again until accepted."""
        chunk = Chunk(start_line=1, end_line=64, text=numbered(64))
        embed = ScriptedEmbed(max_lines=20)

        embedded = AdaptiveSplitter(embed, overlap=0).embed_chunks([chunk])

        ranges = [(c.start_line, c.end_line) for c, _ in embedded]
        assert ranges == [(1, 16), (17, 32), (33, 48), (49, 64)]

    def test_split_halves_processed_before_remaining_queue(self):
        """Test halves are embedded before later chunks."""
        first = Chunk(start_line=1, end_line=40, text=numbered(40))
        second = Chunk(start_line=41, end_line=50, text="short\nchunk")
        embed = ScriptedEmbed(max_lines=30)

        embedded = AdaptiveSplitter(embed, overlap=0).embed_chunks([first, second])

        assert [c.start_line for c, _ in embedded] == [1, 21, 41]

    def test_small_rejected_chunk_dropped(self):
        """Test a rejected chunk of 15 lines is dropped."""
        small = Chunk(start_line=1, end_line=15, text=numbered(15))
        ok = Chunk(start_line=16, end_line=17, text="a\nb")
        embed = ScriptedEmbed(max_lines=10)

        embedded = AdaptiveSplitter(embed, overlap=5).embed_chunks([small, ok])

        assert [c for c, _ in embedded] == [ok]
        # the 15-line chunk is attempted once and never split
        assert len(embed.attempts) == 2

    def test_sixteen_line_chunk_is_split(self):
        """Test a rejected 16-line chunk is still split."""
        chunk = Chunk(start_line=1, end_line=16, text=numbered(16))
        embed = ScriptedEmbed(max_lines=12)

        embedded = AdaptiveSplitter(embed, overlap=5).embed_chunks([chunk])

        assert [(c.start_line, c.end_line) for c, _ in embedded] == [(1, 12), (5, 16)]

    def test_other_errors_propagate(self):
        """Test embedding exceptions are not swallowed."""
        def boom(text):
            raise RuntimeError("model crashed")

        with pytest.raises(RuntimeError, match="model crashed"):
            AdaptiveSplitter(boom, overlap=5).embed_chunks([Chunk(1, 1, "x")])


class TestLanguageDetection:
    """Test language detection from extensions."""

    @pytest.mark.parametrize(
        "path,lang",
        [
            ("src/app.ts", "typescript"),
            ("src/App.TSX", "typescript"),
            ("main.py", "python"),
            ("Player.cs", "csharp"),
            ("README.md", "text"),
            ("Makefile", "text"),
        ],
    )
    def test_extension_mapping(self, path, lang):
        """Test known and unknown extensions."""
        assert get_language_for_file(path) == lang
