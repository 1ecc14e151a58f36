"""Unit tests for chunk span location (locator.py)."""

from __future__ import annotations

from sourceimpact.engine.locator import locate_chunks, overlap
from sourceimpact.engine.models import ChunkSpan, SourceChunk


def _chunks(*contents: str) -> list[SourceChunk]:
    return [SourceChunk(id=f"c{i}", content=c, index=i) for i, c in enumerate(contents)]


class TestLocateChunks:
    """Tests for locate_chunks."""

    def test_contiguous_chunks(self) -> None:
        spans = locate_chunks(_chunks("Hello ", "world"), "Hello world")
        assert spans == [
            ChunkSpan(chunk_id="c0", start=0, end=6),
            ChunkSpan(chunk_id="c1", start=6, end=11),
        ]

    def test_duplicate_content_resolves_to_successive_occurrences(self) -> None:
        spans = locate_chunks(_chunks("ab", "ab"), "ab ab")
        assert [(s.start, s.end) for s in spans] == [(0, 2), (3, 5)]

    def test_missing_chunk_gets_synthetic_span_at_cursor(self) -> None:
        spans = locate_chunks(_chunks("hello", "zzz", "world"), "hello world")
        assert [(s.start, s.end) for s in spans] == [(0, 5), (1, 4), (6, 11)]

    def test_spans_never_move_backwards(self) -> None:
        text = "alpha beta gamma alpha"
        spans = locate_chunks(_chunks("gamma", "alpha", "missing", "beta"), text)
        starts = [s.start for s in spans]
        assert starts == sorted(starts)

    def test_all_missing_chunks_are_laid_end_to_end(self) -> None:
        spans = locate_chunks(_chunks("xx", "yyy"), "abc")
        assert [(s.start, s.end) for s in spans] == [(0, 2), (2, 5)]

    def test_empty_chunk_list(self) -> None:
        assert locate_chunks([], "anything") == []

    def test_empty_full_text_never_raises(self) -> None:
        spans = locate_chunks(_chunks("a", "b"), "")
        assert [(s.start, s.end) for s in spans] == [(0, 1), (1, 2)]

    def test_chunk_ids_preserved_in_order(self) -> None:
        spans = locate_chunks(_chunks("one", "two", "three"), "one two three")
        assert [s.chunk_id for s in spans] == ["c0", "c1", "c2"]


class TestOverlap:
    """Tests for overlap."""

    def test_partial_overlap(self) -> None:
        assert overlap(0, 10, 5, 15) == 5

    def test_disjoint(self) -> None:
        assert overlap(0, 5, 10, 15) == 0

    def test_touching_half_open_spans_do_not_overlap(self) -> None:
        assert overlap(0, 5, 5, 10) == 0

    def test_containment(self) -> None:
        assert overlap(2, 4, 0, 10) == 2

    def test_empty_span(self) -> None:
        assert overlap(3, 3, 0, 10) == 0
