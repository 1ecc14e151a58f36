"""Tests for the analysis entry point (analysis.py)."""

from __future__ import annotations

from collections.abc import Sequence

import pytest

from sourceimpact.config.models import SimilarityConfig, SourceImpactConfig
from sourceimpact.core.errors import ChunkInputError
from sourceimpact.core.logging import analysis_context, get_request_id
from sourceimpact.engine.analysis import analyze_source_change, changed_chunk_ids, content_hash
from sourceimpact.engine.models import AnalysisStatus, ChunkMapping, DiffType, SourceChunk


class RecordingSimilarityIndex:
    """Always points at the last candidate; records lookups."""

    def __init__(self) -> None:
        self.lookups: list[str] = []

    def embedding_for(self, chunk_id: str) -> list[float]:
        self.lookups.append(chunk_id)
        return [1.0]

    def most_similar(
        self, embedding: Sequence[float], candidate_ids: Sequence[str]
    ) -> tuple[str, float] | None:
        return (candidate_ids[-1], 0.95)


OLD = "AAAA1234"
NEW = "AAAA5678"
OLD_CHUNKS = [SourceChunk("old-1", "AAAA", 0), SourceChunk("old-2", "1234", 1)]
NEW_CHUNKS = [SourceChunk("new-1", "AAAA", 0), SourceChunk("new-2", "5678", 1)]


class TestContentHash:
    def test_sha256_hex(self) -> None:
        assert content_hash("") == (
            "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
        )

    def test_differs_on_single_character(self) -> None:
        assert content_hash("a") != content_hash("b")


class TestChangedChunkIds:
    def test_removed_and_modified_only(self) -> None:
        mappings = [
            ChunkMapping(diff_type=DiffType.REMOVED, old_chunk_id="a"),
            ChunkMapping(diff_type=DiffType.ADDED, new_chunk_id="n"),
            ChunkMapping(diff_type=DiffType.MODIFIED, old_chunk_id="b", new_chunk_id="m"),
        ]
        assert changed_chunk_ids(mappings) == ["a", "b"]

    def test_duplicates_collapse_in_first_seen_order(self) -> None:
        mappings = [
            ChunkMapping(diff_type=DiffType.MODIFIED, old_chunk_id="b", new_chunk_id="x"),
            ChunkMapping(diff_type=DiffType.REMOVED, old_chunk_id="a"),
            ChunkMapping(diff_type=DiffType.MODIFIED, old_chunk_id="b", new_chunk_id="y"),
        ]
        assert changed_chunk_ids(mappings) == ["b", "a"]


class TestAnalyzeSourceChange:
    """One-call analysis of a version pair."""

    def test_identical_content_short_circuits(self) -> None:
        result = analyze_source_change(OLD, OLD, OLD_CHUNKS, OLD_CHUNKS)
        assert result.status == AnalysisStatus.NO_CHANGES
        assert result.regions == []
        assert result.mappings == []
        assert result.changed_chunk_ids == []

    def test_identical_content_skips_chunk_validation(self) -> None:
        dupes = [SourceChunk("x", "a"), SourceChunk("x", "b")]
        result = analyze_source_change("ab", "ab", dupes, dupes)
        assert result.status == AnalysisStatus.NO_CHANGES

    def test_changed_content_reports_regions_and_mappings(self) -> None:
        result = analyze_source_change(OLD, NEW, OLD_CHUNKS, NEW_CHUNKS)

        assert result.status == AnalysisStatus.COMPLETED
        assert [r.kind for r in result.regions] == [DiffType.REMOVED, DiffType.ADDED]
        assert result.mappings[0] == ChunkMapping(diff_type=DiffType.REMOVED, old_chunk_id="old-2")
        assert result.changed_chunk_ids == ["old-2"]

    def test_similarity_index_used_when_enabled(self) -> None:
        index = RecordingSimilarityIndex()
        result = analyze_source_change(OLD, NEW, OLD_CHUNKS, NEW_CHUNKS, similarity=index)

        assert index.lookups == ["old-2"]
        assert result.mappings[0] == ChunkMapping(
            diff_type=DiffType.MODIFIED,
            old_chunk_id="old-2",
            new_chunk_id="new-2",
            similarity_score=0.95,
        )

    def test_similarity_index_ignored_when_disabled(self) -> None:
        index = RecordingSimilarityIndex()
        config = SourceImpactConfig(similarity=SimilarityConfig(enabled=False))
        result = analyze_source_change(
            OLD, NEW, OLD_CHUNKS, NEW_CHUNKS, similarity=index, config=config
        )

        assert index.lookups == []
        assert result.mappings[0].diff_type == DiffType.REMOVED

    def test_duplicate_ids_raise(self) -> None:
        dupes = [SourceChunk("x", "AAAA"), SourceChunk("x", "1234")]
        with pytest.raises(ChunkInputError):
            analyze_source_change(OLD, NEW, dupes, NEW_CHUNKS)

    def test_request_id_released_after_call(self) -> None:
        analyze_source_change(OLD, NEW, OLD_CHUNKS, NEW_CHUNKS, request_id="req-1")
        assert get_request_id() is None

    def test_caller_request_id_survives_call(self) -> None:
        with analysis_context("outer"):
            analyze_source_change(OLD, NEW, OLD_CHUNKS, NEW_CHUNKS, request_id="inner")
            assert get_request_id() == "outer"

    def test_caller_request_id_survives_failure(self) -> None:
        dupes = [SourceChunk("x", "AAAA"), SourceChunk("x", "1234")]
        with analysis_context("outer"):
            with pytest.raises(ChunkInputError):
                analyze_source_change(OLD, NEW, dupes, NEW_CHUNKS, request_id="inner")
            assert get_request_id() == "outer"
