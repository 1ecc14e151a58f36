"""Source change impact engine.

Public API re-exports for the engine subpackage.
"""

from sourceimpact.engine.aligner import align_chunks, text_overlap_score
from sourceimpact.engine.analysis import analyze_source_change, changed_chunk_ids, content_hash
from sourceimpact.engine.locator import locate_chunks
from sourceimpact.engine.models import (
    AnalysisStatus,
    ChunkMapping,
    ChunkSpan,
    DiffRegion,
    DiffType,
    ImpactAnalysis,
    Severity,
    SourceChunk,
)
from sourceimpact.engine.severity import determine_severity
from sourceimpact.engine.similarity import (
    InMemorySimilarityIndex,
    SimilarityIndex,
    VersionPairIndex,
)
from sourceimpact.engine.text_diff import compute_text_diff

__all__ = [
    "AnalysisStatus",
    "ChunkMapping",
    "ChunkSpan",
    "DiffRegion",
    "DiffType",
    "ImpactAnalysis",
    "InMemorySimilarityIndex",
    "Severity",
    "SimilarityIndex",
    "SourceChunk",
    "VersionPairIndex",
    "align_chunks",
    "analyze_source_change",
    "changed_chunk_ids",
    "compute_text_diff",
    "content_hash",
    "determine_severity",
    "locate_chunks",
    "text_overlap_score",
]
