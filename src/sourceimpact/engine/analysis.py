"""One-call analysis of a source update: diff, locate, align.

The calling workflow owns persistence, evidence-link lookups and acting on
severity.  This module only produces the pure result it needs for that:
regions, mappings and the old chunk ids whose evidence links must be checked.
"""

from __future__ import annotations

import hashlib
from collections.abc import Sequence

import structlog

from sourceimpact.config.models import SourceImpactConfig
from sourceimpact.core.logging import analysis_context
from sourceimpact.engine.aligner import align_chunks
from sourceimpact.engine.models import (
    AnalysisStatus,
    ChunkMapping,
    DiffType,
    ImpactAnalysis,
    SourceChunk,
)
from sourceimpact.engine.similarity import SimilarityIndex
from sourceimpact.engine.text_diff import compute_text_diff

log = structlog.get_logger(__name__)


def content_hash(text: str) -> str:
    """Stable content hash of a source version (sha256 hex of UTF-8)."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def changed_chunk_ids(mappings: Sequence[ChunkMapping]) -> list[str]:
    """Old chunk ids of removed/modified mappings, first occurrence order."""
    seen: dict[str, None] = {}
    for m in mappings:
        if m.diff_type in (DiffType.REMOVED, DiffType.MODIFIED) and m.old_chunk_id:
            seen.setdefault(m.old_chunk_id, None)
    return list(seen)


def analyze_source_change(
    old_text: str,
    new_text: str,
    old_chunks: Sequence[SourceChunk],
    new_chunks: Sequence[SourceChunk],
    similarity: SimilarityIndex | None = None,
    config: SourceImpactConfig | None = None,
    request_id: str | None = None,
    source_id: str | None = None,
) -> ImpactAnalysis:
    """Analyse one (old, new) source version pair.

    Versions with identical content hashes short-circuit to
    ``no_changes`` without diffing.  The similarity index is ignored when
    ``config.similarity.enabled`` is false.

    Every event logged during the call carries ``request_id`` (generated when
    omitted) and, if given, ``source_id``.  The caller's own log context is
    restored afterwards.

    Raises:
        ChunkInputError: A chunk list contains duplicate ids.
    """
    config = config or SourceImpactConfig()
    fields = {"source_id": source_id} if source_id else {}
    with analysis_context(request_id, **fields):
        if content_hash(old_text) == content_hash(new_text):
            log.info("source_unchanged", content_len=len(old_text))
            return ImpactAnalysis(status=AnalysisStatus.NO_CHANGES)

        regions = compute_text_diff(old_text, new_text)
        mappings = align_chunks(
            regions,
            old_chunks,
            new_chunks,
            old_text,
            new_text,
            similarity if config.similarity.enabled else None,
            timeout_sec=config.similarity.timeout_sec,
            max_workers=config.similarity.max_workers,
        )
        changed = changed_chunk_ids(mappings)

        log.info(
            "source_change_analyzed",
            regions=len(regions),
            mappings=len(mappings),
            changed_chunks=len(changed),
            added_chunks=sum(1 for m in mappings if m.diff_type == DiffType.ADDED),
        )
        return ImpactAnalysis(
            status=AnalysisStatus.COMPLETED,
            regions=regions,
            mappings=mappings,
            changed_chunk_ids=changed,
        )