"""Align old chunks touched by a diff with their counterparts in the new version.

Two-tier matching:

1. Textual overlap against every new chunk (``text_overlap_score``).
2. When the best textual score is below ``TEXT_MATCH_THRESHOLD``, a vector
   similarity lookup through a ``SimilarityIndex``.

Similarity lookups are independent per old chunk and are fanned out on a
thread pool under one shared deadline.  Results are applied in old-chunk
order, so the output never depends on completion order.  Any lookup failure
(timeout, missing embedding, empty result, index error) leaves the textual
match in place.
"""

from __future__ import annotations

import contextvars
from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor, wait

import structlog

from sourceimpact.config.constants import TEXT_MATCH_THRESHOLD
from sourceimpact.core.errors import ChunkInputError, SimilarityLookupError
from sourceimpact.engine.locator import locate_chunks, overlap
from sourceimpact.engine.models import (
    ChunkMapping,
    ChunkSpan,
    DiffRegion,
    DiffType,
    SourceChunk,
)
from sourceimpact.engine.similarity import SimilarityIndex

log = structlog.get_logger(__name__)

DEFAULT_TIMEOUT_SEC = 5.0
DEFAULT_MAX_WORKERS = 4

# (new chunk index or None, score)
_Match = tuple[int | None, float]


def align_chunks(
    diff_regions: Sequence[DiffRegion],
    old_chunks: Sequence[SourceChunk],
    new_chunks: Sequence[SourceChunk],
    old_text: str,
    new_text: str,
    similarity: SimilarityIndex | None = None,
    *,
    timeout_sec: float = DEFAULT_TIMEOUT_SEC,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> list[ChunkMapping]:
    """Map diff regions to chunk-level changes.

    Args:
        diff_regions: Output of ``compute_text_diff(old_text, new_text)``.
        old_chunks: Chunks of the old version, in document order.
        new_chunks: Chunks of the new version, in document order.
        old_text: Full old text the old chunks were cut from.
        new_text: Full new text the new chunks were cut from.
        similarity: Optional vector index for the low-confidence fallback.
        timeout_sec: Shared deadline for all similarity lookups of this call.
        max_workers: Concurrent similarity lookups.

    Returns:
        One ``modified``/``removed`` mapping per affected old chunk, ordered
        by old chunk position, followed by one ``added`` mapping per new
        chunk that no old chunk claimed.

    Raises:
        ChunkInputError: A chunk list contains duplicate ids.
    """
    _require_unique_ids(old_chunks, "old")
    _require_unique_ids(new_chunks, "new")

    old_spans = locate_chunks(old_chunks, old_text)
    affected = _affected_old_indices(diff_regions, old_spans)

    textual: dict[int, _Match] = {
        i: best_textual_match(old_chunks[i].content, new_chunks) for i in affected
    }

    fallback: dict[int, tuple[str, float]] = {}
    if similarity is not None and new_chunks:
        pending = [
            i
            for i in affected
            if textual[i][1] < TEXT_MATCH_THRESHOLD and len(old_chunks[i].content) > 0
        ]
        if pending:
            fallback = _similarity_lookups(
                similarity,
                {i: old_chunks[i].id for i in pending},
                [c.id for c in new_chunks],
                timeout_sec=timeout_sec,
                max_workers=max_workers,
            )

    new_index_by_id = {c.id: j for j, c in enumerate(new_chunks)}
    mappings: list[ChunkMapping] = []
    claimed: set[int] = set()

    for i in affected:
        best_idx, best_score = textual[i]
        score: float | None = None

        hit = fallback.get(i)
        if hit is not None:
            new_id, sim = hit
            j = new_index_by_id.get(new_id)
            if j is not None and sim > best_score:
                best_idx, score = j, sim

        old_id = old_chunks[i].id
        if best_idx is None:
            mappings.append(ChunkMapping(diff_type=DiffType.REMOVED, old_chunk_id=old_id))
            continue

        claimed.add(best_idx)
        mappings.append(
            ChunkMapping(
                diff_type=DiffType.MODIFIED,
                old_chunk_id=old_id,
                new_chunk_id=new_chunks[best_idx].id,
                similarity_score=score,
            )
        )

    for j, chunk in enumerate(new_chunks):
        if j not in claimed:
            mappings.append(ChunkMapping(diff_type=DiffType.ADDED, new_chunk_id=chunk.id))

    log.debug(
        "chunks_aligned",
        regions=len(diff_regions),
        affected=len(affected),
        similarity_lookups=len(fallback),
        mappings=len(mappings),
        old_len=len(old_text),
        new_len=len(new_text),
    )
    return mappings


def text_overlap_score(old_content: str, new_content: str) -> float:
    """Order-insensitive character-presence overlap.

    For each character of the shorter string, count whether that character
    value occurs anywhere in the longer string; divide by the shorter length.
    Position and frequency are ignored, so short or repetitive strings can
    score high.  The alignment and severity thresholds assume this metric.
    """
    if not old_content and not new_content:
        return 1.0
    if not old_content or not new_content:
        return 0.0
    if len(old_content) <= len(new_content):
        shorter, longer = old_content, new_content
    else:
        shorter, longer = new_content, old_content
    present = set(longer)
    matches = sum(1 for ch in shorter if ch in present)
    return matches / len(shorter)


def best_textual_match(content: str, new_chunks: Sequence[SourceChunk]) -> _Match:
    """Best new chunk by ``text_overlap_score``.

    Only strictly higher scores replace the current best, so ties keep the
    earliest chunk and a chunk scoring 0 never matches.
    """
    best_idx: int | None = None
    best_score = 0.0
    for j, chunk in enumerate(new_chunks):
        score = text_overlap_score(content, chunk.content)
        if score > best_score:
            best_idx, best_score = j, score
    return best_idx, best_score


def _require_unique_ids(chunks: Sequence[SourceChunk], side: str) -> None:
    seen: set[str] = set()
    for chunk in chunks:
        if chunk.id in seen:
            raise ChunkInputError.duplicate_id(side, chunk.id)
        seen.add(chunk.id)


def _affected_old_indices(
    diff_regions: Sequence[DiffRegion], old_spans: Sequence[ChunkSpan]
) -> list[int]:
    """Sorted indices of old chunks touched by the diff.

    A chunk is touched when its span overlaps a removed/modified region, or
    when an added run was inserted strictly inside it.  Insertions at a chunk
    boundary touch nothing; they surface as added chunks instead.
    """
    affected: set[int] = set()
    for region in diff_regions:
        if region.kind == DiffType.ADDED:
            if region.insert_at is None:
                continue
            for i, span in enumerate(old_spans):
                if span.start < region.insert_at < span.end:
                    affected.add(i)
            continue
        for i, span in enumerate(old_spans):
            if overlap(region.start_offset, region.end_offset, span.start, span.end) > 0:
                affected.add(i)
    return sorted(affected)


def _lookup_one(
    similarity: SimilarityIndex, chunk_id: str, candidate_ids: list[str]
) -> tuple[str, float] | None:
    embedding = similarity.embedding_for(chunk_id)
    if embedding is None:
        log.debug("similarity_embedding_missing", chunk_id=chunk_id)
        return None
    return similarity.most_similar(embedding, candidate_ids)


def _similarity_lookups(
    similarity: SimilarityIndex,
    chunk_ids: dict[int, str],
    candidate_ids: list[str],
    *,
    timeout_sec: float,
    max_workers: int,
) -> dict[int, tuple[str, float]]:
    """Run fallback lookups concurrently; failures are logged and dropped."""
    results: dict[int, tuple[str, float]] = {}
    executor = ThreadPoolExecutor(
        max_workers=max(1, min(max_workers, len(chunk_ids))),
        thread_name_prefix="similarity",
    )
    try:
        futures: dict[Future[tuple[str, float] | None], int] = {
            # Workers log under the caller's request id and source fields
            executor.submit(
                contextvars.copy_context().run, _lookup_one, similarity, chunk_id, candidate_ids
            ): i
            for i, chunk_id in chunk_ids.items()
        }
        done, not_done = wait(futures, timeout=timeout_sec)

        for future in not_done:
            future.cancel()
            log.warning(
                "similarity_lookup_timeout",
                chunk_id=chunk_ids[futures[future]],
                timeout_sec=timeout_sec,
            )

        for future in done:
            i = futures[future]
            try:
                result = future.result()
            except SimilarityLookupError as e:
                log.warning("similarity_lookup_failed", chunk_id=chunk_ids[i], error=str(e))
                continue
            except Exception as e:  # noqa: BLE001
                log.warning(
                    "similarity_lookup_failed",
                    chunk_id=chunk_ids[i],
                    error=str(e),
                    error_type=type(e).__name__,
                )
                continue
            if result is not None:
                results[i] = result
    finally:
        # Stuck lookups must not hold the caller past the deadline
        executor.shutdown(wait=False, cancel_futures=True)

    return results
