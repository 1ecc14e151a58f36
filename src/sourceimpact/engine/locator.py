"""Reconstruct chunk spans inside the full text they were cut from."""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from sourceimpact.engine.models import ChunkSpan, SourceChunk

log = structlog.get_logger(__name__)


def locate_chunks(chunks: Sequence[SourceChunk], full_text: str) -> list[ChunkSpan]:
    """Locate each chunk's ``[start, end)`` span in ``full_text``.

    Chunks are searched in order with a forward-moving cursor so identical
    chunks resolve to successive occurrences.  After a hit the cursor moves
    to one past the match start; a chunk that cannot be found verbatim gets
    a synthetic span at the cursor and the cursor advances by its length.
    Spans therefore never move backwards.  Never raises.
    """
    spans: list[ChunkSpan] = []
    cursor = 0
    synthetic = 0

    for chunk in chunks:
        size = len(chunk.content)
        idx = full_text.find(chunk.content, cursor)
        if idx >= 0:
            spans.append(ChunkSpan(chunk_id=chunk.id, start=idx, end=idx + size))
            cursor = idx + 1
        else:
            spans.append(ChunkSpan(chunk_id=chunk.id, start=cursor, end=cursor + size))
            cursor += size
            synthetic += 1

    if synthetic:
        log.debug("chunk_spans_synthesized", count=synthetic, total=len(spans))
    return spans


def overlap(a_start: int, a_end: int, b_start: int, b_end: int) -> int:
    """Length of the intersection of two half-open spans (0 when disjoint)."""
    return max(0, min(a_end, b_end) - max(a_start, b_start))
