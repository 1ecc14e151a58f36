"""Nearest-neighbour lookup used as the aligner's fallback.

The aligner only needs two questions answered: "what is the stored
embedding of this old chunk" and "which of these candidate chunks is
closest to that embedding".  ``SimilarityIndex`` is that narrow seam; any
vector store can implement it.

``InMemorySimilarityIndex`` is a brute-force cosine scan over L2-normalised
float32 vectors, adequate for the handful of chunks in one source.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any, Protocol, runtime_checkable

import numpy as np
import structlog

from sourceimpact.core.errors import SimilarityLookupError

log = structlog.get_logger(__name__)

_NORM_FLOOR = 1e-10


@runtime_checkable
class SimilarityIndex(Protocol):
    """Vector similarity capability scoped to a candidate chunk-id set.

    Implementations may raise ``SimilarityLookupError`` (or anything else);
    callers treat every failure as "no match".
    """

    def embedding_for(self, chunk_id: str) -> Sequence[float] | None:
        """Stored embedding of a chunk, or None if it was never embedded."""
        ...

    def most_similar(
        self, embedding: Sequence[float], candidate_ids: Sequence[str]
    ) -> tuple[str, float] | None:
        """Best ``(chunk_id, cosine_similarity)`` among candidates, or None."""
        ...


class InMemorySimilarityIndex:
    """Brute-force cosine similarity over in-memory vectors."""

    def __init__(self, dim: int | None = None) -> None:
        self._dim = dim
        self._vectors: dict[str, np.ndarray[Any, np.dtype[np.float32]]] = {}
        self._raw: dict[str, list[float]] = {}

    @classmethod
    def from_pairs(
        cls, pairs: Iterable[tuple[str, Sequence[float]]]
    ) -> InMemorySimilarityIndex:
        index = cls()
        for chunk_id, vector in pairs:
            index.add(chunk_id, vector)
        return index

    @property
    def dim(self) -> int | None:
        return self._dim

    def __len__(self) -> int:
        return len(self._vectors)

    def __contains__(self, chunk_id: object) -> bool:
        return chunk_id in self._vectors

    def add(self, chunk_id: str, vector: Sequence[float]) -> None:
        if chunk_id in self._vectors:
            raise SimilarityLookupError.invalid_embedding(chunk_id, "already indexed")
        arr = np.asarray(vector, dtype=np.float32)
        if arr.ndim != 1 or arr.size == 0:
            raise SimilarityLookupError.invalid_embedding(chunk_id, "expected non-empty 1-D vector")
        if self._dim is None:
            self._dim = int(arr.size)
        elif arr.size != self._dim:
            raise SimilarityLookupError.dimension_mismatch(self._dim, int(arr.size))

        norm = max(float(np.linalg.norm(arr)), _NORM_FLOOR)
        self._vectors[chunk_id] = arr / norm
        self._raw[chunk_id] = arr.tolist()

    def embedding_for(self, chunk_id: str) -> list[float] | None:
        return self._raw.get(chunk_id)

    def most_similar(
        self, embedding: Sequence[float], candidate_ids: Sequence[str]
    ) -> tuple[str, float] | None:
        ids = [cid for cid in candidate_ids if cid in self._vectors]
        if not ids:
            return None

        query = np.asarray(embedding, dtype=np.float32)
        if query.ndim != 1 or query.size != self._dim:
            raise SimilarityLookupError.dimension_mismatch(self._dim or 0, int(query.size))
        query = query / max(float(np.linalg.norm(query)), _NORM_FLOOR)

        matrix = np.vstack([self._vectors[cid] for cid in ids])
        scores = matrix @ query
        # argmax returns the first maximum, so ties go to candidate order
        best = int(np.argmax(scores))
        return ids[best], float(scores[best])


class VersionPairIndex:
    """Similarity over one source update, keeping the two versions apart.

    Old-version embeddings answer ``embedding_for``; only new-version
    embeddings are ranked by ``most_similar``.  A chunk id may appear on
    both sides, since ids are often stable across versions.
    """

    def __init__(self, old: InMemorySimilarityIndex, new: InMemorySimilarityIndex) -> None:
        self._old = old
        self._new = new

    @classmethod
    def from_pairs(
        cls,
        old_pairs: Iterable[tuple[str, Sequence[float]]],
        new_pairs: Iterable[tuple[str, Sequence[float]]],
    ) -> VersionPairIndex:
        return cls(
            InMemorySimilarityIndex.from_pairs(old_pairs),
            InMemorySimilarityIndex.from_pairs(new_pairs),
        )

    def embedding_for(self, chunk_id: str) -> list[float] | None:
        return self._old.embedding_for(chunk_id)

    def most_similar(
        self, embedding: Sequence[float], candidate_ids: Sequence[str]
    ) -> tuple[str, float] | None:
        return self._new.most_similar(embedding, candidate_ids)
