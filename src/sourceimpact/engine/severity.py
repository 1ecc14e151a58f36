"""Severity decision table for a source change.

Rules are evaluated top to bottom and the first match wins.  Downstream
workflow keys off the resulting tier directly, so rule order matters.

| # | Condition                                                        | Tier     |
|---|------------------------------------------------------------------|----------|
| 1 | affected artifacts > 10                                          | major    |
| 2 | any removed mapping                                              | moderate |
| 3 | 3 <= affected artifacts <= 10                                    | moderate |
| 4 | total evidence chunks > 0 and mappings / total > 0.3             | major    |
| 5 | affected artifacts < 3 and every modified score is None or > 0.85 | minor    |
| 6 | otherwise                                                        | moderate |
"""

from __future__ import annotations

from collections.abc import Sequence

from sourceimpact.config.constants import (
    EVIDENCE_CHURN_RATIO,
    HIGH_CONFIDENCE_SIMILARITY,
    MAJOR_ARTIFACT_COUNT,
    MODERATE_ARTIFACT_COUNT_MIN,
)
from sourceimpact.engine.models import ChunkMapping, DiffType, Severity


def determine_severity(
    affected_artifact_count: int,
    mappings: Sequence[ChunkMapping],
    total_evidence_chunks: int | None = None,
) -> Severity:
    """Classify a change for the artifacts that cited the changed chunks."""
    if affected_artifact_count > MAJOR_ARTIFACT_COUNT:
        return Severity.MAJOR

    if any(m.diff_type == DiffType.REMOVED for m in mappings):
        return Severity.MODERATE

    if MODERATE_ARTIFACT_COUNT_MIN <= affected_artifact_count <= MAJOR_ARTIFACT_COUNT:
        return Severity.MODERATE

    if (
        total_evidence_chunks is not None
        and total_evidence_chunks > 0
        and len(mappings) / total_evidence_chunks > EVIDENCE_CHURN_RATIO
    ):
        return Severity.MAJOR

    if affected_artifact_count < MODERATE_ARTIFACT_COUNT_MIN and _all_modified_confident(mappings):
        return Severity.MINOR

    return Severity.MODERATE


def _all_modified_confident(mappings: Sequence[ChunkMapping]) -> bool:
    # A missing score means a textual match, which counts as full confidence
    return all(
        (m.similarity_score if m.similarity_score is not None else 1.0)
        > HIGH_CONFIDENCE_SIMILARITY
        for m in mappings
        if m.diff_type == DiffType.MODIFIED
    )
