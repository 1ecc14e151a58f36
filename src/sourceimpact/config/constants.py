"""Configuration constants.

This module contains truly constant values that should NOT be user-configurable.
The alignment and severity thresholds were tuned together against the
character-presence overlap metric in ``engine.aligner``; changing one without
re-validating the others shifts which updates get auto-acknowledged and which
get blocked.

For configurable values, see models.py (SimilarityConfig, LoggingConfig).
"""

# =============================================================================
# Alignment
# =============================================================================

TEXT_MATCH_THRESHOLD = 0.5
"""Best textual overlap score below which the similarity fallback is tried."""

# =============================================================================
# Severity decision table
# =============================================================================

MAJOR_ARTIFACT_COUNT = 10
"""Affected artifact counts strictly above this are always major."""

MODERATE_ARTIFACT_COUNT_MIN = 3
"""Lower bound (inclusive) of the moderate artifact-count band."""

EVIDENCE_CHURN_RATIO = 0.3
"""Mappings / total evidence chunks above this ratio are major."""

HIGH_CONFIDENCE_SIMILARITY = 0.85
"""Similarity scores strictly above this keep a modified mapping minor."""
