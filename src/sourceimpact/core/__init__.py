"""Core module exports."""

from sourceimpact.core.errors import (
    ChunkInputError,
    ConfigError,
    ErrorCode,
    SimilarityLookupError,
    SourceImpactError,
)
from sourceimpact.core.logging import analysis_context, configure_logging, get_request_id

__all__ = [
    # Errors
    "ChunkInputError",
    "ConfigError",
    "ErrorCode",
    "SimilarityLookupError",
    "SourceImpactError",
    # Logging
    "analysis_context",
    "configure_logging",
    "get_request_id",
]
