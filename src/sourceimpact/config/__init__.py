"""Config module exports."""

from sourceimpact.config.loader import load_config
from sourceimpact.config.models import (
    LoggingConfig,
    LogOutputConfig,
    SimilarityConfig,
    SourceImpactConfig,
)

__all__ = [
    "load_config",
    "LoggingConfig",
    "LogOutputConfig",
    "SimilarityConfig",
    "SourceImpactConfig",
]
