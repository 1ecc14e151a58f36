"""Tests for config/models.py module.

Covers:
- LogOutputConfig model
- LoggingConfig model
- SimilarityConfig model
- SourceImpactConfig root model
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from sourceimpact.config.models import (
    LoggingConfig,
    LogOutputConfig,
    SimilarityConfig,
    SourceImpactConfig,
)


class TestLogOutputConfig:
    """Tests for LogOutputConfig model."""

    def test_defaults(self) -> None:
        config = LogOutputConfig()
        assert config.format == "console"
        assert config.destination == "stderr"
        assert config.level is None

    @pytest.mark.parametrize("destination", ["stderr", "stdout", "/var/log/sourceimpact.log"])
    def test_valid_destinations(self, destination: str) -> None:
        assert LogOutputConfig(destination=destination).destination == destination

    def test_relative_path_fails(self) -> None:
        with pytest.raises(ValidationError, match="absolute path"):
            LogOutputConfig(destination="relative/path.log")

    def test_invalid_format_fails(self) -> None:
        with pytest.raises(ValidationError):
            LogOutputConfig(format="xml")  # type: ignore[arg-type]


class TestLoggingConfig:
    """Tests for LoggingConfig model."""

    def test_defaults(self) -> None:
        config = LoggingConfig()
        assert config.level == "INFO"
        assert len(config.outputs) == 1
        assert config.outputs[0].destination == "stderr"

    def test_invalid_level_fails(self) -> None:
        with pytest.raises(ValidationError):
            LoggingConfig(level="VERBOSE")  # type: ignore[arg-type]


class TestSimilarityConfig:
    """Tests for SimilarityConfig model."""

    def test_defaults(self) -> None:
        config = SimilarityConfig()
        assert config.enabled is True
        assert config.timeout_sec == 5.0
        assert config.max_workers == 4

    @pytest.mark.parametrize("timeout", [0, -0.5])
    def test_non_positive_timeout_fails(self, timeout: float) -> None:
        with pytest.raises(ValidationError, match="Timeout must be positive"):
            SimilarityConfig(timeout_sec=timeout)

    def test_zero_workers_fails(self) -> None:
        with pytest.raises(ValidationError, match="max_workers must be >= 1"):
            SimilarityConfig(max_workers=0)


class TestSourceImpactConfig:
    """Tests for the root config model."""

    def test_defaults_compose_sections(self) -> None:
        config = SourceImpactConfig()
        assert isinstance(config.logging, LoggingConfig)
        assert isinstance(config.similarity, SimilarityConfig)

    def test_model_validate_from_dict(self) -> None:
        config = SourceImpactConfig.model_validate(
            {"similarity": {"enabled": False}, "logging": {"level": "DEBUG"}}
        )
        assert config.similarity.enabled is False
        assert config.logging.level == "DEBUG"
