"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (SOURCEIMPACT__SECTION__KEY)
3. Project YAML (.sourceimpact/config.yaml)
4. Global YAML (~/.config/sourceimpact/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    SOURCEIMPACT__<SECTION>__<KEY>=<VALUE>

Examples:
    SOURCEIMPACT__LOGGING__LEVEL=DEBUG
    SOURCEIMPACT__SIMILARITY__TIMEOUT_SEC=2.5
    SOURCEIMPACT__SIMILARITY__MAX_WORKERS=8
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        SOURCEIMPACT__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every region and mapping count.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class SimilarityConfig(BaseModel):
    """Vector-similarity fallback configuration.

    Env vars:
        SOURCEIMPACT__SIMILARITY__ENABLED: Use the similarity fallback at all
        SOURCEIMPACT__SIMILARITY__TIMEOUT_SEC: Bounded wait for all lookups of one call
        SOURCEIMPACT__SIMILARITY__MAX_WORKERS: Parallel lookups
    """

    enabled: bool = Field(
        default=True,
        description="Fall back to embedding similarity when the textual match is weak.",
    )
    timeout_sec: float = Field(
        default=5.0,
        description="Shared deadline for the fallback lookups of one alignment call. "
        "Lookups still running at the deadline count as 'no match'.",
    )
    max_workers: int = Field(
        default=4,
        description="Concurrent similarity lookups. "
        "RISK: High values may overload a remote vector store.",
    )

    @field_validator("timeout_sec")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"Timeout must be positive, got {v}")
        return v

    @field_validator("max_workers")
    @classmethod
    def validate_max_workers(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"max_workers must be >= 1, got {v}")
        return v


class SourceImpactConfig(BaseModel):
    """Root configuration for the source impact engine.

    All settings can be configured via:
    1. Environment variables: SOURCEIMPACT__SECTION__KEY
    2. YAML config files (project or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    similarity: SimilarityConfig = Field(default_factory=SimilarityConfig)
