"""Source impact error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Chunk input
- 4xxx: Similarity lookup
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Chunk input (3xxx)
    CHUNK_DUPLICATE_ID = 3001

    # Similarity lookup (4xxx)
    SIMILARITY_DIMENSION_MISMATCH = 4002
    SIMILARITY_INVALID_EMBEDDING = 4003


@dataclass(frozen=True, slots=True)
class SourceImpactError(Exception):
    """Base error with structured context for callers and logs."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CHUNK_DUPLICATE_ID')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(SourceImpactError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class ChunkInputError(SourceImpactError):
    """Structurally invalid chunk lists. Raised before any alignment work."""

    @classmethod
    def duplicate_id(cls, side: str, chunk_id: str) -> "ChunkInputError":
        return cls(
            code=ErrorCode.CHUNK_DUPLICATE_ID,
            message=f"Duplicate chunk id '{chunk_id}' in {side} chunks",
            details={"side": side, "chunk_id": chunk_id},
        )


class SimilarityLookupError(SourceImpactError):
    """Vector similarity lookup failures.

    The aligner catches these and falls back to the textual match, so they
    never escape an alignment call.
    """

    @classmethod
    def dimension_mismatch(cls, expected: int, actual: int) -> "SimilarityLookupError":
        return cls(
            code=ErrorCode.SIMILARITY_DIMENSION_MISMATCH,
            message=f"Embedding has {actual} dimensions, index expects {expected}",
            details={"expected": expected, "actual": actual},
        )

    @classmethod
    def invalid_embedding(cls, chunk_id: str, reason: str) -> "SimilarityLookupError":
        return cls(
            code=ErrorCode.SIMILARITY_INVALID_EMBEDDING,
            message=f"Invalid embedding for chunk '{chunk_id}': {reason}",
            details={"chunk_id": chunk_id, "reason": reason},
        )
