"""Data models for source change impact.

All models are plain frozen dataclasses with no storage coupling.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class DiffType(str, Enum):
    """Change classification shared by diff regions and chunk mappings."""

    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"


class Severity(str, Enum):
    """How disruptive a source change is to already-generated content."""

    MINOR = "minor"
    MODERATE = "moderate"
    MAJOR = "major"


class AnalysisStatus(str, Enum):
    COMPLETED = "completed"
    NO_CHANGES = "no_changes"


@dataclass(frozen=True, slots=True)
class DiffRegion:
    """A contiguous changed span between two versions of a text.

    Offset spaces differ per kind: ``added`` offsets index the new text,
    ``removed`` and ``modified`` offsets start in the old text.  A
    ``modified`` region ends at ``start + len(replaced_text) + len(text)``.

    ``insert_at`` is the old-text offset an ``added`` run was inserted at,
    which lets an insertion be attributed to the old chunk it landed in.
    """

    kind: DiffType
    start_offset: int
    end_offset: int
    text: str
    replaced_text: str = ""  # deleted text for removed/modified regions
    insert_at: int | None = None  # added regions only


@dataclass(frozen=True, slots=True)
class SourceChunk:
    """An ordered, pre-segmented unit of a source version."""

    id: str
    content: str
    index: int = 0


@dataclass(frozen=True, slots=True)
class ChunkSpan:
    """Character span ``[start, end)`` of a chunk inside its full text."""

    chunk_id: str
    start: int
    end: int


@dataclass(frozen=True, slots=True)
class ChunkMapping:
    """Correspondence between an old chunk and a new chunk.

    Shapes:
    - removed: ``old_chunk_id`` only
    - added: ``new_chunk_id`` only
    - modified: both ids

    ``similarity_score`` is only set when the match came from the vector
    similarity fallback; textual matches leave it ``None``.
    """

    diff_type: DiffType
    old_chunk_id: str | None = None
    new_chunk_id: str | None = None
    similarity_score: float | None = None

    def __post_init__(self) -> None:
        has_old = self.old_chunk_id is not None
        has_new = self.new_chunk_id is not None
        expected = {
            DiffType.REMOVED: (True, False),
            DiffType.ADDED: (False, True),
            DiffType.MODIFIED: (True, True),
        }[self.diff_type]
        if (has_old, has_new) != expected:
            raise ValueError(
                f"{self.diff_type.value} mapping requires "
                f"old_chunk_id={'set' if expected[0] else 'None'} and "
                f"new_chunk_id={'set' if expected[1] else 'None'}"
            )

    def to_dict(self) -> dict[str, object]:
        return {
            "old_chunk_id": self.old_chunk_id,
            "new_chunk_id": self.new_chunk_id,
            "diff_type": self.diff_type.value,
            "similarity_score": self.similarity_score,
        }


@dataclass(frozen=True, slots=True)
class ImpactAnalysis:
    """Result of analysing one source update."""

    status: AnalysisStatus
    regions: list[DiffRegion] = field(default_factory=list)
    mappings: list[ChunkMapping] = field(default_factory=list)
    changed_chunk_ids: list[str] = field(default_factory=list)
