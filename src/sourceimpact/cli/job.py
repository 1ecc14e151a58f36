"""Job file schema for ``sci analyze``.

A job file is YAML (or JSON, which YAML accepts) describing one source
update::

    source_id: logging-policy
    old_text: "The system shall log all errors."
    new_text: "The system shall log all errors and warnings."
    old_chunks:
      - {id: c1, content: "The system shall log all errors.", index: 0, embedding: [0.1, 0.9]}
    new_chunks:
      - {id: c2, content: "The system shall log all errors and warnings.", index: 0}

``source_id`` is optional and tags the analysis log events; ``sci analyze``
falls back to the job file name.
"""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from sourceimpact.engine.models import SourceChunk
from sourceimpact.engine.similarity import VersionPairIndex


class JobError(Exception):
    """Job file could not be read or validated."""


class JobChunk(BaseModel):
    id: str
    content: str
    index: int = 0
    embedding: list[float] | None = None

    def to_chunk(self) -> SourceChunk:
        return SourceChunk(id=self.id, content=self.content, index=self.index)


class AnalysisJob(BaseModel):
    source_id: str | None = None
    old_text: str
    new_text: str
    old_chunks: list[JobChunk] = Field(default_factory=list)
    new_chunks: list[JobChunk] = Field(default_factory=list)

    def ordered_chunks(self, side: str) -> list[SourceChunk]:
        """Chunks of one side sorted by their index, as the engine expects."""
        chunks = self.old_chunks if side == "old" else self.new_chunks
        return [c.to_chunk() for c in sorted(chunks, key=lambda c: c.index)]


    def similarity_index(self) -> VersionPairIndex | None:
        """Index over the chunks that carry embeddings, or None if none do."""
        old_pairs = [(c.id, c.embedding) for c in self.old_chunks if c.embedding is not None]
        new_pairs = [(c.id, c.embedding) for c in self.new_chunks if c.embedding is not None]
        if not old_pairs and not new_pairs:
            return None
        return VersionPairIndex.from_pairs(old_pairs, new_pairs)


def load_job(path: Path) -> AnalysisJob:
    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise JobError(f"{path}: not valid YAML/JSON: {e}") from e
    if not isinstance(data, dict):
        raise JobError(f"{path}: expected a mapping at top level")
    try:
        return AnalysisJob.model_validate(data)
    except ValidationError as e:
        err = e.errors()[0]
        loc = ".".join(str(part) for part in err["loc"])
        raise JobError(f"{path}: invalid field '{loc}': {err['msg']}") from e
