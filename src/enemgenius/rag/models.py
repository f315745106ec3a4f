"""Data models for indexed and scored chunks."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class IndexedChunk:
    """A chunk of document text paired with its term-frequency map.

    Created once when a document is ingested and never modified afterwards.

    Attributes:
        text: The chunk text
        tf_index: Mapping of normalized term to its occurrence count in text
    """

    text: str
    tf_index: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text, "tfIndex": dict(self.tf_index)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "IndexedChunk":
        tf_index = data.get("tfIndex", data.get("tf_index")) or {}
        return cls(text=data.get("text", ""), tf_index={k: int(v) for k, v in tf_index.items()})


@dataclass(frozen=True)
class ScoredChunk:
    """Chunk text with its relevance score for one retrieval call."""

    text: str
    score: int
    position: int  # Index in the chunk sequence that was scored
