"""Entities stored in RavenDB."""

from dataclasses import dataclass, field
from typing import Any

from enemgenius.models import KnowledgeFileWithContent

KNOWLEDGE_COLLECTION = "KnowledgeFiles"
QUESTION_COLLECTION = "Questions"
EXAM_COLLECTION = "Exams"
ALL_COLLECTIONS = (KNOWLEDGE_COLLECTION, QUESTION_COLLECTION, EXAM_COLLECTION)


def document_id(collection: str, entity_id: str) -> str:
    """Build the RavenDB document ID for an entity."""
    return f"{collection}/{entity_id}"


@dataclass(eq=False)
class KnowledgeFileDocument:
    """A knowledge file with its indexed chunks, as stored in RavenDB.

    Note: eq=False ensures each instance is unique and hashable by identity,
    which is required for RavenDB's session entity tracking.

    Attributes:
        Id: RavenDB document ID
        file_id: Application-level identifier of the file
        name: Display name (original filename)
        is_selected: Whether the file takes part in retrieval
        indexed_chunks: Chunks as {"text", "tfIndex"} dictionaries
    """

    Id: str | None = None
    file_id: str = ""
    name: str = ""
    is_selected: bool = False
    indexed_chunks: list[dict[str, Any]] = field(default_factory=list)

    def __hash__(self) -> int:
        """Hash by object identity for RavenDB session tracking."""
        return id(self)

    @classmethod
    def from_model(cls, file: KnowledgeFileWithContent) -> "KnowledgeFileDocument":
        return cls(
            Id=document_id(KNOWLEDGE_COLLECTION, file.id),
            file_id=file.id,
            name=file.name,
            is_selected=file.is_selected,
            indexed_chunks=[chunk.to_dict() for chunk in file.indexed_chunks],
        )

    def to_model(self) -> KnowledgeFileWithContent:
        return KnowledgeFileWithContent.from_dict(
            {
                "id": self.file_id,
                "name": self.name,
                "isSelected": self.is_selected,
                "indexedChunks": self.indexed_chunks,
            }
        )


@dataclass(eq=False)
class RecordDocument:
    """A question or exam stored as its serialized dictionary.

    Attributes:
        Id: RavenDB document ID
        payload: Output of the model's to_dict()
    """

    Id: str | None = None
    payload: dict[str, Any] = field(default_factory=dict)

    def __hash__(self) -> int:
        """Hash by object identity for RavenDB session tracking."""
        return id(self)
