"""Domain models for questions, exams and knowledge files.

Serialized forms use the camelCase keys of the application's storage format.
"""

import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Literal

from enemgenius.rag.models import IndexedChunk

QuestionType = Literal["objective", "subjective"]


def new_id() -> str:
    """Generate a unique identifier for a stored entity."""
    return str(uuid.uuid4())


def now_ms() -> int:
    """Current time as a millisecond timestamp."""
    return int(time.time() * 1000)


@dataclass
class Question:
    """An ENEM-style question.

    Objective questions carry options and the index of the correct one;
    subjective questions carry the expected answer.
    """

    stem: str
    type: QuestionType
    discipline: str
    bloom_level: str
    construction_type: str
    difficulty: str
    school_year: str
    options: list[str] | None = None
    answer_index: int | None = None
    expected_answer: str | None = None
    topics: list[str] = field(default_factory=list)
    favorited: bool = False
    id: str = field(default_factory=new_id)
    creation_date: int = field(default_factory=now_ms)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "stem": self.stem,
            "type": self.type,
            "favorited": self.favorited,
            "discipline": self.discipline,
            "bloomLevel": self.bloom_level,
            "constructionType": self.construction_type,
            "difficulty": self.difficulty,
            "schoolYear": self.school_year,
            "topics": list(self.topics),
            "creationDate": self.creation_date,
        }
        if self.options is not None:
            data["options"] = list(self.options)
        if self.answer_index is not None:
            data["answerIndex"] = self.answer_index
        if self.expected_answer is not None:
            data["expectedAnswer"] = self.expected_answer
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Question":
        return cls(
            id=data.get("id") or new_id(),
            stem=data.get("stem", ""),
            type=data.get("type", "objective"),
            options=data.get("options"),
            answer_index=data.get("answerIndex"),
            expected_answer=data.get("expectedAnswer"),
            favorited=bool(data.get("favorited", False)),
            discipline=data.get("discipline", ""),
            bloom_level=data.get("bloomLevel", ""),
            construction_type=data.get("constructionType", ""),
            difficulty=data.get("difficulty", ""),
            school_year=data.get("schoolYear", ""),
            topics=list(data.get("topics") or []),
            creation_date=int(data.get("creationDate") or now_ms()),
        )


@dataclass
class ExamOptions:
    """Options chosen when an exam document is produced."""

    include_options: bool = True
    include_answer_key: bool = False


@dataclass
class Exam:
    """A named, ordered selection of questions."""

    name: str
    question_ids: list[str] = field(default_factory=list)
    generation_options: ExamOptions | None = None
    id: str = field(default_factory=new_id)
    creation_date: int = field(default_factory=now_ms)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "questionIds": list(self.question_ids),
            "creationDate": self.creation_date,
        }
        if self.generation_options is not None:
            data["generationOptions"] = {
                "includeOptions": self.generation_options.include_options,
                "includeAnswerKey": self.generation_options.include_answer_key,
            }
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Exam":
        options = data.get("generationOptions")
        return cls(
            id=data.get("id") or new_id(),
            name=data.get("name", ""),
            question_ids=list(data.get("questionIds") or []),
            creation_date=int(data.get("creationDate") or now_ms()),
            generation_options=ExamOptions(
                include_options=bool(options.get("includeOptions", True)),
                include_answer_key=bool(options.get("includeAnswerKey", False)),
            )
            if options
            else None,
        )


@dataclass
class KnowledgeFile:
    """Metadata of an uploaded knowledge document."""

    id: str
    name: str
    is_selected: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "isSelected": self.is_selected}


@dataclass
class KnowledgeFileWithContent(KnowledgeFile):
    """A knowledge document together with its indexed chunks."""

    indexed_chunks: list[IndexedChunk] = field(default_factory=list)

    def meta(self) -> KnowledgeFile:
        return KnowledgeFile(id=self.id, name=self.name, is_selected=self.is_selected)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["indexedChunks"] = [chunk.to_dict() for chunk in self.indexed_chunks]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "KnowledgeFileWithContent":
        return cls(
            id=data.get("id") or new_id(),
            name=data.get("name", ""),
            is_selected=bool(data.get("isSelected", False)),
            indexed_chunks=[IndexedChunk.from_dict(c) for c in data.get("indexedChunks") or []],
        )
