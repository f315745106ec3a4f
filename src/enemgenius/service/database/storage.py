"""Persistence client for knowledge files, questions and exams."""

import logging

from ravendb import DocumentStore

from enemgenius.models import Exam, KnowledgeFile, KnowledgeFileWithContent, Question
from enemgenius.service.database.config import RavenDBConfig
from enemgenius.service.database.models import (
    EXAM_COLLECTION,
    KNOWLEDGE_COLLECTION,
    QUESTION_COLLECTION,
    KnowledgeFileDocument,
    RecordDocument,
    document_id,
)

logger = logging.getLogger(__name__)


class KnowledgeStore:
    """RavenDB-backed store for the application's data.

    The store is constructed explicitly and passed to whatever needs it; the
    connection is opened by init() and released by close(). It can also be
    used as a context manager.

    Example:
        with KnowledgeStore() as store:
            store.save_file(knowledge_file)
    """

    def __init__(self, url: str | None = None, database: str | None = None) -> None:
        """Configure the store without connecting; missing values come from RavenDBConfig."""
        self.url, self.database = RavenDBConfig.resolve(url, database)
        self._store: DocumentStore | None = None

    def init(self) -> "KnowledgeStore":
        """Open the connection to RavenDB if it is not open yet."""
        if self._store is None:
            store = DocumentStore([self.url], self.database)
            store.initialize()
            self._store = store
            logger.debug(f"Connected to RavenDB database '{self.database}' at {self.url}")
        return self

    def close(self) -> None:
        """Close the connection to RavenDB."""
        if self._store is not None:
            self._store.close()
            self._store = None

    def __enter__(self) -> "KnowledgeStore":
        return self.init()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _session(self):
        if self._store is None:
            raise RuntimeError("KnowledgeStore is not initialized; call init() first")
        return self._store.open_session()

    @staticmethod
    def _store_entity(session, entity, collection: str) -> None:
        session.store(entity, entity.Id)
        metadata = session.advanced.get_metadata_for(entity)
        metadata["@collection"] = collection

    # -------------------------------------------------------------------------
    # Knowledge files
    # -------------------------------------------------------------------------

    def save_file(self, file: KnowledgeFileWithContent) -> None:
        """Store a knowledge file with its indexed chunks, replacing any previous version."""
        with self._session() as session:
            self._store_entity(session, KnowledgeFileDocument.from_model(file), KNOWLEDGE_COLLECTION)
            session.save_changes()
        logger.info(f"💾 Saved knowledge file '{file.name}' ({len(file.indexed_chunks)} chunks)")

    def get_file(self, file_id: str) -> KnowledgeFileWithContent | None:
        """Load a knowledge file with its chunks, or None if it does not exist."""
        with self._session() as session:
            doc = session.load(
                document_id(KNOWLEDGE_COLLECTION, file_id), object_type=KnowledgeFileDocument
            )
            return doc.to_model() if doc is not None else None

    def _all_files(self) -> list[KnowledgeFileWithContent]:
        with self._session() as session:
            docs = list(
                session.query_collection(KNOWLEDGE_COLLECTION, object_type=KnowledgeFileDocument)
            )
            return [doc.to_model() for doc in docs]

    def get_all_files_meta(self) -> list[KnowledgeFile]:
        """List the metadata of every knowledge file."""
        return [file.meta() for file in self._all_files()]

    def get_selected_files(self) -> list[KnowledgeFileWithContent]:
        """Load the knowledge files marked for retrieval, with their chunks."""
        return [file for file in self._all_files() if file.is_selected]

    def set_file_selected(self, file_id: str, selected: bool) -> bool:
        """Mark a knowledge file as selected or not for retrieval.

        Returns:
            bool: False if the file does not exist
        """
        with self._session() as session:
            doc = session.load(
                document_id(KNOWLEDGE_COLLECTION, file_id), object_type=KnowledgeFileDocument
            )
            if doc is None:
                return False
            doc.is_selected = selected
            session.save_changes()
        return True

    def delete_file(self, file_id: str) -> None:
        """Delete a knowledge file and its chunks."""
        with self._session() as session:
            session.delete(document_id(KNOWLEDGE_COLLECTION, file_id))
            session.save_changes()
        logger.info(f"🗑️  Deleted knowledge file {file_id}")

    # -------------------------------------------------------------------------
    # Questions
    # -------------------------------------------------------------------------

    def get_questions(self) -> list[Question]:
        """List all stored questions, newest first."""
        with self._session() as session:
            docs = list(session.query_collection(QUESTION_COLLECTION, object_type=RecordDocument))
        questions = [Question.from_dict(doc.payload) for doc in docs]
        return sorted(questions, key=lambda q: q.creation_date, reverse=True)

    def get_question(self, question_id: str) -> Question | None:
        """Load one question, or None if it does not exist."""
        with self._session() as session:
            doc = session.load(
                document_id(QUESTION_COLLECTION, question_id), object_type=RecordDocument
            )
            return Question.from_dict(doc.payload) if doc is not None else None

    def save_questions(self, questions: list[Question]) -> None:
        """Insert or update questions."""
        with self._session() as session:
            for question in questions:
                entity = RecordDocument(
                    Id=document_id(QUESTION_COLLECTION, question.id), payload=question.to_dict()
                )
                self._store_entity(session, entity, QUESTION_COLLECTION)
            session.save_changes()

    def delete_question(self, question_id: str) -> None:
        with self._session() as session:
            session.delete(document_id(QUESTION_COLLECTION, question_id))
            session.save_changes()

    # -------------------------------------------------------------------------
    # Exams
    # -------------------------------------------------------------------------

    def get_exams(self) -> list[Exam]:
        """List all stored exams, newest first."""
        with self._session() as session:
            docs = list(session.query_collection(EXAM_COLLECTION, object_type=RecordDocument))
        exams = [Exam.from_dict(doc.payload) for doc in docs]
        return sorted(exams, key=lambda e: e.creation_date, reverse=True)

    def save_exam(self, exam: Exam) -> None:
        with self._session() as session:
            entity = RecordDocument(Id=document_id(EXAM_COLLECTION, exam.id), payload=exam.to_dict())
            self._store_entity(session, entity, EXAM_COLLECTION)
            session.save_changes()

    def delete_exam(self, exam_id: str) -> None:
        with self._session() as session:
            session.delete(document_id(EXAM_COLLECTION, exam_id))
            session.save_changes()
