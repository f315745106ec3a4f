"""Pytest configuration and shared fixtures for the test suite."""

from unittest.mock import MagicMock

import pytest
import requests

from enemgenius.models import KnowledgeFileWithContent, Question
from enemgenius.rag import index_chunks


# Service availability checks
def ollama_available() -> bool:
    """Check if Ollama server is running and accessible.

    Returns:
        True if Ollama is available, False otherwise
    """
    try:
        response = requests.get("http://localhost:11434/api/tags", timeout=2)
        return response.status_code == 200
    except requests.RequestException:
        return False


def ravendb_available() -> bool:
    """Check if RavenDB server is running and accessible.

    Returns:
        True if RavenDB is available, False otherwise
    """
    try:
        response = requests.get("http://localhost:8080/databases", timeout=2)
        return response.status_code in (200, 401)  # Auth required is OK
    except requests.RequestException:
        return False


# Service fixtures with skip markers
@pytest.fixture
def ollama_service():
    """Provide OllamaService instance, skip if Ollama not available."""
    if not ollama_available():
        pytest.skip("Ollama server not running on localhost:11434")

    from enemgenius.llm import OllamaService

    return OllamaService(host="http://localhost:11434", model="llama3")


@pytest.fixture
def knowledge_store(tmp_path):
    """Provide a KnowledgeStore on a throwaway database, skip if RavenDB not available."""
    if not ravendb_available():
        pytest.skip("RavenDB server not running on localhost:8080")

    from enemgenius.service.database import (
        KnowledgeStore,
        create_database,
        database_exists,
        delete_database,
    )

    db_name = f"test_enemgenius_{tmp_path.name}"
    if not database_exists(database=db_name):
        create_database(database=db_name)
    store = KnowledgeStore(database=db_name).init()
    yield store
    store.close()
    delete_database(database=db_name)


# Test data
HISTORY_TEXT = (
    "A Revolução Industrial começou na Inglaterra no século XVIII.\n\n"
    "As fábricas transformaram o trabalho artesanal e aceleraram a urbanização.\n\n"
    "- máquina a vapor\n"
    "- tear mecânico\n"
    "- ferrovias"
)


@pytest.fixture
def history_text() -> str:
    """A short Portuguese history passage with a list."""
    return HISTORY_TEXT


@pytest.fixture
def create_knowledge_file():
    """Factory fixture to create indexed knowledge files.

    Returns:
        Function that builds a KnowledgeFileWithContent from chunk texts
    """

    def _create(
        texts: list[str],
        file_id: str = "file-1",
        name: str = "material.txt",
        is_selected: bool = True,
    ) -> KnowledgeFileWithContent:
        return KnowledgeFileWithContent(
            id=file_id,
            name=name,
            is_selected=is_selected,
            indexed_chunks=index_chunks(texts),
        )

    return _create


@pytest.fixture
def create_question():
    """Factory fixture to create objective questions."""

    def _create(question_id: str = "q-1", stem: str = "Qual é a capital do Brasil?", **kwargs):
        defaults = {
            "type": "objective",
            "discipline": "Geografia",
            "bloom_level": "Lembrar",
            "construction_type": "Interpretação",
            "difficulty": "Fácil",
            "school_year": "1ª Série do Ensino Médio",
            "options": ["Rio de Janeiro", "Brasília", "Salvador", "São Paulo", "Recife"],
            "answer_index": 1,
        }
        defaults.update(kwargs)
        return Question(id=question_id, stem=stem, **defaults)

    return _create


@pytest.fixture
def mock_store():
    """A MagicMock standing in for an initialized KnowledgeStore."""
    store = MagicMock()
    store.get_selected_files.return_value = []
    store.get_all_files_meta.return_value = []
    store.get_questions.return_value = []
    store.get_question.return_value = None
    store.get_exams.return_value = []
    return store
