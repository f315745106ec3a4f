"""Application-wide constants and defaults for ENEM Genius.

This module provides a single source of truth for configuration defaults,
curriculum vocabularies, and other constants used throughout the application.
"""

import os

# =============================================================================
# File Upload Limits
# =============================================================================
MAX_UPLOAD_SIZE_BYTES = 50 * 1024 * 1024  # 50MB
ALLOWED_EXTENSIONS = {"pdf", "docx", "txt", "md"}

# =============================================================================
# Retrieval Settings
# =============================================================================
DEFAULT_MAX_CHUNK_SIZE = 1800  # Characters per chunk
DEFAULT_MAX_CONTEXT_LENGTH = 12000  # Characters of document context per prompt
DEFAULT_FALLBACK_CHUNK_COUNT = 5  # Chunks used when no chunk matches the query
CONTEXT_SEPARATOR = "\n\n"

# =============================================================================
# LLM Settings
# =============================================================================
DEFAULT_LLM_SERVICE = "gemini"
DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
DEFAULT_OLLAMA_MODEL = "llama3"
DEFAULT_TEMPERATURE = 0.7

# =============================================================================
# Display Settings
# =============================================================================
CONTENT_PREVIEW_LENGTH = 200  # Characters to show in content previews

# =============================================================================
# Default URLs and Hosts
# =============================================================================
DEFAULT_OLLAMA_HOST = "http://localhost:11434"
DEFAULT_LOCAL_MCP_URL = "http://localhost:8001/sse"
DEFAULT_RAVENDB_URL = "http://localhost:8080"
DEFAULT_RAVENDB_DATABASE = "enemgenius"

# =============================================================================
# Curriculum
# =============================================================================
KNOWLEDGE_AREAS: dict[str, list[str]] = {
    "Linguagens, Códigos e suas Tecnologias": [
        "Língua Portuguesa",
        "Literatura",
        "Língua Estrangeira (Inglês)",
        "Língua Estrangeira (Espanhol)",
        "Artes",
        "Educação Física",
        "Tecnologias da Informação e Comunicação",
    ],
    "Matemática e suas Tecnologias": ["Matemática"],
    "Ciências da Natureza e suas Tecnologias": ["Física", "Química", "Biologia"],
    "Ciências Humanas e Sociais Aplicadas": ["História", "Geografia", "Filosofia", "Sociologia"],
}

ALL_DISCIPLINES = [discipline for disciplines in KNOWLEDGE_AREAS.values() for discipline in disciplines]

DISCIPLINE_TO_AREA_MAP = {
    discipline: area for area, disciplines in KNOWLEDGE_AREAS.items() for discipline in disciplines
}

BLOOM_LEVELS = ["Lembrar", "Entender", "Aplicar", "Analisar", "Avaliar", "Criar"]

CONSTRUCTION_TYPES = [
    "Interpretação",
    "Cálculo",
    "Associação de ideias",
    "Asserção/razão (adaptado)",
    "Interdisciplinaridade",
    "Atualidades/contexto social",
    "Experimentos",
    "Textos culturais/literários",
]

DIFFICULTY_LEVELS = ["Fácil", "Médio", "Difícil"]

SCHOOL_YEARS = [
    "1ª Série do Ensino Médio",
    "2ª Série do Ensino Médio",
    "3ª Série do Ensino Médio",
]


def _get_int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def get_max_chunk_size() -> int:
    """Get the maximum chunk size used when ingesting documents.

    Checks the MAX_CHUNK_SIZE environment variable first, then falls back
    to DEFAULT_MAX_CHUNK_SIZE.

    Returns:
        int: Maximum chunk size in characters.
    """
    return _get_int_env("MAX_CHUNK_SIZE", DEFAULT_MAX_CHUNK_SIZE)


def get_max_context_length() -> int:
    """Get the character budget for document context injected into prompts.

    Checks the MAX_CONTEXT_LENGTH environment variable first, then falls back
    to DEFAULT_MAX_CONTEXT_LENGTH.

    Returns:
        int: Maximum context length in characters.
    """
    return _get_int_env("MAX_CONTEXT_LENGTH", DEFAULT_MAX_CONTEXT_LENGTH)
