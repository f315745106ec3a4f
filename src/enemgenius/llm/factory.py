"""Selection of the LLM provider used for question generation."""

import logging
import os

from dotenv import load_dotenv

from enemgenius.constants import (
    DEFAULT_GEMINI_MODEL,
    DEFAULT_LLM_SERVICE,
    DEFAULT_OLLAMA_HOST,
    DEFAULT_OLLAMA_MODEL,
)
from enemgenius.llm.base import LLMService
from enemgenius.llm.gemini import GeminiService
from enemgenius.llm.ollama import OllamaService

load_dotenv()

logger = logging.getLogger(__name__)

SUPPORTED_SERVICES = ("gemini", "ollama")


def get_llm_service(config: dict | None = None) -> LLMService:
    """Build the configured LLM service.

    Args:
        config: Overrides for the environment. Keys: 'service' (LLM_SERVICE,
            default gemini), 'model' (LLM_MODEL, default per provider),
            'host' (OLLAMA_HOST, Ollama only), 'api_key' (Gemini only;
            otherwise google-genai reads GEMINI_API_KEY itself)

    Raises:
        ValueError: For a service other than gemini or ollama
    """
    config = config or {}
    service_type = config.get("service") or os.getenv("LLM_SERVICE", DEFAULT_LLM_SERVICE)
    service_type = service_type.strip().lower()
    model = config.get("model") or os.getenv("LLM_MODEL")

    if service_type not in SUPPORTED_SERVICES:
        raise ValueError(
            f"Unsupported service type: {service_type} "
            f"(expected one of {', '.join(SUPPORTED_SERVICES)})"
        )

    logger.info(f"🧠 Using LLM service '{service_type}'")
    if service_type == "gemini":
        return GeminiService(model=model or DEFAULT_GEMINI_MODEL, api_key=config.get("api_key"))

    host = config.get("host") or os.getenv("OLLAMA_HOST", DEFAULT_OLLAMA_HOST)
    return OllamaService(host=host, model=model or DEFAULT_OLLAMA_MODEL)
