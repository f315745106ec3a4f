"""LLM service abstraction layer for ENEM Genius.

This package provides a unified interface for multiple LLM providers:
- GeminiService: Google Gemini API
- OllamaService: Local LLM via Ollama

All services implement the LLMService protocol and return an LLMResult
(LLMSuccess, LLMError or LLMRateLimited) instead of raising.

Usage:
    from enemgenius.llm import get_llm_service, GenerationOptions

    service = get_llm_service()
    result = await service.generate(prompt, GenerationOptions(json_output=True))
"""

from enemgenius.llm.base import (
    GenerationOptions,
    LLMError,
    LLMRateLimited,
    LLMResult,
    LLMService,
    LLMSuccess,
)
from enemgenius.llm.factory import get_llm_service
from enemgenius.llm.gemini import GeminiService
from enemgenius.llm.ollama import OllamaService

__all__ = [
    "GenerationOptions",
    "LLMError",
    "LLMRateLimited",
    "LLMResult",
    "LLMService",
    "LLMSuccess",
    "GeminiService",
    "OllamaService",
    "get_llm_service",
]
