"""Ollama LLM service implementation."""

import logging
from typing import Any

import ollama

from enemgenius.llm.base import (
    ERROR_MESSAGE_PREFIX,
    GenerationOptions,
    LLMError,
    LLMRateLimited,
    LLMResult,
    LLMSuccess,
)

logger = logging.getLogger(__name__)


class OllamaService:
    """Ollama LLM service implementation.

    This service uses the Ollama API to generate question text with local models.
    """

    def __init__(self, host: str, model: str) -> None:
        """Initialize the Ollama service.

        Args:
            host: The Ollama server host URL (e.g., "http://localhost:11434")
            model: The model name to use (e.g., "llama3")
        """
        self.host = host
        self.model = model
        logger.info(f"🤖 Initializing OllamaService: host={host}, model={model}")
        self.client = ollama.Client(host=host)

    async def generate(self, prompt: str, options: GenerationOptions | None = None) -> LLMResult:
        """Generate a completion using Ollama.

        Args:
            prompt: The full prompt text
            options: Optional generation options (JSON mode, system instruction, temperature)

        Returns:
            LLMResult: The decoded provider result.
        """
        options = options or GenerationOptions()
        logger.info(f"🗣️  Generating response with {self.model}")

        messages = []
        if options.system_instruction:
            messages.append({"role": "system", "content": options.system_instruction})
        messages.append({"role": "user", "content": prompt})

        chat_kwargs: dict[str, Any] = {"model": self.model, "messages": messages}
        if options.json_output:
            chat_kwargs["format"] = "json"
        if options.temperature is not None:
            chat_kwargs["options"] = {"temperature": options.temperature}

        try:
            response = self.client.chat(**chat_kwargs)
        except ollama.ResponseError as e:
            if e.status_code == 429:
                logger.warning(f"⚠️ Ollama rate limit reached: {e.error}")
                return LLMRateLimited(message=f"{ERROR_MESSAGE_PREFIX}: limite de requisições atingido.")
            logger.error(f"❌ Ollama API error: {e}", exc_info=True)
            return LLMError(message=f"{ERROR_MESSAGE_PREFIX}: {e.error}")
        except Exception as e:
            logger.error(f"❌ Ollama API error: {e}", exc_info=True)
            return LLMError(message=f"{ERROR_MESSAGE_PREFIX}: {e}")

        content = response.message.content or ""
        if not content:
            logger.warning("⚠️ Ollama returned an empty response")
            return LLMError(message=f"{ERROR_MESSAGE_PREFIX}: resposta vazia.")

        logger.info(f"✅ Response generated: {len(content)} characters")
        return LLMSuccess(text=content)
