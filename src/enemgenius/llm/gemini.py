"""Google Gemini LLM service implementation."""

import logging

from google import genai
from google.genai import errors

from enemgenius.llm.base import (
    ERROR_MESSAGE_PREFIX,
    GenerationOptions,
    LLMError,
    LLMRateLimited,
    LLMResult,
    LLMSuccess,
)

logger = logging.getLogger(__name__)


class GeminiService:
    """Google Gemini LLM service implementation.

    This service uses the Google Gemini API to generate question text.
    The API key is automatically retrieved from the GEMINI_API_KEY environment
    variable unless one is passed explicitly.
    """

    def __init__(self, model: str, api_key: str | None = None) -> None:
        """Initialize the Gemini service.

        Args:
            model: The model name to use (e.g., "gemini-2.5-flash")
            api_key: Optional API key overriding the environment
        """
        self.model = model
        logger.info(f"🤖 Initializing GeminiService: model={model}")
        self.client = genai.Client(api_key=api_key) if api_key else genai.Client()

    def _build_config(self, options: GenerationOptions) -> genai.types.GenerateContentConfig | None:
        kwargs = {}
        if options.system_instruction:
            kwargs["system_instruction"] = options.system_instruction
        if options.json_output:
            kwargs["response_mime_type"] = "application/json"
        if options.temperature is not None:
            kwargs["temperature"] = options.temperature
        if not kwargs:
            return None
        return genai.types.GenerateContentConfig(**kwargs)

    async def generate(self, prompt: str, options: GenerationOptions | None = None) -> LLMResult:
        """Generate a completion using Gemini.

        Args:
            prompt: The full prompt text
            options: Optional generation options (JSON mode, system instruction, temperature)

        Returns:
            LLMResult: The decoded provider result.
        """
        options = options or GenerationOptions()
        logger.info(f"🗣️  Generating response with {self.model}")
        logger.debug(f"Prompt: {len(prompt)} characters, options={options}")

        generate_kwargs = {"model": self.model, "contents": prompt}
        config = self._build_config(options)
        if config is not None:
            generate_kwargs["config"] = config

        try:
            response = self.client.models.generate_content(**generate_kwargs)
        except errors.APIError as e:
            if e.code == 429:
                logger.warning(f"⚠️ Gemini rate limit reached: {e.message}")
                return LLMRateLimited(message=f"{ERROR_MESSAGE_PREFIX}: limite de requisições atingido.")
            logger.error(f"❌ Gemini API error: {e}", exc_info=True)
            return LLMError(message=f"{ERROR_MESSAGE_PREFIX}: {e.message or e}")
        except Exception as e:
            logger.error(f"❌ Gemini API error: {e}", exc_info=True)
            return LLMError(message=f"{ERROR_MESSAGE_PREFIX}: {e}")

        content = response.text
        if not content:
            logger.warning("⚠️ Gemini returned an empty response")
            return LLMError(message=f"{ERROR_MESSAGE_PREFIX}: resposta vazia.")

        logger.info(f"✅ Response generated: {len(content)} characters")
        return LLMSuccess(text=content)
