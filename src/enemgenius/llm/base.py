"""Base classes and protocols for LLM services."""

from dataclasses import dataclass
from typing import Literal, Protocol

ERROR_MESSAGE_PREFIX = "Falha ao se comunicar com o serviço de IA"


@dataclass(frozen=True)
class GenerationOptions:
    """Per-request options for text generation.

    Attributes:
        json_output: Ask the provider to answer with JSON only
        system_instruction: Optional system prompt
        temperature: Sampling temperature (None keeps the provider default)
    """

    json_output: bool = False
    system_instruction: str | None = None
    temperature: float | None = None


@dataclass(frozen=True)
class LLMSuccess:
    """Generated text returned by the provider."""

    text: str
    status: Literal["success"] = "success"


@dataclass(frozen=True)
class LLMError:
    """The provider call failed."""

    message: str
    status: Literal["error"] = "error"


@dataclass(frozen=True)
class LLMRateLimited:
    """The provider rejected the call because of rate limiting."""

    message: str
    retry_after: float | None = None
    status: Literal["rate_limited"] = "rate_limited"


LLMResult = LLMSuccess | LLMError | LLMRateLimited


class LLMService(Protocol):
    """Protocol defining the interface for LLM services.

    Implementations decode the provider response once and return one of the
    LLMResult variants instead of raising, so callers never handle
    provider-specific exceptions or response shapes.
    """

    async def generate(self, prompt: str, options: GenerationOptions | None = None) -> LLMResult:
        """Generate a completion for a prompt.

        Args:
            prompt: The full prompt text
            options: Optional generation options

        Returns:
            LLMResult: LLMSuccess with the text, LLMRateLimited, or LLMError.
        """
        ...
