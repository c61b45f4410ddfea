"""Abstract base class for LLM service providers.

Defines the contract for any large-language-model backend used to generate
botanical fact sheets.  Implementations wrap Google Gemini, Anthropic
(Claude) or an OpenAI-compatible API.  Call sites depend only on this
interface, so the backend is chosen once at start-up in ``src.main``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementations: GeminiLLMProvider, AnthropicLLMProvider, OpenAILLMProvider
# Located in: src/providers/llm/
class ILLMProvider(ABC):
    """Contract for text-generation LLM services."""

    @abstractmethod
    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.3,
        max_tokens: int = 2048,
    ) -> str:
        """Generate a text completion from the model.

        Parameters
        ----------
        system_prompt:
            The system/instruction message that sets the model's behaviour.
        user_prompt:
            The prompt containing the actual request.
        temperature:
            Sampling temperature (0.0 = deterministic, 1.0 = creative).
        max_tokens:
            Upper bound on the number of tokens in the response.

        Returns
        -------
        str
            The model's text response.  May be empty if the model produced
            no text.

        Raises
        ------
        src.utils.errors.LLMError
            If the API call fails.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier for this provider, e.g. ``"gemini"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider has credentials configured.

        Does not contact the remote service.
        """
