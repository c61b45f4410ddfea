"""Google Gemini LLM provider adapter.

Wraps the ``google-genai`` client to implement :class:`ILLMProvider`.
Gemini is the default backend for fact-sheet generation: the lite flash
model is fast and cheap enough to call twice (once per locale) on every
cold species.

Differences from the OpenAI and Anthropic adapters:
    - The async surface lives under ``client.aio``
    - System prompt, temperature and token limit travel together in a
      ``GenerateContentConfig`` rather than as separate kwargs
    - ``response.text`` concatenates the text parts for us and may be
      ``None`` when the model was blocked or produced nothing
"""

from __future__ import annotations

import httpx
import structlog
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from src.config.settings import Settings
from src.interfaces.llm_provider import ILLMProvider
from src.utils.errors import LLMError

logger = structlog.get_logger(logger_name=__name__)


class GeminiLLMProvider(ILLMProvider):
    """LLM provider backed by the Gemini API.

    The client is only constructed when an API key is configured, so an
    unconfigured provider can still be built and report
    ``is_available() == False``.
    """

    def __init__(self, settings: Settings) -> None:
        self._api_key = settings.gemini_api_key
        self._model = settings.gemini_model
        self._client: genai.Client | None = (
            genai.Client(api_key=self._api_key) if self._api_key else None
        )

    # ------------------------------------------------------------------
    # ILLMProvider implementation
    # ------------------------------------------------------------------

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.3,
        max_tokens: int = 2048,
    ) -> str:
        """Generate a text completion via ``models.generate_content``."""
        if self._client is None:
            raise LLMError(
                message="Gemini API key is not configured",
                provider_name=self.get_provider_name(),
            )
        try:
            response = await self._client.aio.models.generate_content(
                model=self._model,
                contents=user_prompt,
                config=types.GenerateContentConfig(
                    system_instruction=system_prompt,
                    temperature=temperature,
                    max_output_tokens=max_tokens,
                ),
            )
        except genai_errors.APIError as exc:
            raise LLMError(
                message=f"Gemini API error: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        except httpx.HTTPError as exc:
            # google-genai lets transport failures through unwrapped
            raise LLMError(
                message=f"Gemini request failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        text = response.text or ""
        usage = response.usage_metadata
        logger.info(
            "gemini_completion",
            model=self._model,
            prompt_tokens=usage.prompt_token_count if usage else None,
            output_tokens=usage.candidates_token_count if usage else None,
        )
        return text

    def is_available(self) -> bool:
        """Return ``True`` if a Gemini API key is configured."""
        return self._client is not None

    def get_provider_name(self) -> str:
        return "gemini"
