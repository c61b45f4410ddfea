"""LLM provider adapters.

Three concrete implementations of ILLMProvider (src/interfaces/llm_provider.py):
    - GeminiLLMProvider    -- gemini-flash-lite-latest (default)
    - AnthropicLLMProvider -- Claude Sonnet
    - OpenAILLMProvider    -- gpt-4o-mini (also OpenAI-compatible APIs)

At startup, main.py builds the first provider whose API key is configured,
in the order above, and injects it into the detail generator.
"""

from src.providers.llm.anthropic_provider import AnthropicLLMProvider
from src.providers.llm.gemini_provider import GeminiLLMProvider
from src.providers.llm.openai_provider import OpenAILLMProvider

__all__ = ["AnthropicLLMProvider", "GeminiLLMProvider", "OpenAILLMProvider"]
