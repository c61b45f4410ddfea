"""Public interface definitions for every external service Leafee talks to.

Business logic (the services and the resolution pipeline) only ever sees
these abstract base classes.  Concrete adapters live in ``src/providers/``
and are wired together once in ``src/main.py``, so swapping Gemini for
Claude, or SQLite for another store, touches a single construction site.
Unit tests inject mocks built with ``MagicMock(spec=...)`` against the
same contracts.

CONCRETE PROVIDER MAP:
    Interface          ->  Concrete implementations (in src/providers/)
    ------------------------------------------------------------------
    ILLMProvider       ->  GeminiLLMProvider, AnthropicLLMProvider,
                           OpenAILLMProvider
    IImageProvider     ->  TrefleImageProvider, WikipediaImageProvider
    IPlantStore        ->  SQLitePlantStore
    ICacheProvider     ->  MemoryCacheProvider
    IWebhookNotifier   ->  HttpWebhookNotifier
"""

from src.interfaces.cache_provider import ICacheProvider
from src.interfaces.image_provider import IImageProvider
from src.interfaces.llm_provider import ILLMProvider
from src.interfaces.plant_store import IPlantStore
from src.interfaces.webhook_notifier import IWebhookNotifier

__all__ = [
    "ICacheProvider",
    "IImageProvider",
    "ILLMProvider",
    "IPlantStore",
    "IWebhookNotifier",
]
