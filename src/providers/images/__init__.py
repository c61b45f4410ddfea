"""Plant image provider adapters, in fallback order."""

from src.providers.images.trefle_provider import TrefleImageProvider
from src.providers.images.wikipedia_provider import WikipediaImageProvider

__all__ = ["TrefleImageProvider", "WikipediaImageProvider"]
