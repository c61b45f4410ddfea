"""Utility modules for Leafee.

- **errors** -- exception hierarchy rooted at LeafeeError; each class also
  carries the HTTP status the API maps it to.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
- **locale** -- picks the detail locale from request headers.
"""

# -- Domain exception hierarchy --------------------------------------------
from src.utils.errors import (
    ConfigurationError,
    DetailsUnavailableError,
    InvalidRequestError,
    LeafeeError,
    LLMError,
    ProviderUnavailableError,
    StoreError,
)

# -- Locale negotiation ----------------------------------------------------
from src.utils.locale import resolve_locale

# -- Structured logging setup ----------------------------------------------
from src.utils.logging import configure_logging, get_logger

__all__ = [
    "ConfigurationError",
    "DetailsUnavailableError",
    "InvalidRequestError",
    "LLMError",
    "LeafeeError",
    "ProviderUnavailableError",
    "StoreError",
    "configure_logging",
    "get_logger",
    "resolve_locale",
]
