"""Application settings loaded from environment variables via pydantic-settings.

Two sources, in priority order:

  1. Environment variables, e.g. ``GEMINI_API_KEY=...`` (always win)
  2. A ``.env`` file in the working directory (local development)

Field ``trefle_api_token`` maps to env var ``TREFLE_API_TOKEN``; defaults
apply when neither source sets a value.  A ``Settings`` instance is built
once at process start and injected into the components that need it.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Leafee application settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # === LLM Providers ===
    # Empty string = "not configured"; main.py picks the first configured
    # provider in the order Gemini -> Anthropic -> OpenAI.
    gemini_api_key: str = ""
    gemini_model: str = "gemini-flash-lite-latest"
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-sonnet-4-20250514"
    openai_api_key: str = ""
    openai_base_url: str = ""  # OpenAI-compatible endpoints (TogetherAI, Groq, ...)
    openai_text_model: str = ""

    # === Image Providers ===
    trefle_api_token: str = ""
    trefle_base_url: str = "https://trefle.io/api/v1"
    trefle_per_category_limit: int = 2
    wikipedia_api_url: str = "https://en.wikipedia.org/w/api.php"
    wikidata_api_url: str = "https://www.wikidata.org/w/api.php"
    wikidata_entity_url: str = "https://www.wikidata.org/wiki/Special:EntityData"
    wikipedia_image_limit: int = 5
    # Aggregated image lists are memoised in-process for this many seconds.
    image_cache_ttl: int = 3600
    image_cache_size: int = 500
    # Upper bound on the image list stored per species.
    max_images: int = 6

    # === Timeouts ===
    http_timeout_seconds: float = 15.0
    llm_timeout_seconds: float = 45.0

    # === Plant store ===
    plant_db_path: str = "data/plant_details.db"

    # === Side notifications ===
    webhook_url: str = ""  # empty = notifications disabled

    # === App Config ===
    default_locale: str = "fr"
    cors_origins: str = "*"  # comma-separated
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_env: str = "development"
    log_level: str = "INFO"

    def get_available_llm_providers(self) -> list[str]:
        """Return the LLM provider names that have a non-empty API key, in priority order."""
        providers: list[str] = []
        if self.gemini_api_key:
            providers.append("gemini")
        if self.anthropic_api_key:
            providers.append("anthropic")
        if self.openai_api_key:
            providers.append("openai")
        return providers

    def get_cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]
