"""Leafee FastAPI application entry point.

Wires together all providers, services, and routes via dependency injection.
Loads configuration from ``.env`` and ``config/config.yaml`` and configures
structured logging.  ``build_components`` is shared with the CLI so both
entry points resolve species through exactly the same object graph.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import httpx
import structlog
import uvicorn
from fastapi import FastAPI

from src.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
    register_exception_handlers,
)
from src.api.routes import router as api_router
from src.config.loader import load_config
from src.config.settings import Settings
from src.interfaces.llm_provider import ILLMProvider
from src.models.plant import Locale
from src.pipeline.orchestrator import PlantDetailsPipeline
from src.providers.cache.memory_cache import MemoryCacheProvider
from src.providers.images.trefle_provider import DEFAULT_CATEGORIES, TrefleImageProvider
from src.providers.images.wikipedia_provider import WikipediaImageProvider
from src.providers.llm.anthropic_provider import AnthropicLLMProvider
from src.providers.llm.gemini_provider import GeminiLLMProvider
from src.providers.llm.openai_provider import OpenAILLMProvider
from src.providers.notification.webhook_notifier import HttpWebhookNotifier
from src.providers.store.sqlite_plant_store import SQLitePlantStore
from src.services.detail_generator import DetailGenerator
from src.services.image_aggregator import ImageAggregator
from src.utils.logging import configure_logging, get_logger

_USER_AGENT = "Leafee/0.1 (+https://leafee.app; plant details service)"

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# LLM provider selection
# ---------------------------------------------------------------------------


def _build_llm_provider(app_settings: Settings) -> ILLMProvider:
    """Select the first LLM provider with a configured API key.

    Priority order: Gemini -> Anthropic -> OpenAI.  With no key at all the
    Gemini adapter is still returned; it reports itself unavailable and
    every cold species answers 503 until a key is set.
    """
    if app_settings.gemini_api_key:
        return GeminiLLMProvider(settings=app_settings)
    if app_settings.anthropic_api_key:
        return AnthropicLLMProvider(settings=app_settings)
    if app_settings.openai_api_key:
        return OpenAILLMProvider(settings=app_settings)
    _logger.warning("no_llm_configured", hint="set GEMINI_API_KEY")
    return GeminiLLMProvider(settings=app_settings)


def _default_locale(app_settings: Settings) -> Locale:
    try:
        return Locale(app_settings.default_locale.lower())
    except ValueError:
        _logger.warning("unsupported_default_locale", value=app_settings.default_locale)
        return Locale.FR


def build_components(app_settings: Settings, config: dict[str, Any] | None = None) -> dict[str, Any]:
    """Construct every provider and service instance for the application.

    Returns a flat dict of named components to be stored on ``app.state``.
    The caller owns ``http_client`` and must close it.
    """
    config = config if config is not None else load_config(settings=app_settings)
    llm_config = config.get("llm", {})
    image_config = config.get("images", {})

    # -- Shared resources --
    http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(app_settings.http_timeout_seconds),
        headers={"User-Agent": _USER_AGENT},
        follow_redirects=True,
    )

    # -- LLM --
    llm = _build_llm_provider(app_settings)
    detail_generator = DetailGenerator(
        llm_provider=llm,
        timeout_seconds=app_settings.llm_timeout_seconds,
        temperature=llm_config.get("temperature", 0.3),
        max_tokens=llm_config.get("max_tokens", 2048),
    )

    # -- Image providers (ordered by priority) --
    image_providers = [
        TrefleImageProvider(
            settings=app_settings,
            http_client=http_client,
            categories=image_config.get("trefle_categories") or DEFAULT_CATEGORIES,
        ),
        WikipediaImageProvider(settings=app_settings, http_client=http_client),
    ]
    image_cache = MemoryCacheProvider(
        max_size=app_settings.image_cache_size,
        ttl=app_settings.image_cache_ttl,
    )
    image_aggregator = ImageAggregator(providers=image_providers, cache=image_cache)

    # -- Store & notifications --
    store = SQLitePlantStore(db_path=app_settings.plant_db_path)
    webhook_notifier = HttpWebhookNotifier(app_settings.webhook_url, http_client)

    pipeline = PlantDetailsPipeline(
        store=store,
        detail_generator=detail_generator,
        image_aggregator=image_aggregator,
        max_images=app_settings.max_images,
    )

    # -- Provider metadata for /health and /providers --
    provider_list: list[dict[str, Any]] = [
        {"name": name, "type": "llm", "available": True, "active": name == llm.get_provider_name()}
        for name in app_settings.get_available_llm_providers()
    ]
    provider_list.extend(
        {"name": p.get_provider_name(), "type": "images", "available": p.is_available()}
        for p in image_providers
    )
    provider_list.append({"name": store.get_provider_name(), "type": "store", "available": True})
    provider_list.append(
        {"name": "webhook", "type": "notification", "available": webhook_notifier.is_enabled()}
    )

    provider_registry: dict[str, Any] = {
        "llm": llm.is_available(),
        "llm_provider": llm.get_provider_name(),
        "images": any(p.is_available() for p in image_providers),
        "store": store.get_provider_name(),
        "webhook": webhook_notifier.is_enabled(),
    }

    return {
        "http_client": http_client,
        "store": store,
        "pipeline": pipeline,
        "webhook_notifier": webhook_notifier,
        "default_locale": _default_locale(app_settings),
        "version": config.get("app", {}).get("version", "0.1.0"),
        "provider_registry": provider_registry,
        "provider_list": provider_list,
        "primary_llm_name": llm.get_provider_name(),
    }


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """Build and configure the FastAPI application."""
    app_settings = app_settings or settings

    @asynccontextmanager
    async def _lifespan(application: FastAPI):  # noqa: ANN202
        components = build_components(app_settings)
        for key, value in components.items():
            setattr(application.state, key, value)

        await components["store"].initialize()

        _logger.info(
            "app_startup",
            version=components["version"],
            environment=app_settings.app_env,
            primary_llm=components["primary_llm_name"],
            llm_available=components["provider_registry"]["llm"],
            providers=len(components["provider_list"]),
        )

        yield

        http_client: httpx.AsyncClient = components["http_client"]
        await http_client.aclose()
        _logger.info("app_shutdown", message="HTTP client closed")

    application = FastAPI(
        title="Leafee API",
        version="0.1.0",
        description=(
            "Resolve a plant species into a bilingual botanical fact sheet and "
            "a set of photographs, cached per species."
        ),
        lifespan=_lifespan,
    )

    # -- Middleware (order matters: last added = first executed) --
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application, allowed_origins=app_settings.get_cors_origins())
    register_exception_handlers(application)

    application.include_router(api_router)
    return application


app = create_app()

# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    uvicorn.run(
        "src.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )
