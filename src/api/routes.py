"""FastAPI route definitions for the Leafee API.

All endpoints live under ``/api/v1``.  Services are built once at startup
in ``src.main`` and stored on ``app.state``; handlers receive them through
``Annotated[..., Depends(...)]`` aliases so tests can swap them out.
"""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, BackgroundTasks, Depends, Header, Request

from src.api.schemas import (
    ErrorResponse,
    HealthResponse,
    PlantDetailsRequest,
    ProvidersResponse,
)
from src.interfaces.webhook_notifier import PLANT_DETAILS_CACHED_EVENT, IWebhookNotifier
from src.models.plant import Locale
from src.pipeline.orchestrator import PlantDetailsPipeline
from src.utils.locale import resolve_locale
from src.utils.logging import get_logger

router = APIRouter(prefix="/api/v1")

_logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Dependency helpers
# ---------------------------------------------------------------------------


def _get_pipeline(request: Request) -> PlantDetailsPipeline:
    return request.app.state.pipeline


def _get_notifier(request: Request) -> IWebhookNotifier:
    return request.app.state.webhook_notifier


def _get_default_locale(request: Request) -> Locale:
    return getattr(request.app.state, "default_locale", Locale.FR)


PipelineDep = Annotated[PlantDetailsPipeline, Depends(_get_pipeline)]
NotifierDep = Annotated[IWebhookNotifier, Depends(_get_notifier)]
DefaultLocaleDep = Annotated[Locale, Depends(_get_default_locale)]


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.post(
    "/plant-details",
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
    summary="Resolve a plant's fact sheet and images",
)
async def plant_details(
    body: PlantDetailsRequest,
    background_tasks: BackgroundTasks,
    pipeline: PipelineDep,
    notifier: NotifierDep,
    default_locale: DefaultLocaleDep,
    x_language: Annotated[str | None, Header()] = None,
    accept_language: Annotated[str | None, Header()] = None,
    authorization: Annotated[str | None, Header()] = None,
) -> dict[str, Any]:
    """Return the fact sheet for ``scientificName`` in the negotiated locale.

    Served from the plant store when that locale is already cached;
    otherwise generated, stored, and announced to the webhook.
    """
    locale = resolve_locale(x_language, accept_language, default_locale)
    _logger.info(
        "plant_details_requested",
        species=body.scientific_name,
        locale=locale.value,
        authenticated=bool(authorization and authorization.startswith("Bearer ")),
    )

    result = await pipeline.resolve(body.scientific_name, locale)

    if result.persisted and notifier.is_enabled():
        background_tasks.add_task(notifier.notify, PLANT_DETAILS_CACHED_EVENT, result.event_payload())

    return result.to_response()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Application health check",
)
async def health_check(request: Request) -> HealthResponse:
    """Report whether a fact-sheet generator is configured.

    ``degraded`` means cached species are still served but new ones would
    answer 503.
    """
    registry: dict[str, Any] = getattr(request.app.state, "provider_registry", {})
    status = "healthy" if registry.get("llm") else "degraded"
    return HealthResponse(
        status=status,
        version=getattr(request.app.state, "version", "0.1.0"),
        providers=registry,
    )


@router.get(
    "/providers",
    response_model=ProvidersResponse,
    summary="List configured providers",
)
async def list_providers(request: Request) -> ProvidersResponse:
    """List all configured providers, their types, and availability status."""
    return ProvidersResponse(providers=getattr(request.app.state, "provider_list", []))
