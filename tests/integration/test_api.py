"""Integration tests for the FastAPI endpoints using TestClient.

The pipeline and a real SQLite store run for real; only the LLM-backed
generator, the image aggregator and the webhook notifier are mocked.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    register_exception_handlers,
)
from src.api.routes import router as api_router
from src.interfaces.webhook_notifier import IWebhookNotifier
from src.models.plant import DetailSheet, ImageSource, ImageSourceResult, Locale
from src.pipeline.orchestrator import PlantDetailsPipeline
from src.providers.store.sqlite_plant_store import SQLitePlantStore
from src.services.detail_generator import DetailGenerator
from src.services.image_aggregator import ImageAggregator
from tests.conftest import make_sheet

_URL = "/api/v1/plant-details"
_IMAGES = ["https://img/leaf.jpg", "https://img/flower.jpg"]

_SHEETS: dict[Locale, DetailSheet] = {
    Locale.EN: make_sheet("Dog rose", advice=["Prune in late winter"]),
    Locale.FR: make_sheet("Églantier", advice=["Tailler en fin d'hiver"]),
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_generator(failing: set[Locale] | None = None) -> MagicMock:
    failing = failing or set()

    async def _generate(species_id: str, locale: Locale) -> DetailSheet | None:
        return None if locale in failing else _SHEETS[locale]

    generator = MagicMock(spec=DetailGenerator)
    generator.generate = AsyncMock(side_effect=_generate)
    generator.provider_name = "gemini"
    return generator


def _make_aggregator() -> MagicMock:
    aggregator = MagicMock(spec=ImageAggregator)
    aggregator.aggregate = AsyncMock(
        return_value=ImageSourceResult(urls=_IMAGES, source=ImageSource.TREFLE)
    )
    return aggregator


def _create_test_app(
    tmp_path: Path,
    generator: MagicMock | None = None,
    aggregator: MagicMock | None = None,
) -> tuple[FastAPI, dict]:
    """Create a FastAPI app wired like ``src.main`` but with mocked generation."""
    app = FastAPI()
    app.add_middleware(ErrorHandlingMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    register_exception_handlers(app)
    app.include_router(api_router)

    store = SQLitePlantStore(db_path=tmp_path / "plants.db")
    asyncio.run(store.initialize())

    generator = generator or _make_generator()
    aggregator = aggregator or _make_aggregator()
    notifier = MagicMock(spec=IWebhookNotifier)
    notifier.is_enabled.return_value = True
    notifier.notify = AsyncMock(return_value=True)

    app.state.pipeline = PlantDetailsPipeline(
        store=store,
        detail_generator=generator,
        image_aggregator=aggregator,
        max_images=6,
    )
    app.state.webhook_notifier = notifier
    app.state.default_locale = Locale.FR
    app.state.version = "0.1.0"
    app.state.provider_registry = {"llm": True, "llm_provider": "gemini", "images": True}
    app.state.provider_list = [
        {"name": "gemini", "type": "llm", "available": True, "active": True},
        {"name": "trefle", "type": "images", "available": True},
    ]

    mocks = {
        "store": store,
        "generator": generator,
        "aggregator": aggregator,
        "notifier": notifier,
    }
    return app, mocks


# ---------------------------------------------------------------------------
# POST /api/v1/plant-details
# ---------------------------------------------------------------------------


class TestPlantDetails:
    def test_new_species_returns_flat_sheet_with_images(self, tmp_path: Path) -> None:
        app, mocks = _create_test_app(tmp_path)
        client = TestClient(app)

        response = client.post(_URL, json={"scientificName": "Rosa canina"})

        assert response.status_code == 200
        body = response.json()
        assert body["common_name"] == "Églantier"
        assert body["advice"] == ["Tailler en fin d'hiver"]
        assert body["images"] == _IMAGES
        assert set(body) == set(DetailSheet.field_names()) | {"images"}
        assert mocks["generator"].generate.await_count == 2

    def test_both_locales_stored_on_first_request(self, tmp_path: Path) -> None:
        app, mocks = _create_test_app(tmp_path)
        TestClient(app).post(_URL, json={"scientificName": "Rosa canina"})

        record = asyncio.run(mocks["store"].find_by_species("Rosa canina"))

        assert record is not None
        assert set(record.details_by_locale) == {Locale.FR, Locale.EN}
        assert record.images == _IMAGES

    def test_second_request_served_from_store(self, tmp_path: Path) -> None:
        app, mocks = _create_test_app(tmp_path)
        client = TestClient(app)

        client.post(_URL, json={"scientificName": "Rosa canina"})
        response = client.post(
            _URL, json={"scientificName": "Rosa canina"}, headers={"X-Language": "en"}
        )

        assert response.status_code == 200
        assert response.json()["common_name"] == "Dog rose"
        assert response.json()["images"] == _IMAGES
        assert mocks["generator"].generate.await_count == 2
        mocks["aggregator"].aggregate.assert_awaited_once()
        mocks["notifier"].notify.assert_awaited_once()

    def test_name_is_trimmed(self, tmp_path: Path) -> None:
        app, mocks = _create_test_app(tmp_path)
        TestClient(app).post(_URL, json={"scientific_name": "  Rosa canina  "})
        mocks["aggregator"].aggregate.assert_awaited_once_with("Rosa canina", 6)

    @pytest.mark.parametrize(
        ("headers", "expected_name"),
        [
            ({}, "Églantier"),
            ({"Accept-Language": "en-GB,en;q=0.9"}, "Dog rose"),
            ({"X-Language": "fr", "Accept-Language": "en"}, "Églantier"),
            ({"X-Language": "de"}, "Églantier"),
        ],
    )
    def test_locale_negotiation(self, tmp_path: Path, headers: dict, expected_name: str) -> None:
        app, _ = _create_test_app(tmp_path)
        response = TestClient(app).post(
            _URL, json={"scientificName": "Rosa canina"}, headers=headers
        )
        assert response.json()["common_name"] == expected_name

    def test_webhook_notified_after_persist(self, tmp_path: Path) -> None:
        app, mocks = _create_test_app(tmp_path)
        TestClient(app).post(_URL, json={"scientificName": "Rosa canina"})

        mocks["notifier"].notify.assert_awaited_once()
        event_type, payload = mocks["notifier"].notify.call_args.args
        assert event_type == "plant_details_cached"
        assert payload["scientific_name"] == "Rosa canina"
        assert payload["image_count"] == 2
        assert payload["image_source"] == "trefle"
        assert sorted(payload["locales_generated"]) == ["en", "fr"]

    def test_requested_locale_failure_serves_null_sheet(self, tmp_path: Path) -> None:
        app, mocks = _create_test_app(tmp_path, generator=_make_generator({Locale.FR}))

        response = TestClient(app).post(_URL, json={"scientificName": "Rosa canina"})

        assert response.status_code == 200
        body = response.json()
        assert body["common_name"] is None
        assert body["images"] == _IMAGES
        record = asyncio.run(mocks["store"].find_by_species("Rosa canina"))
        assert record is not None
        assert set(record.details_by_locale) == {Locale.EN}

    def test_missing_locale_filled_in_on_later_request(self, tmp_path: Path) -> None:
        generator = _make_generator({Locale.FR})
        app, mocks = _create_test_app(tmp_path, generator=generator)
        client = TestClient(app)
        client.post(_URL, json={"scientificName": "Rosa canina"})

        generator.generate.side_effect = None
        generator.generate.return_value = _SHEETS[Locale.FR]
        response = client.post(_URL, json={"scientificName": "Rosa canina"})

        assert response.json()["common_name"] == "Églantier"
        generator.generate.assert_awaited_with("Rosa canina", Locale.FR)
        mocks["aggregator"].aggregate.assert_awaited_once()

    def test_all_locales_fail_returns_503(self, tmp_path: Path) -> None:
        app, mocks = _create_test_app(
            tmp_path, generator=_make_generator({Locale.FR, Locale.EN})
        )

        response = TestClient(app).post(_URL, json={"scientificName": "Rosa canina"})

        assert response.status_code == 503
        assert response.json()["error"] == "DetailsUnavailableError"
        assert asyncio.run(mocks["store"].find_by_species("Rosa canina")) is None
        mocks["notifier"].notify.assert_not_called()

    @pytest.mark.parametrize("payload", [{}, {"scientificName": ""}, {"scientificName": "   "}])
    def test_blank_name_returns_400(self, tmp_path: Path, payload: dict) -> None:
        app, mocks = _create_test_app(tmp_path)

        response = TestClient(app).post(_URL, json=payload)

        assert response.status_code == 400
        assert response.json()["error"] == "InvalidRequestError"
        mocks["generator"].generate.assert_not_called()

    def test_malformed_body_returns_400(self, tmp_path: Path) -> None:
        app, _ = _create_test_app(tmp_path)
        response = TestClient(app).post(
            _URL, content=b"not json", headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400

    def test_unexpected_error_returns_sanitised_500(self, tmp_path: Path) -> None:
        app, _ = _create_test_app(tmp_path)
        pipeline = MagicMock(spec=PlantDetailsPipeline)
        pipeline.resolve = AsyncMock(side_effect=RuntimeError("secret internals"))
        app.state.pipeline = pipeline

        response = TestClient(app).post(_URL, json={"scientificName": "Rosa canina"})

        assert response.status_code == 500
        assert response.json()["error"] == "InternalServerError"
        assert "secret" not in response.text


# ---------------------------------------------------------------------------
# GET /api/v1/health and /api/v1/providers
# ---------------------------------------------------------------------------


class TestHealthAndProviders:
    def test_health_ok(self, tmp_path: Path) -> None:
        app, _ = _create_test_app(tmp_path)
        body = TestClient(app).get("/api/v1/health").json()
        assert body["status"] == "healthy"
        assert body["version"] == "0.1.0"
        assert body["providers"]["llm_provider"] == "gemini"

    def test_health_degraded_without_llm(self, tmp_path: Path) -> None:
        app, _ = _create_test_app(tmp_path)
        app.state.provider_registry = {"llm": False}
        assert TestClient(app).get("/api/v1/health").json()["status"] == "degraded"

    def test_providers(self, tmp_path: Path) -> None:
        app, _ = _create_test_app(tmp_path)
        body = TestClient(app).get("/api/v1/providers").json()
        assert [p["name"] for p in body["providers"]] == ["gemini", "trefle"]
