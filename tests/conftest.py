"""Shared pytest fixtures for the Leafee test suite."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.config.settings import Settings
from src.interfaces.image_provider import IImageProvider
from src.interfaces.llm_provider import ILLMProvider
from src.interfaces.plant_store import IPlantStore
from src.models.plant import DetailSheet, Locale, SpeciesRecord


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings isolated from the developer's environment and .env file."""
    return Settings(
        _env_file=None,
        gemini_api_key="",
        anthropic_api_key="",
        openai_api_key="",
        trefle_api_token="trefle-test-token",
        plant_db_path=str(tmp_path / "plants.db"),
        webhook_url="",
    )


# ---------------------------------------------------------------------------
# Sample data
# ---------------------------------------------------------------------------


def make_sheet(common_name: str = "Dog rose", **overrides: Any) -> DetailSheet:
    values: dict[str, Any] = {
        "common_name": common_name,
        "scientific_name": "Rosa canina",
        "easy": "1",
        "exposure_tag": "Full sun",
        "family": "Rosaceae",
        "advice": ["Prune in late winter"],
        "origin": "Europe",
    }
    values.update(overrides)
    return DetailSheet(**values)


@pytest.fixture
def sheet_en() -> DetailSheet:
    return make_sheet("Dog rose")


@pytest.fixture
def sheet_fr() -> DetailSheet:
    return make_sheet("Églantier", exposure_tag="Plein soleil", origin="Europe")


@pytest.fixture
def llm_answer_json() -> str:
    """A typical model answer: prose around a JSON object."""
    body = {
        "common_name": "Dog rose",
        "scientific_name": "Rosa canina",
        "easy": 1,
        "exposure_tag": "Full sun",
        "advice": "Water deeply once a week",
        "origin": "Europe",
    }
    return f"Here is the sheet you asked for:\n```json\n{json.dumps(body)}\n```\nEnjoy!"


# ---------------------------------------------------------------------------
# Mock provider fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_llm_provider(llm_answer_json: str) -> ILLMProvider:
    """LLM that is configured and answers every prompt with llm_answer_json."""
    mock = MagicMock(spec=ILLMProvider)
    mock.get_provider_name.return_value = "gemini"
    mock.is_available.return_value = True
    mock.complete = AsyncMock(return_value=llm_answer_json)
    return mock


def make_image_provider(
    name: str,
    urls: list[str] | None = None,
    *,
    available: bool = True,
    error: Exception | None = None,
) -> IImageProvider:
    mock = MagicMock(spec=IImageProvider)
    mock.get_provider_name.return_value = name
    mock.is_available.return_value = available
    if error is not None:
        mock.find_images = AsyncMock(side_effect=error)
    else:
        mock.find_images = AsyncMock(return_value=list(urls or []))
    return mock


@pytest.fixture
def mock_plant_store() -> IPlantStore:
    """Empty store that accepts every write and echoes the record back."""
    mock = MagicMock(spec=IPlantStore)
    mock.get_provider_name.return_value = "memory"
    mock.initialize = AsyncMock()
    mock.find_by_species = AsyncMock(return_value=None)

    async def _insert(record: SpeciesRecord) -> SpeciesRecord:
        return record

    mock.insert = AsyncMock(side_effect=_insert)
    mock.update = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def cached_fr_record(sheet_fr: DetailSheet) -> SpeciesRecord:
    return SpeciesRecord(
        species_id="Rosa canina",
        details_by_locale={Locale.FR: sheet_fr},
        images=["https://img.example/rosa-1.jpg", "https://img.example/rosa-2.jpg"],
    )
