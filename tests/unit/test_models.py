"""Unit tests for the plant domain models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from src.models.plant import (
    DetailSheet,
    ImageSource,
    ImageSourceResult,
    Locale,
    ResolvedPlantDetails,
    SpeciesRecord,
)
from tests.conftest import make_sheet


# ======================================================================
# DetailSheet
# ======================================================================


class TestDetailSheet:
    def test_has_all_canonical_fields(self) -> None:
        names = DetailSheet.field_names()
        assert len(names) == 21
        assert names[0] == "common_name"
        assert "advice" in names
        assert names[-1] == "origin"

    def test_empty_sheet_serialises_explicit_nulls(self) -> None:
        dumped = DetailSheet.empty().model_dump(mode="json")
        assert set(dumped) == set(DetailSheet.field_names())
        assert all(value is None for value in dumped.values())

    def test_unknown_keys_ignored(self) -> None:
        sheet = DetailSheet(common_name="Rose", nickname="rosie")
        assert sheet.common_name == "Rose"
        assert "nickname" not in sheet.model_dump()

    def test_frozen(self) -> None:
        sheet = make_sheet()
        with pytest.raises(ValidationError):
            sheet.common_name = "Other"


# ======================================================================
# SpeciesRecord
# ======================================================================


class TestSpeciesRecord:
    def test_blank_species_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SpeciesRecord(species_id="")

    def test_missing_locales_in_fan_out_order(self) -> None:
        record = SpeciesRecord(species_id="Rosa canina")
        assert record.missing_locales() == [Locale.FR, Locale.EN]

        record = SpeciesRecord(species_id="Rosa canina", details_by_locale={Locale.EN: make_sheet()})
        assert record.missing_locales() == [Locale.FR]

    def test_merged_with_keeps_untouched_locale(self, cached_fr_record: SpeciesRecord) -> None:
        en = make_sheet("Dog rose")
        merged = cached_fr_record.merged_with({Locale.EN: en})

        assert merged.details_for(Locale.FR) == cached_fr_record.details_for(Locale.FR)
        assert merged.details_for(Locale.EN) == en
        assert merged.images == cached_fr_record.images

    def test_merged_with_empty_images_keeps_existing(self, cached_fr_record: SpeciesRecord) -> None:
        merged = cached_fr_record.merged_with({}, images=[])
        assert merged.images == cached_fr_record.images

    def test_merged_with_new_images_replaces(self, cached_fr_record: SpeciesRecord) -> None:
        merged = cached_fr_record.merged_with({}, images=["https://img.example/new.jpg"])
        assert merged.images == ["https://img.example/new.jpg"]


# ======================================================================
# ImageSourceResult / ResolvedPlantDetails
# ======================================================================


class TestImageSourceResult:
    def test_nothing(self) -> None:
        result = ImageSourceResult.nothing()
        assert result.urls == []
        assert result.source is ImageSource.NONE


class TestResolvedPlantDetails:
    def test_to_response_flattens_sheet_and_images(self) -> None:
        resolved = ResolvedPlantDetails(
            species_id="Rosa canina",
            locale=Locale.EN,
            details=make_sheet(),
            images=["https://img.example/a.jpg"],
        )
        body = resolved.to_response()

        assert body["common_name"] == "Dog rose"
        assert body["images"] == ["https://img.example/a.jpg"]
        assert body["toxicity"] is None
        assert len(body) == 22

    def test_default_details_are_all_null(self) -> None:
        resolved = ResolvedPlantDetails(species_id="Rosa canina", locale=Locale.FR)
        body = resolved.to_response()
        assert body.pop("images") == []
        assert all(value is None for value in body.values())

    def test_event_payload(self) -> None:
        resolved = ResolvedPlantDetails(
            species_id="Rosa canina",
            locale=Locale.FR,
            images=["a", "b"],
            image_source=ImageSource.TREFLE,
            generated_locales=[Locale.FR, Locale.EN],
            persisted=True,
        )
        assert resolved.event_payload() == {
            "scientific_name": "Rosa canina",
            "locales_generated": ["fr", "en"],
            "image_count": 2,
            "image_source": "trefle",
        }


# ======================================================================
# Locale
# ======================================================================


def test_locale_values() -> None:
    assert Locale("fr") is Locale.FR
    assert Locale.EN.value == "en"
