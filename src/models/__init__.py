"""Leafee domain models, re-exported from one place.

Import from ``src.models`` rather than the individual module so call sites
do not depend on how the models are split across files.
"""

from __future__ import annotations

from src.models.plant import (
    MAX_ADVICE_ITEMS,
    SUPPORTED_LOCALES,
    DetailSheet,
    ImageSource,
    ImageSourceResult,
    Locale,
    ResolvedPlantDetails,
    SpeciesRecord,
)

__all__ = [
    "MAX_ADVICE_ITEMS",
    "SUPPORTED_LOCALES",
    "DetailSheet",
    "ImageSource",
    "ImageSourceResult",
    "Locale",
    "ResolvedPlantDetails",
    "SpeciesRecord",
]
