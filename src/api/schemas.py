"""Pydantic request/response schemas for the Leafee API.

The plant-details response is deliberately not modelled here: it is the
flattened :class:`src.models.plant.DetailSheet` plus ``images``, produced
by :meth:`ResolvedPlantDetails.to_response`.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PlantDetailsRequest(BaseModel):
    """Body of ``POST /api/v1/plant-details``.

    Clients send ``scientificName``; ``scientific_name`` is accepted too.
    A missing name defaults to ``""`` so the pipeline can reject it with a
    400 instead of a schema error.
    """

    model_config = ConfigDict(populate_by_name=True)

    scientific_name: str = Field(default="", alias="scientificName", max_length=200)


class HealthResponse(BaseModel):
    """Application health check response."""

    status: str
    version: str
    providers: dict[str, Any]


class ProvidersResponse(BaseModel):
    """List of configured service providers and their availability."""

    providers: list[dict[str, Any]]


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: str
    detail: str | None = None
