"""Resolution pipeline for plant detail requests."""

from src.pipeline.orchestrator import PlantDetailsPipeline

__all__ = ["PlantDetailsPipeline"]
