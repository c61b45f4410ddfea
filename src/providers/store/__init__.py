"""Plant store adapters."""

from src.providers.store.sqlite_plant_store import SQLitePlantStore

__all__ = ["SQLitePlantStore"]
