"""SQLite-backed plant details store.

One row per species in ``data/plant_details.db``: a JSON column per
supported locale and a JSON array of image URLs.  Uses ``aiosqlite`` for
async I/O and opens a short-lived connection per call.

Writes never drop data that is already stored: a locale column is only
ever filled in, and the image list is only replaced by a non-empty one.
The insert path relies on ``ON CONFLICT`` for that, so two requests racing
to create the same species both end up merged into a single row.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import aiosqlite
import structlog

from src.interfaces.plant_store import IPlantStore
from src.models.plant import SUPPORTED_LOCALES, DetailSheet, Locale, SpeciesRecord
from src.utils.errors import StoreError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("data/plant_details.db")

_CREATE_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS plant_details (
    id              INTEGER PRIMARY KEY AUTOINCREMENT,
    scientific_name TEXT    NOT NULL UNIQUE,
    result_fr       TEXT,
    result_en       TEXT,
    images          TEXT    NOT NULL DEFAULT '[]',
    created_at      TEXT    NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now')),
    updated_at      TEXT    NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now')),
    CONSTRAINT check_at_least_one_language
        CHECK (result_fr IS NOT NULL OR result_en IS NOT NULL)
);
"""

_CREATE_INDICES_SQL = [
    "CREATE INDEX IF NOT EXISTS idx_plant_details_updated ON plant_details(updated_at);",
]

_INSERT_OR_MERGE_SQL = """\
INSERT INTO plant_details (scientific_name, result_fr, result_en, images)
VALUES (?, ?, ?, ?)
ON CONFLICT(scientific_name)
DO UPDATE SET result_fr  = COALESCE(excluded.result_fr, result_fr),
              result_en  = COALESCE(excluded.result_en, result_en),
              images     = CASE WHEN excluded.images = '[]' THEN images
                                ELSE excluded.images END,
              updated_at = strftime('%Y-%m-%dT%H:%M:%fZ', 'now');
"""

_SELECT_SQL = """\
SELECT scientific_name, result_fr, result_en, images, created_at, updated_at
FROM plant_details
WHERE scientific_name = ?;
"""


def _locale_column(locale: Locale) -> str:
    return f"result_{locale.value}"


def _dump_sheet(sheet: DetailSheet | None) -> str | None:
    if sheet is None:
        return None
    return json.dumps(sheet.model_dump(mode="json"), ensure_ascii=False)


def _row_to_record(row: aiosqlite.Row) -> SpeciesRecord:
    details: dict[Locale, DetailSheet] = {}
    for locale in SUPPORTED_LOCALES:
        raw = row[_locale_column(locale)]
        if raw is not None:
            details[locale] = DetailSheet.model_validate(json.loads(raw))
    images = json.loads(row["images"]) if row["images"] else []
    return SpeciesRecord(
        species_id=row["scientific_name"],
        details_by_locale=details,
        images=images,
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class SQLitePlantStore(IPlantStore):
    """SQLite-backed species record persistence."""

    def __init__(self, db_path: str | Path = _DEFAULT_DB_PATH) -> None:
        self._db_path = Path(db_path)

    async def initialize(self) -> None:
        """Create the plant_details table and indices if they don't exist."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                await db.execute(_CREATE_TABLE_SQL)
                for idx_sql in _CREATE_INDICES_SQL:
                    await db.execute(idx_sql)
                await db.commit()
        except aiosqlite.Error as exc:
            raise StoreError(
                message=f"Could not initialise {self._db_path}: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        logger.info("plant_store_initialized", path=str(self._db_path))

    async def _fetch(self, db: aiosqlite.Connection, species_id: str) -> SpeciesRecord | None:
        db.row_factory = aiosqlite.Row
        cursor = await db.execute(_SELECT_SQL, (species_id,))
        row = await cursor.fetchone()
        return _row_to_record(row) if row is not None else None

    async def find_by_species(self, species_id: str) -> SpeciesRecord | None:
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                return await self._fetch(db, species_id)
        except (aiosqlite.Error, ValueError) as exc:
            raise StoreError(
                message=f"Read failed for {species_id!r}: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

    async def insert(self, record: SpeciesRecord) -> SpeciesRecord:
        if not record.details_by_locale:
            raise StoreError(
                message=f"Refusing to store {record.species_id!r} without any locale",
                provider_name=self.get_provider_name(),
            )

        params: tuple[Any, ...] = (
            record.species_id,
            _dump_sheet(record.details_for(Locale.FR)),
            _dump_sheet(record.details_for(Locale.EN)),
            json.dumps(record.images),
        )
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                await db.execute(_INSERT_OR_MERGE_SQL, params)
                await db.commit()
                stored = await self._fetch(db, record.species_id)
        except (aiosqlite.Error, ValueError) as exc:
            raise StoreError(
                message=f"Insert failed for {record.species_id!r}: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        logger.info(
            "plant_record_inserted",
            species=record.species_id,
            locales=[loc.value for loc in record.details_by_locale],
            images=len(record.images),
        )
        return stored or record

    async def update(
        self,
        species_id: str,
        details: dict[Locale, DetailSheet],
        images: list[str] | None = None,
    ) -> SpeciesRecord | None:
        assignments: list[str] = []
        values: list[Any] = []
        for locale, sheet in details.items():
            assignments.append(f"{_locale_column(locale)} = ?")
            values.append(_dump_sheet(sheet))
        if images:
            assignments.append("images = ?")
            values.append(json.dumps(images))
        assignments.append("updated_at = strftime('%Y-%m-%dT%H:%M:%fZ', 'now')")

        sql = f"UPDATE plant_details SET {', '.join(assignments)} WHERE scientific_name = ?"  # noqa: S608
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                cursor = await db.execute(sql, (*values, species_id))
                await db.commit()
                if cursor.rowcount == 0:
                    logger.warning("plant_record_missing_on_update", species=species_id)
                    return None
                stored = await self._fetch(db, species_id)
        except (aiosqlite.Error, ValueError) as exc:
            raise StoreError(
                message=f"Update failed for {species_id!r}: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        logger.info(
            "plant_record_updated",
            species=species_id,
            locales=[loc.value for loc in details],
            images_replaced=bool(images),
        )
        return stored

    def get_provider_name(self) -> str:
        return "sqlite"
