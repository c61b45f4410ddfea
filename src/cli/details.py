"""Resolve one species from the command line.

Usage::

    python -m src.cli.details "Rosa canina"
    python -m src.cli.details "Monstera deliciosa" --lang en --json

Uses the same providers, store and pipeline as the API server, so a
species resolved here is served from the cache by the API afterwards.
Log lines go to stderr; stdout carries only the result.

Exit codes: 0 success, 1 invalid input, 2 details unavailable, 3 other
application error.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any

from src.interfaces.webhook_notifier import PLANT_DETAILS_CACHED_EVENT
from src.models.plant import DetailSheet, Locale, ResolvedPlantDetails
from src.utils.errors import DetailsUnavailableError, InvalidRequestError, LeafeeError

_LABEL_WIDTH = 16


def _format_text_output(result: ResolvedPlantDetails) -> str:
    """Render a resolution as an aligned, human-readable report."""
    origin = "cache" if result.from_cache else "generated"
    lines = [
        f"{result.species_id} [{result.locale.value}, {origin}]",
        "=" * 60,
    ]
    sheet = result.details.model_dump()
    for name in DetailSheet.field_names():
        value = sheet.get(name)
        if value is None:
            continue
        if isinstance(value, list):
            lines.append(f"{name}:")
            lines.extend(f"  - {item}" for item in value)
        else:
            lines.append(f"{name + ':':<{_LABEL_WIDTH}} {value}")

    lines.append("")
    source = f" (source: {result.image_source.value})" if result.image_source else ""
    lines.append(f"images: {len(result.images)}{source}")
    lines.extend(f"  {url}" for url in result.images)
    return "\n".join(lines)


def _format_json_output(result: ResolvedPlantDetails) -> str:
    return json.dumps(result.to_response(), ensure_ascii=False, indent=2)


async def _run(species: str, locale: Locale | None, json_output: bool) -> int:
    # Deferred: src.main builds settings and configures logging on import.
    from src.main import build_components, settings
    from src.utils.logging import configure_logging

    configure_logging(log_level=settings.log_level, stream=sys.stderr)

    components: dict[str, Any] = build_components(settings)
    target = locale or components["default_locale"]
    try:
        await components["store"].initialize()
        result = await components["pipeline"].resolve(species, target)
        if result.persisted:
            await components["webhook_notifier"].notify(
                PLANT_DETAILS_CACHED_EVENT, result.event_payload()
            )
    except InvalidRequestError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return 1
    except DetailsUnavailableError as exc:
        print(f"Error: {exc.message} for {species!r}", file=sys.stderr)
        return 2
    except LeafeeError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 3
    finally:
        await components["http_client"].aclose()

    print(_format_json_output(result) if json_output else _format_text_output(result))
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m src.cli.details",
        description="Resolve a plant's botanical fact sheet and images.",
    )
    parser.add_argument("species", help="Scientific name, e.g. 'Rosa canina'")
    parser.add_argument(
        "--lang",
        choices=[loc.value for loc in Locale],
        default=None,
        help="Locale of the fact sheet (default: DEFAULT_LOCALE)",
    )
    parser.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the API response body as JSON",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    args = _build_parser().parse_args(argv)
    locale = Locale(args.lang) if args.lang else None
    sys.exit(asyncio.run(_run(args.species, locale, args.json_output)))


if __name__ == "__main__":
    main()
