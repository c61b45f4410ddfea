"""LLM-backed generation of botanical fact sheets.

One call per (species, locale): the locale's prompt template asks the
model for a single JSON object with the canonical field names, the object
is cut out of whatever prose surrounds it, and each field is normalised
according to :data:`FIELD_RULES`.

Failure policy:
    - no LLM configured, any call failure, timeout, empty  -> ``None``
    - an answer that is not valid JSON                     -> all-null sheet

``None`` means "this locale was not produced"; the pipeline decides
whether that is fatal.  There is no retry.
"""

from __future__ import annotations

import asyncio
import json
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

from src.config.prompts import SYSTEM_PROMPTS, build_detail_prompt
from src.interfaces.llm_provider import ILLMProvider
from src.models.plant import MAX_ADVICE_ITEMS, DetailSheet, Locale
from src.utils.errors import LLMError
from src.utils.logging import get_logger

# Greedy on purpose: spans from the first "{" to the last "}" so nested
# objects survive; prose before and after is discarded.
_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


class FieldShape(str, Enum):  # noqa: UP042
    SCALAR = "scalar"
    LIST = "list"


@dataclass(frozen=True)
class FieldRule:
    """How one DetailSheet field is coerced after JSON extraction."""

    name: str
    shape: FieldShape = FieldShape.SCALAR
    max_items: int | None = None


FIELD_RULES: tuple[FieldRule, ...] = tuple(
    FieldRule(name, FieldShape.LIST, MAX_ADVICE_ITEMS) if name == "advice" else FieldRule(name)
    for name in DetailSheet.field_names()
)


def extract_json_object(text: str) -> dict[str, Any]:
    """Return the JSON object embedded in *text*, or ``{}`` if there is none."""
    match = _JSON_OBJECT_RE.search(text or "")
    if match is None:
        return {}
    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError:
        return {}
    return parsed if isinstance(parsed, dict) else {}


def _parse_list_literal(value: Any) -> Any:
    """Turn ``'["a", "b"]'`` into a list; anything else is returned as is."""
    if not isinstance(value, str):
        return value
    stripped = value.strip()
    if not (stripped.startswith("[") and stripped.endswith("]")):
        return value
    try:
        return json.loads(stripped)
    except json.JSONDecodeError:
        return value


def _apply_rule(rule: FieldRule, value: Any) -> Any:
    value = _parse_list_literal(value)
    if rule.shape is FieldShape.SCALAR:
        return value

    if value is None or value == "":
        return None
    items = value if isinstance(value, list) else [value]
    return items[: rule.max_items] if rule.max_items is not None else items


def normalize_details(raw: dict[str, Any]) -> DetailSheet:
    """Build a :class:`DetailSheet` from a parsed model answer.

    Keys outside the canonical field set are dropped; missing keys become
    ``None``.
    """
    values = {rule.name: _apply_rule(rule, raw.get(rule.name)) for rule in FIELD_RULES}
    return DetailSheet(**values)


class DetailGenerator:
    """Produces one :class:`DetailSheet` per call through an injected LLM.

    Parameters
    ----------
    llm_provider:
        Backend used for the completion.
    timeout_seconds:
        Upper bound for a single completion; a slower answer is abandoned.
    temperature, max_tokens:
        Sampling parameters forwarded to the provider.
    """

    def __init__(
        self,
        llm_provider: ILLMProvider,
        timeout_seconds: float = 45.0,
        temperature: float = 0.3,
        max_tokens: int = 2048,
    ) -> None:
        self._llm = llm_provider
        self._timeout = timeout_seconds
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._logger = get_logger(__name__)

    @property
    def provider_name(self) -> str:
        return self._llm.get_provider_name()

    async def generate(self, species_id: str, locale: Locale) -> DetailSheet | None:
        """Ask the model for *species_id*'s fact sheet in *locale*.

        Never raises: every failure is logged and reported as ``None``.
        """
        provider = self._llm.get_provider_name()
        if not self._llm.is_available():
            self._logger.warning(
                "detail_llm_unavailable", species=species_id, locale=locale.value, provider=provider
            )
            return None

        try:
            text = await asyncio.wait_for(
                self._llm.complete(
                    system_prompt=SYSTEM_PROMPTS[locale],
                    user_prompt=build_detail_prompt(species_id, locale),
                    temperature=self._temperature,
                    max_tokens=self._max_tokens,
                ),
                timeout=self._timeout,
            )
        except LLMError as exc:
            self._logger.warning(
                "detail_generation_failed",
                species=species_id,
                locale=locale.value,
                provider=provider,
                error=str(exc),
            )
            return None
        except asyncio.TimeoutError:
            self._logger.warning(
                "detail_generation_timeout",
                species=species_id,
                locale=locale.value,
                provider=provider,
                timeout_seconds=self._timeout,
            )
            return None
        except Exception as exc:  # noqa: BLE001
            self._logger.warning(
                "detail_generation_failed",
                species=species_id,
                locale=locale.value,
                provider=provider,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return None

        if not text or not text.strip():
            self._logger.warning(
                "detail_generation_empty", species=species_id, locale=locale.value, provider=provider
            )
            return None

        raw = extract_json_object(text)
        if not raw:
            self._logger.warning(
                "detail_json_unparseable",
                species=species_id,
                locale=locale.value,
                response_chars=len(text),
            )

        sheet = normalize_details(raw)
        self._logger.info(
            "detail_generated",
            species=species_id,
            locale=locale.value,
            provider=provider,
            fields_filled=sum(1 for v in sheet.model_dump().values() if v is not None),
        )
        return sheet
