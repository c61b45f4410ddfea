"""Locale resolution from request headers.

Precedence: an explicit ``X-Language`` header, then the first language tag
of ``Accept-Language``, then the configured default.  Only the two
supported locales are recognised; anything else collapses to the default.
"""

from __future__ import annotations

import re

from src.models.plant import Locale

# "fr-CH, fr;q=0.9, en;q=0.8" -> "fr"
_TAG_SPLIT_RE = re.compile(r"[,;\-_]")


def _primary_subtag(header_value: str | None) -> str | None:
    if not header_value:
        return None
    token = _TAG_SPLIT_RE.split(header_value.strip(), maxsplit=1)[0]
    return token.strip().lower() or None


def resolve_locale(
    explicit: str | None,
    accept_language: str | None,
    default: Locale = Locale.FR,
) -> Locale:
    """Pick the detail locale for a request.

    Parameters
    ----------
    explicit:
        Value of the ``X-Language`` override header, if any.
    accept_language:
        Value of the standard ``Accept-Language`` header, if any.
    default:
        Locale used when neither header names a supported language.
    """
    candidate = _primary_subtag(explicit) or _primary_subtag(accept_language)
    if candidate is None:
        return default
    try:
        return Locale(candidate)
    except ValueError:
        return default
