"""Unit tests for request locale resolution."""

from __future__ import annotations

import pytest

from src.models.plant import Locale
from src.utils.locale import resolve_locale


class TestResolveLocale:
    def test_explicit_header_wins(self) -> None:
        assert resolve_locale("en", "fr-FR,fr;q=0.9") is Locale.EN

    @pytest.mark.parametrize(
        ("accept_language", "expected"),
        [
            ("en-US,en;q=0.9,fr;q=0.8", Locale.EN),
            ("fr-CH, fr;q=0.9", Locale.FR),
            ("en;q=0.8", Locale.EN),
            ("EN", Locale.EN),
        ],
    )
    def test_first_accept_language_tag(self, accept_language: str, expected: Locale) -> None:
        assert resolve_locale(None, accept_language) is expected

    def test_falls_back_to_default(self) -> None:
        assert resolve_locale(None, None) is Locale.FR
        assert resolve_locale(None, None, default=Locale.EN) is Locale.EN

    def test_unsupported_language_uses_default(self) -> None:
        assert resolve_locale("de", None) is Locale.FR
        assert resolve_locale(None, "es-ES,es;q=0.9", default=Locale.EN) is Locale.EN

    def test_blank_explicit_header_ignored(self) -> None:
        assert resolve_locale("  ", "en-GB") is Locale.EN
