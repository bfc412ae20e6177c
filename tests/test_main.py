"""Tests for start-up configuration in the entry point."""

import locale

from trip_tunes.__main__ import configure_collation


class TestConfigureCollation:
    def test_applies_user_locale_to_collation(self, monkeypatch):
        calls = []
        monkeypatch.setattr(locale, "setlocale", lambda category, name=None: calls.append((category, name)))

        assert configure_collation() is True
        assert calls == [(locale.LC_COLLATE, "")]

    def test_unavailable_locale_is_tolerated(self, monkeypatch):
        def refuse(category, name=None):
            raise locale.Error("unsupported locale setting")

        monkeypatch.setattr(locale, "setlocale", refuse)
        assert configure_collation() is False
