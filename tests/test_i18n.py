"""Tests for the translation store."""
import pytest

from roast_rank.i18n import TRANSLATIONS, LanguageStore, format_translation


class TestFormatTranslation:
    def test_replaces_params(self):
        assert format_translation("Level {level} - {tier}", level=3, tier="Beginner") == "Level 3 - Beginner"

    def test_missing_param_left_in_place(self):
        assert format_translation("#{rank} of {total}", rank=2) == "#2 of {total}"

    def test_repeated_placeholder(self):
        assert format_translation("{x}/{x}", x=1) == "1/1"


class TestLanguageStore:
    def test_defaults_to_english(self):
        store = LanguageStore()
        assert store.language == "en"
        assert store.t("level") == "Level"

    def test_swedish(self):
        store = LanguageStore("sv")
        assert store.t("level") == "Nivå"
        assert store.t("rank_position", rank=1, total=10) == "#1 av 10"

    def test_unknown_key_returns_key(self):
        assert LanguageStore().t("no_such_key") == "no_such_key"

    def test_falls_back_to_english(self, monkeypatch):
        sv = dict(TRANSLATIONS["sv"])
        del sv["gift_recorded"]
        monkeypatch.setitem(TRANSLATIONS, "sv", sv)
        assert LanguageStore("sv").t("gift_recorded") == "Gift recorded"

    def test_unsupported_language(self):
        with pytest.raises(ValueError, match="Unsupported language"):
            LanguageStore("de")

    def test_set_language_notifies(self):
        store = LanguageStore()
        seen = []
        store.subscribe(seen.append)
        store.set_language("sv")
        assert seen == ["sv"]
        assert store.t("level") == "Nivå"

    def test_same_language_does_not_notify(self):
        store = LanguageStore("sv")
        seen = []
        store.subscribe(seen.append)
        store.set_language("sv")
        assert seen == []

    def test_unsubscribe(self):
        store = LanguageStore()
        seen = []
        unsubscribe = store.subscribe(seen.append)
        unsubscribe()
        unsubscribe()
        store.set_language("sv")
        assert seen == []

    def test_invalid_set_keeps_language(self):
        store = LanguageStore("sv")
        with pytest.raises(ValueError):
            store.set_language("xx")
        assert store.language == "sv"

    def test_stores_are_independent(self):
        a = LanguageStore()
        b = LanguageStore()
        a.set_language("sv")
        assert b.language == "en"

    def test_tables_have_same_keys(self):
        assert set(TRANSLATIONS["en"]) == set(TRANSLATIONS["sv"])
