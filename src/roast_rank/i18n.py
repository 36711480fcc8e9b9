"""Display strings in English and Swedish.

The active language lives on a LanguageStore instance that callers pass around;
changing it notifies every subscriber.
"""
from __future__ import annotations

from typing import Callable

SUPPORTED_LANGUAGES = ("en", "sv")

TRANSLATIONS: dict[str, dict[str, str]] = {
    "en": {
        "level": "Level",
        "level_title": "Level {level} - {tier}",
        "xp_progress": "{current}/{needed} XP",
        "season_rank": "Season Rank",
        "rank_position": "#{rank} of {total}",
        "unranked": "Unranked",
        "near_rank_up": "Almost there! {progress}% to {tier}",
        "top_tier": "Top tier reached",
        "vip_membership": "VIP Membership",
        "vip_level": "VIP Level {level}",
        "sek_to_next": "{amount} SEK to next level",
        "vip_max_level": "Max VIP level",
        "loyalty": "Member for {days} days",
        "standings": "Season {number} Standings",
        "no_data": "No data found for {subject}.",
        "level_up": "Level up! Now level {level}",
        "gift_recorded": "Gift recorded",
    },
    "sv": {
        "level": "Nivå",
        "level_title": "Nivå {level} - {tier}",
        "xp_progress": "{current}/{needed} XP",
        "season_rank": "Säsongsrank",
        "rank_position": "#{rank} av {total}",
        "unranked": "Ej rankad",
        "near_rank_up": "Nästan där! {progress}% till {tier}",
        "top_tier": "Högsta nivån nådd",
        "vip_membership": "VIP-medlemskap",
        "vip_level": "VIP-nivå {level}",
        "sek_to_next": "{amount} SEK till nästa nivå",
        "vip_max_level": "Högsta VIP-nivå",
        "loyalty": "Medlem i {days} dagar",
        "standings": "Säsong {number} Topplista",
        "no_data": "Ingen data hittades för {subject}.",
        "level_up": "Ny nivå! Nu nivå {level}",
        "gift_recorded": "Gåva registrerad",
    },
}


def format_translation(template: str, **params: object) -> str:
    """Replace each {name} placeholder with its value; unknown placeholders stay."""
    result = template
    for key, value in params.items():
        result = result.replace("{" + key + "}", str(value))
    return result


class LanguageStore:
    """Holds the active display language and notifies subscribers on change."""

    def __init__(self, language: str = "en") -> None:
        self._check(language)
        self._language = language
        self._subscribers: list[Callable[[str], None]] = []

    @staticmethod
    def _check(language: str) -> None:
        if language not in SUPPORTED_LANGUAGES:
            raise ValueError(
                f"Unsupported language {language!r}. Must be one of: {', '.join(SUPPORTED_LANGUAGES)}"
            )

    @property
    def language(self) -> str:
        return self._language

    def set_language(self, language: str) -> None:
        self._check(language)
        if language == self._language:
            return
        self._language = language
        for callback in list(self._subscribers):
            callback(language)

    def subscribe(self, callback: Callable[[str], None]) -> Callable[[], None]:
        """Register a change callback. Returns a function that unsubscribes it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def t(self, key: str, **params: object) -> str:
        """Translate `key`, falling back to English and then to the key itself."""
        template = TRANSLATIONS[self._language].get(key) or TRANSLATIONS["en"].get(key, key)
        return format_translation(template, **params)
