"""Creator XP and level progression. Pure functions, no side effects."""

import math

BASE_LEVEL_XP = 1000
LEVEL_GROWTH = 1.15

LEVEL_TIERS: list[dict] = [
    {"min_level": 50, "name": "Legendary", "color": "#FF0000"},
    {"min_level": 40, "name": "Master", "color": "#FF1493"},
    {"min_level": 30, "name": "Expert", "color": "#FFD700"},
    {"min_level": 20, "name": "Advanced", "color": "#C0C0C0"},
    {"min_level": 10, "name": "Intermediate", "color": "#CD7F32"},
    {"min_level": 1, "name": "Beginner", "color": "#CCCCCC"},
]

CREATOR_PERKS: list[dict] = [
    {"id": "custom_stream_frame", "name": "Custom Stream Frame", "unlock_level": 2, "category": "cosmetic"},
    {"id": "chat_highlight", "name": "Chat Highlight Color", "unlock_level": 5, "category": "ux"},
    {"id": "viewer_insights", "name": "Viewer Insights", "unlock_level": 10, "category": "analytics"},
    {"id": "animated_name", "name": "Animated Name", "unlock_level": 15, "category": "cosmetic"},
    {"id": "priority_discovery", "name": "Priority Discovery", "unlock_level": 20, "category": "priority"},
    {"id": "gift_heatmap", "name": "Gift Heatmap", "unlock_level": 25, "category": "analytics"},
    {"id": "flame_intro", "name": "Flame Intro", "unlock_level": 30, "category": "cosmetic"},
    {"id": "battle_queue_priority", "name": "Battle Queue Priority", "unlock_level": 40, "category": "priority"},
    {"id": "legendary_aura", "name": "Legendary Aura", "unlock_level": 50, "category": "cosmetic"},
]

_PERK_ICONS: dict[str, str] = {
    "cosmetic": "✨",
    "ux": "\U0001f3a8",
    "analytics": "\U0001f4ca",
    "priority": "⚡",
}
_DEFAULT_PERK_ICON = "\U0001f381"


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (2.5 -> 3, not 2)."""
    return math.floor(value + 0.5)


def xp_for_level(level: int) -> int:
    """XP needed to advance from `level` to `level + 1`. Formula: floor(1000 * 1.15^(L-1))."""
    if level <= 0:
        return 0
    return math.floor(BASE_LEVEL_XP * LEVEL_GROWTH ** (level - 1))


def cumulative_xp_for_level(level: int) -> int:
    """Total XP needed from zero to reach `level` (sum of all lower levels)."""
    if level <= 1:
        return 0
    return sum(xp_for_level(lv) for lv in range(1, level))


def level_progress(current_xp: float, xp_to_next: float) -> int:
    """Percent (0-100) of the way through the current level.

    A zero threshold counts as fully progressed.
    """
    if xp_to_next == 0:
        return 100
    return min(100, round_half_up(current_xp / xp_to_next * 100))


def level_from_total_xp(total_xp: int) -> int:
    """Given lifetime XP, return the level reached starting from level 1."""
    level = 1
    remaining = total_xp
    while remaining >= xp_for_level(level):
        remaining -= xp_for_level(level)
        level += 1
    return level


def apply_xp(level: int, current_xp: int, gained: int) -> tuple[int, int, int]:
    """Add XP to a (level, current_xp) snapshot, carrying over level thresholds.

    Returns (new_level, new_current_xp, levels_gained). The result always
    satisfies new_current_xp < xp_for_level(new_level).
    """
    if gained < 0:
        raise ValueError(f"XP award must be non-negative, got {gained}")
    level = max(1, level)
    xp = max(0, current_xp) + gained
    start = level
    while xp >= xp_for_level(level):
        xp -= xp_for_level(level)
        level += 1
    return level, xp, level - start


def _level_tier(level: int) -> dict:
    for tier in LEVEL_TIERS:
        if level >= tier["min_level"]:
            return tier
    return LEVEL_TIERS[-1]


def level_tier_name(level: int) -> str:
    return _level_tier(level)["name"]


def level_tier_color(level: int) -> str:
    return _level_tier(level)["color"]


def format_xp(xp: int) -> str:
    """Compact XP label: 1234567 -> '1.2M', 4500 -> '4.5K', 999 -> '999'."""
    if xp >= 1_000_000:
        return f"{xp / 1_000_000:.1f}M"
    if xp >= 1000:
        return f"{xp / 1000:.1f}K"
    return str(xp)


def perks_unlocked_at(level: int) -> list[dict]:
    """Catalog perks whose unlock level has been reached, lowest first."""
    return [p for p in CREATOR_PERKS if p["unlock_level"] <= level]


def get_perk(perk_id: str) -> dict | None:
    for perk in CREATOR_PERKS:
        if perk["id"] == perk_id:
            return perk
    return None


def perk_icon(category: str) -> str:
    return _PERK_ICONS.get(category, _DEFAULT_PERK_ICON)
