"""VIP club member levels derived from cumulative gifted SEK.

Levels run 1-20 on a linear schedule: every level spans 25000 / 19 SEK and the
gifted total that reaches level 20 is exactly 25000. Level 20 is terminal.
"""

from __future__ import annotations

import math
from datetime import datetime

VIP_MAX_LEVEL = 20
VIP_MAX_TOTAL_SEK = 25000

VIP_FARMING_WINDOW_SECONDS = 60
VIP_FARMING_MAX_GIFTS = 5
XP_FARMING_WINDOW_SECONDS = 3600
XP_FARMING_MAX_XP = 10_000

ALLOWED_PERK_TYPES: frozenset[str] = frozenset({
    "custom_chat_color",
    "priority_chat",
    "exclusive_emojis",
    "animated_badge",
    "custom_name_color",
    "profile_frame",
    "intro_sound",
})

# (min_level, label, color), highest first
_LEVEL_BANDS: list[tuple[int, str, str]] = [
    (15, "LEGENDARY", "#FF1493"),
    (10, "ELITE", "#9B59B6"),
    (5, "PREMIUM", "#3498DB"),
    (1, "VIP", "#FFD700"),
]


def cumulative_sek_for_level(level: int) -> float:
    """Gifted total at which `level` is completed.

    0 for level 0, ~1316 for level 1, 25000 for levels 19 and 20.
    """
    completed = max(0, min(level, VIP_MAX_LEVEL - 1))
    return completed * VIP_MAX_TOTAL_SEK / (VIP_MAX_LEVEL - 1)


def vip_level_from_total(total_gifted_sek: float) -> int:
    if total_gifted_sek <= 0:
        return 1
    level = math.floor(total_gifted_sek * (VIP_MAX_LEVEL - 1) / VIP_MAX_TOTAL_SEK) + 1
    return min(VIP_MAX_LEVEL, level)


def sek_to_reach_level(target_level: int, total_gifted_sek: float) -> int:
    """Additional SEK (rounded up) needed before `target_level` is reached."""
    needed = cumulative_sek_for_level(target_level - 1) - total_gifted_sek
    return max(0, math.ceil(needed))


def sek_for_next_level(current_level: int, total_gifted_sek: float) -> int:
    if current_level >= VIP_MAX_LEVEL:
        return 0
    return sek_to_reach_level(current_level + 1, total_gifted_sek)


def vip_level_progress(level: int, total_gifted_sek: float) -> float:
    """Percent (0-100) through `level`'s SEK band. An empty band counts as complete."""
    floor = cumulative_sek_for_level(level - 1)
    ceiling = cumulative_sek_for_level(level)
    if ceiling <= floor:
        return 100.0
    pct = (total_gifted_sek - floor) / (ceiling - floor) * 100
    return max(0.0, min(100.0, pct))


def loyalty_days(joined_at: datetime, now: datetime) -> int:
    """Days of membership, counting a started day as a whole day."""
    seconds = abs((now - joined_at).total_seconds())
    return math.ceil(seconds / 86400)


def _band(level: int) -> tuple[int, str, str]:
    for band in _LEVEL_BANDS:
        if level >= band[0]:
            return band
    return _LEVEL_BANDS[-1]


def vip_level_label(level: int) -> str:
    return _band(level)[1]


def vip_level_color(level: int) -> str:
    return _band(level)[2]


def validate_perk(perk_type: str) -> bool:
    """VIP perks must be cosmetic or UX only; anything else is rejected."""
    return perk_type in ALLOWED_PERK_TYPES


def is_self_gift(sender_id: str, receiver_id: str) -> bool:
    return sender_id == receiver_id


def is_vip_farming(gifts_in_window: int) -> bool:
    """More than five gifts from one sender inside a minute."""
    return gifts_in_window > VIP_FARMING_MAX_GIFTS


def is_xp_farming(xp_in_window: int) -> bool:
    """More than 10000 XP gained by one creator inside an hour."""
    return xp_in_window > XP_FARMING_MAX_XP
