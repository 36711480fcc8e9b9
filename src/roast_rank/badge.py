"""SVG badge generation for roast-rank.

Generates a shields.io-style flat badge showing a creator's level and season tier.
Pure functions, no side effects.
"""

from __future__ import annotations

from html import escape

from roast_rank.levels import format_xp, level_tier_color, level_tier_name
from roast_rank.seasons import get_tier

_LABEL = "roast-live"
_LABEL_BG = "555555"
_FALLBACK_BG = "6b7280"
_FONT_SIZE = 11
_FONT_FAMILY = "DejaVu Sans,Verdana,Geneva,sans-serif"


def _text_width(text: str) -> int:
    """Estimate pixel width of text at 11px DejaVu Sans."""
    widths = {
        "f": 4, "i": 4, "j": 4, "l": 4, "r": 4, "t": 5,
        "m": 10, "w": 9, "W": 10, "M": 10,
        " ": 4, ".": 4, ",": 4, ":": 4, "/": 5,
    }
    return sum(widths.get(ch, 7) for ch in text)


def _hex(color: str) -> str:
    """'#FFD700' -> 'ffd700'; anything that isn't a 6-digit hex gets the fallback grey."""
    value = color.lstrip("#").lower()
    if len(value) != 6:
        return _FALLBACK_BG
    try:
        int(value, 16)
    except ValueError:
        return _FALLBACK_BG
    return value


def generate_badge_svg(
    level: int,
    season_tier: str | None = None,
    total_xp: int = 0,
) -> str:
    """Generate a shields.io flat-style SVG badge string.

    Layout: [roast-live | Lv.12 Golden Roast]. Without a season tier the
    creator's level tier (Beginner..Legendary) is shown instead.
    """
    tier = get_tier(season_tier)
    if tier is not None:
        tier_name, color = tier.name, tier.color
        value_text = f"Lv.{level} {tier.icon} {tier_name}"
    else:
        tier_name, color = level_tier_name(level), level_tier_color(level)
        value_text = f"Lv.{level} {tier_name}"

    right_hex = _hex(color)

    label_text_w = _text_width(_LABEL)
    value_text_w = _text_width(value_text)

    pad = 10
    label_w = label_text_w + pad * 2
    value_w = value_text_w + pad * 2
    total_w = label_w + value_w
    height = 20

    label_cx = label_w // 2
    value_cx = label_w + value_w // 2

    tooltip = f"Roast Live: Level {level} {tier_name}"
    if total_xp > 0:
        tooltip += f" - {format_xp(total_xp)} XP"
    tooltip = escape(tooltip)
    value_text = escape(value_text)

    svg = f'''<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink" width="{total_w}" height="{height}" role="img" aria-label="{tooltip}">
  <title>{tooltip}</title>
  <linearGradient id="s" x2="0" y2="100%">
    <stop offset="0" stop-color="#bbb" stop-opacity=".1"/>
    <stop offset="1" stop-opacity=".1"/>
  </linearGradient>
  <clipPath id="r">
    <rect width="{total_w}" height="{height}" rx="3" fill="#fff"/>
  </clipPath>
  <g clip-path="url(#r)">
    <rect width="{label_w}" height="{height}" fill="#{_LABEL_BG}"/>
    <rect x="{label_w}" width="{value_w}" height="{height}" fill="#{right_hex}"/>
    <rect width="{total_w}" height="{height}" fill="url(#s)"/>
  </g>
  <g fill="#fff" text-anchor="middle" font-family="{_FONT_FAMILY}" text-rendering="geometricPrecision" font-size="{_FONT_SIZE}">
    <text aria-hidden="true" x="{label_cx}.5" y="15" fill="#010101" fill-opacity=".3">{_LABEL}</text>
    <text x="{label_cx}.5" y="14">{_LABEL}</text>
    <text aria-hidden="true" x="{value_cx}.5" y="15" fill="#010101" fill-opacity=".3">{value_text}</text>
    <text x="{value_cx}.5" y="14">{value_text}</text>
  </g>
</svg>
'''
    return svg
