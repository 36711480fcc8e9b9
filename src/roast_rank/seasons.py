"""Season tiers, rank-up checks, and per-battle season scoring.

Everything here is a pure function over numbers and the static tier table.
Unknown tier names resolve to neutral defaults instead of raising.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, fields
from datetime import datetime
from enum import Enum

from roast_rank.levels import round_half_up

NEAR_RANK_UP_THRESHOLD = 90
TOP_TIER_RANK_CUTOFF = 10
PLATFORM_CUT = 0.30

DEFAULT_TIER_COLOR = "#CCCCCC"
DEFAULT_TIER_ICON = "\U0001f3c5"


@dataclass(frozen=True)
class SeasonTier:
    order: int
    name: str
    min_score: int
    max_score: int | None  # None = open-ended top tier
    color: str
    icon: str
    intro_animation: str
    profile_effect: str


SEASON_TIERS: tuple[SeasonTier, ...] = (
    SeasonTier(1, "Bronze Mouth", 0, 1000, "#CD7F32", "\U0001f949", "bronze_intro", "bronze_glow"),
    SeasonTier(2, "Silver Tongue", 1001, 3000, "#C0C0C0", "\U0001f948", "silver_intro", "silver_glow"),
    SeasonTier(3, "Golden Roast", 3001, 7000, "#FFD700", "\U0001f947", "gold_intro", "gold_glow"),
    SeasonTier(4, "Diamond Disrespect", 7001, 15000, "#B9F2FF", "\U0001f48e", "diamond_intro", "diamond_sparkle"),
    SeasonTier(5, "Legendary Menace", 15001, None, "#FF0000", "\U0001f451", "legendary_intro", "legendary_aura"),
)

_TIERS_BY_NAME: dict[str, SeasonTier] = {t.name: t for t in SEASON_TIERS}


class BattleType(str, Enum):
    CASUAL = "casual"
    RANKED = "ranked"
    TOURNAMENT = "tournament"


@dataclass
class SeasonConfig:
    weight_individual_gifts: float = 0.5
    weight_team_contribution: float = 0.3
    weight_unique_roasters: float = 0.1
    weight_hype_momentum: float = 0.1
    win_bonus_1v1: float = 500
    win_bonus_2v2: float = 400
    win_bonus_3v3: float = 350
    win_bonus_4v4: float = 300
    win_bonus_5v5: float = 250
    decay_days: int = 7
    decay_rate: float = 0.1
    recent_hours_weight: float = 2.0
    tournament_boost: float = 1.2
    max_score_per_battle: float = 10000

    @classmethod
    def from_dict(cls, data: dict) -> SeasonConfig:
        """Build a config from a (possibly partial) dict; unknown keys are ignored."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    def win_bonus(self, team_size: int) -> float:
        """Win bonus for an NvN battle; 0 outside 1v1..5v5."""
        if 1 <= team_size <= 5:
            return getattr(self, f"win_bonus_{team_size}v{team_size}")
        return 0


@dataclass
class BattleParticipation:
    creator_id: str
    match_id: str
    team_size: int
    is_winner: bool
    individual_gift_coins: float = 0
    team_score: float = 0
    unique_roasters_count: int = 0
    peak_hype_reached: float = 0
    battle_type: BattleType = BattleType.RANKED


# ── Tier lookup ───────────────────────────────────────────────────────────────


def get_tier(name: str | None) -> SeasonTier | None:
    if not name:
        return None
    return _TIERS_BY_NAME.get(name)


def tier_color(name: str | None) -> str:
    """Hex display color for a tier name, neutral gray when unknown."""
    tier = get_tier(name)
    return tier.color if tier else DEFAULT_TIER_COLOR


def tier_icon(name: str | None) -> str:
    """Badge icon for a tier name, a plain medal when unknown."""
    tier = get_tier(name)
    return tier.icon if tier else DEFAULT_TIER_ICON


def determine_tier(score: float) -> SeasonTier:
    """Highest tier whose minimum score has been reached.

    Scores that fall between one tier's max and the next tier's min stay in
    the lower tier. Negative scores resolve to the bottom tier.
    """
    result = SEASON_TIERS[0]
    for tier in SEASON_TIERS:
        if score >= tier.min_score:
            result = tier
    return result


def next_tier(tier: SeasonTier) -> SeasonTier | None:
    if tier.order >= len(SEASON_TIERS):
        return None
    return SEASON_TIERS[tier.order]


def progress_to_next_tier(score: float) -> float:
    """Percent (0-100) of the way from the current tier's floor to the next tier's floor."""
    tier = determine_tier(score)
    upcoming = next_tier(tier)
    if upcoming is None:
        return 100.0
    span = upcoming.min_score - tier.min_score
    pct = (score - tier.min_score) / span * 100
    return max(0.0, min(100.0, pct))


def is_near_rank_up(progress: float) -> bool:
    return progress >= NEAR_RANK_UP_THRESHOLD


def percentile_description(percentile: float) -> str:
    """Bucket a percentile into a 'Top N%' label. Ties go to the more exclusive bucket."""
    if percentile >= 99:
        return "Top 1%"
    if percentile >= 95:
        return "Top 5%"
    if percentile >= 90:
        return "Top 10%"
    if percentile >= 75:
        return "Top 25%"
    if percentile >= 50:
        return "Top 50%"
    return f"Top {round_half_up(100 - percentile)}%"


def percentile_for_rank(rank: int, total: int) -> float:
    """Share of creators (0-100) ranked strictly below `rank`."""
    if total <= 0:
        return 0.0
    return 100 * (total - rank) / total


# ── Season scoring ────────────────────────────────────────────────────────────


def _decay(score: float, battle_type: BattleType, hours_ago: float, config: SeasonConfig) -> float:
    if battle_type == BattleType.TOURNAMENT:
        return score * config.tournament_boost
    if hours_ago <= 48:
        return score * config.recent_hours_weight
    window = config.decay_days * 24
    if hours_ago <= window:
        factor = 1 - (hours_ago / window) * config.decay_rate
        return score * max(factor, 0.5)
    return score * 0.5


def calculate_season_score(
    participation: BattleParticipation,
    config: SeasonConfig | None = None,
    hours_ago: float = 0,
) -> int:
    """Score one battle for one creator.

    score = gifts * w1 + team contribution * w2 + unique roasters * w3 + hype * w4,
    capped at max_score_per_battle, then decayed by age. Casual battles score 0.
    """
    config = config or SeasonConfig()
    battle_type = BattleType(participation.battle_type)
    team_size = participation.team_size
    if team_size < 1:
        raise ValueError(f"team_size must be at least 1, got {team_size}")
    if battle_type == BattleType.CASUAL:
        return 0

    after_cut = participation.individual_gift_coins * (1 - PLATFORM_CUT)
    gift_score = math.log10(after_cut + 1) * 1000

    team_score = participation.team_score / team_size
    if participation.is_winner:
        team_score += config.win_bonus(team_size)
    else:
        team_score *= 0.5

    roasters_score = participation.unique_roasters_count / team_size * 50
    hype_score = participation.peak_hype_reached / team_size * 10

    score = (
        gift_score * config.weight_individual_gifts
        + team_score * config.weight_team_contribution
        + roasters_score * config.weight_unique_roasters
        + hype_score * config.weight_hype_momentum
    )
    score = min(score, config.max_score_per_battle)
    return round_half_up(_decay(score, battle_type, hours_ago, config))


# ── Display helpers ───────────────────────────────────────────────────────────


def format_season_score(score: float) -> str:
    if score >= 1_000_000:
        return f"{score / 1_000_000:.1f}M"
    if score >= 1000:
        return f"{score / 1000:.1f}K"
    return str(round_half_up(score))


def days_remaining(end: datetime, now: datetime) -> int:
    """Whole days left in a season, rounded up, never negative."""
    seconds = (end - now).total_seconds()
    return max(0, math.ceil(seconds / 86400))


def format_season_date_range(start: datetime, end: datetime) -> str:
    """'Jan 5 - Jan 19, 2026'."""
    return f"{start.strftime('%b')} {start.day} - {end.strftime('%b')} {end.day}, {end.year}"


def win_rate(wins: int, total: int) -> int:
    if total == 0:
        return 0
    return round_half_up(wins / total * 100)


def win_rate_color(rate: float) -> str:
    if rate >= 70:
        return "#4CAF50"
    if rate >= 50:
        return "#FFD700"
    if rate >= 30:
        return "#FFA500"
    return "#FF6B6B"
