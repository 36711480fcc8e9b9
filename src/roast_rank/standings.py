"""Season standings for roast-rank.

Pure functions for ranking creators within a season, building end-of-season
rewards, and reading/writing standings snapshots as JSON.
"""
from __future__ import annotations

import json
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path

from roast_rank.seasons import (
    TOP_TIER_RANK_CUTOFF,
    determine_tier,
    is_near_rank_up,
    next_tier,
    percentile_for_rank,
    progress_to_next_tier,
)

STANDINGS_SCHEMA_VERSION = 1
STANDINGS_FILE_SUFFIX = ".standings.json"


def rank_entries(entries: list[dict]) -> list[dict]:
    """Sort entries by composite_score descending and annotate them.

    Tie-break: battles_won desc, then creator_id asc. Adds rank (1-based),
    current_tier, percentile, progress_to_next_tier, next_tier_threshold
    and near_rank_up to each entry.
    """
    sorted_entries = sorted(
        entries,
        key=lambda e: (
            -e.get("composite_score", 0),
            -e.get("battles_won", 0),
            e.get("creator_id", ""),
        ),
    )
    total = len(sorted_entries)
    for i, entry in enumerate(sorted_entries):
        score = entry.get("composite_score", 0)
        tier = determine_tier(score)
        upcoming = next_tier(tier)
        progress = progress_to_next_tier(score)
        entry["rank"] = i + 1
        entry["current_tier"] = tier.name
        entry["percentile"] = percentile_for_rank(i + 1, total)
        entry["progress_to_next_tier"] = progress
        entry["next_tier_threshold"] = upcoming.min_score if upcoming else None
        entry["near_rank_up"] = is_near_rank_up(progress)
    return sorted_entries


def find_entry(ranked: list[dict], creator_id: str) -> dict | None:
    for entry in ranked:
        if entry.get("creator_id") == creator_id:
            return entry
    return None


def build_reward(entry: dict, season_number: int) -> dict:
    """End-of-season reward for a ranked entry. The top ten ranks are top tier."""
    tier = determine_tier(entry.get("composite_score", 0))
    is_top_tier = entry["rank"] <= TOP_TIER_RANK_CUTOFF
    slug = tier.name.lower().replace(" ", "_")
    return {
        "creator_id": entry["creator_id"],
        "final_rank": entry["rank"],
        "final_score": entry.get("composite_score", 0),
        "tier_name": tier.name,
        "badge_icon": tier.icon,
        "badge_color": tier.color,
        "intro_animation": tier.intro_animation,
        "profile_effect": tier.profile_effect,
        "stream_intro_sound": f"{slug}_intro_sound",
        "battle_victory_animation": f"{slug}_victory",
        "seasonal_title": f"Season {season_number} {tier.name}",
        "is_top_tier": is_top_tier,
        "ultra_intro_animation": "ultra_champion_intro" if is_top_tier else None,
        "highlighted_in_discovery": is_top_tier,
    }


def build_standings_doc(season: dict, ranked: list[dict]) -> dict:
    """Wrap ranked entries with season metadata for export."""
    return {
        "schema_version": STANDINGS_SCHEMA_VERSION,
        "season_id": season["id"],
        "season_number": season["season_number"],
        "status": season.get("status", "active"),
        "entries": ranked,
        "exported_at": datetime.now(tz=timezone.utc).isoformat(),
    }


def write_standings(doc: dict, output_path: Path) -> None:
    """Write a standings document to output_path using atomic write."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    tmp_fd, tmp_path = tempfile.mkstemp(dir=output_path.parent, suffix=".tmp")
    try:
        with os.fdopen(tmp_fd, "w", encoding="utf-8") as f:
            json.dump(doc, f, indent=2, ensure_ascii=False)
            f.write("\n")
        os.replace(tmp_path, output_path)
    except Exception:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


def read_standings(path: Path) -> dict | None:
    """Read and validate a standings file.

    Returns None if file is missing, unreadable, or fails validation.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None
    if not isinstance(data, dict):
        return None
    if data.get("schema_version") != STANDINGS_SCHEMA_VERSION:
        return None
    if not isinstance(data.get("entries"), list):
        return None
    return data


def default_export_path(season_number: int, standings_dir: Path) -> Path:
    """Return the canonical export path: {standings_dir}/season-{n}.standings.json"""
    return standings_dir / f"season-{season_number}{STANDINGS_FILE_SUFFIX}"
