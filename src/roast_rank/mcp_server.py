"""MCP server for roast-rank.

Exposes creator levels, season ranks and VIP memberships as MCP tools.
Run via: python3 -m roast_rank.mcp_server
"""
from __future__ import annotations

from typing import Any

from mcp.server.fastmcp import FastMCP

mcp = FastMCP(name="roast-rank")


def _get_db():
    from roast_rank.config import get_db_path
    from roast_rank.db import Database
    return Database(get_db_path())


@mcp.tool()
def get_creator_level(creator_id: str) -> dict[str, Any]:
    """Get a creator's level, XP progress, level tier and perks."""
    from roast_rank.progression import creator_level_snapshot
    db = _get_db()
    try:
        snapshot = creator_level_snapshot(db, creator_id)
        if snapshot is None:
            return {"error": f"No level data for {creator_id}."}
        return snapshot
    finally:
        db.close()


@mcp.tool()
def get_season_rank(creator_id: str, season_id: int = 0) -> dict[str, Any]:
    """Get a creator's season rank, tier, percentile and rank-up progress.

    season_id: 0 means the active season.
    """
    from roast_rank.progression import season_progress
    db = _get_db()
    try:
        progress = season_progress(db, creator_id, season_id=season_id or None)
        if progress is None:
            return {"error": f"{creator_id} has no ranked battles this season."}
        return progress
    finally:
        db.close()


@mcp.tool()
def get_season_standings(season_id: int = 0, limit: int = 100) -> dict[str, Any]:
    """Get ranked season standings (highest composite score first).

    season_id: 0 means the active season.
    """
    from roast_rank.progression import season_standings
    db = _get_db()
    try:
        season, ranked = season_standings(db, season_id or None)
        if season is None:
            return {"error": "No season found. Run: roast-rank season start"}
        return {
            "season": season,
            "entries": ranked[:max(0, limit)],
            "count": len(ranked),
        }
    finally:
        db.close()


@mcp.tool()
def get_season_rewards(creator_id: str) -> dict[str, Any]:
    """Get a creator's granted season rewards (titles, badges, intro effects), newest first."""
    from roast_rank.progression import creator_rewards
    db = _get_db()
    try:
        rewards = creator_rewards(db, creator_id)
        return {"creator_id": creator_id, "rewards": rewards, "count": len(rewards)}
    finally:
        db.close()


@mcp.tool()
def get_season_tiers() -> dict[str, Any]:
    """List the season tiers with score ranges, colors and icons."""
    from roast_rank.seasons import SEASON_TIERS
    return {
        "tiers": [
            {
                "order": t.order, "name": t.name, "min_score": t.min_score,
                "max_score": t.max_score, "color": t.color, "icon": t.icon,
            }
            for t in SEASON_TIERS
        ]
    }


@mcp.tool()
def get_vip_membership(club_id: str, user_id: str) -> dict[str, Any]:
    """Get a member's VIP level, progress, loyalty days and SEK to next level."""
    from roast_rank.progression import vip_membership
    db = _get_db()
    try:
        membership = vip_membership(db, club_id, user_id)
        if membership is None:
            return {"error": f"{user_id} is not a member of {club_id}."}
        return membership
    finally:
        db.close()


@mcp.tool()
def get_badge(creator_id: str) -> dict[str, Any]:
    """Generate an SVG badge string showing a creator's level and season tier."""
    from roast_rank.badge import generate_badge_svg
    from roast_rank.progression import creator_level_snapshot, season_progress
    db = _get_db()
    try:
        snapshot = creator_level_snapshot(db, creator_id)
        if snapshot is None:
            return {"error": f"No level data for {creator_id}."}
        progress = season_progress(db, creator_id)
        season_tier = progress["rank_tier"] if progress else None
        svg = generate_badge_svg(snapshot["level"], season_tier=season_tier, total_xp=snapshot["total_xp"])
        return {"svg": svg, "level": snapshot["level"], "season_tier": season_tier,
                "total_xp": snapshot["total_xp"]}
    finally:
        db.close()


def main() -> None:
    from roast_rank.config import get_log_level
    from roast_rank.log import setup_logging
    setup_logging(get_log_level())
    mcp.run()


if __name__ == "__main__":
    main()
