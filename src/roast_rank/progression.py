"""Read and update creator progression snapshots stored in the database.

Each reader returns a plain dict of stored totals plus the display fields
derived from them (progress percentages, tier names and colors, SEK to the
next level). Writers apply one event (an XP award, a battle, a gift) and
return the resulting snapshot.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

from roast_rank.db import Database
from roast_rank.levels import (
    CREATOR_PERKS,
    apply_xp,
    get_perk,
    level_progress,
    level_tier_color,
    level_tier_name,
    perk_icon,
    perks_unlocked_at,
    xp_for_level,
)
from roast_rank.log import get_logger
from roast_rank.seasons import (
    BattleParticipation,
    BattleType,
    SeasonConfig,
    calculate_season_score,
    days_remaining,
    percentile_description,
    tier_color,
    tier_icon,
)
from roast_rank.standings import build_reward, find_entry, rank_entries
from roast_rank.vip import (
    ALLOWED_PERK_TYPES,
    VIP_MAX_LEVEL,
    VIP_FARMING_WINDOW_SECONDS,
    XP_FARMING_WINDOW_SECONDS,
    is_self_gift,
    is_vip_farming,
    is_xp_farming,
    loyalty_days,
    sek_for_next_level,
    validate_perk,
    vip_level_color,
    vip_level_from_total,
    vip_level_label,
    vip_level_progress,
)

log = get_logger(__name__)

DEFAULT_SEASON_DAYS = 14


def _as_utc(value: datetime | None) -> datetime:
    """Current UTC time when None; naive datetimes are taken to be UTC."""
    if value is None:
        return datetime.now(tz=timezone.utc)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _parse_ts(value: str) -> datetime:
    ts = datetime.fromisoformat(value)
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


# ── Creator levels ────────────────────────────────────────────────────────────


def creator_level_snapshot(db: Database, creator_id: str) -> dict | None:
    """Level, XP progress, level tier and perks for a creator; None if never awarded XP."""
    row = db.get_creator_level(creator_id)
    if row is None:
        return None
    level = row["level"]
    xp_to_next = xp_for_level(level)
    unlocked = {p["perk_id"]: p for p in db.get_unlocked_perks(creator_id)}
    perks = []
    for perk in CREATOR_PERKS:
        if perk["id"] not in unlocked:
            continue
        stored = unlocked[perk["id"]]
        perks.append({
            **perk,
            "icon": perk_icon(perk["category"]),
            "unlocked_at": stored["unlocked_at"],
            "is_equipped": bool(stored["is_equipped"]),
        })
    upcoming = next((p for p in CREATOR_PERKS if p["unlock_level"] > level), None)
    return {
        "creator_id": creator_id,
        "level": level,
        "current_xp": row["current_xp"],
        "xp_to_next_level": xp_to_next,
        "total_xp": row["total_xp"],
        "progress": level_progress(row["current_xp"], xp_to_next),
        "tier_name": level_tier_name(level),
        "tier_color": level_tier_color(level),
        "perks": perks,
        "equipped_perks": [p for p in perks if p["is_equipped"]],
        "next_perk": upcoming,
    }


def award_xp(db: Database, creator_id: str, xp: int, now: datetime | None = None) -> dict:
    """Add XP to a creator, rolling over level thresholds and unlocking perks.

    The creator's row is created on the first award. Unusually fast XP gain is
    flagged for review but the award still goes through.
    """
    now = _as_utc(now)
    stamp = now.isoformat()
    row = db.get_creator_level(creator_id) or {"level": 1, "current_xp": 0, "total_xp": 0}

    new_level, new_xp, gained_levels = apply_xp(row["level"], row["current_xp"], xp)
    db.upsert_creator_level(creator_id, new_level, new_xp, row["total_xp"] + xp, stamp)
    db.add_xp_history(creator_id, xp, stamp)

    new_perks = [
        perk["id"] for perk in perks_unlocked_at(new_level)
        if db.unlock_perk(creator_id, perk["id"], stamp)
    ]
    if gained_levels:
        log.info("creator_level_up", creator_id=creator_id, level=new_level, perks=new_perks)

    since = (now - timedelta(seconds=XP_FARMING_WINDOW_SECONDS)).isoformat()
    xp_in_window = db.get_xp_since(creator_id, since)
    flagged = is_xp_farming(xp_in_window)
    if flagged:
        details = {"total_xp_in_hour": xp_in_window, "xp_gained": xp, "time_window": "1 hour"}
        log.warning("abuse_detected", abuse_type="xp_farming", creator_id=creator_id, **details)
        db.log_abuse_event("xp_farming", creator_id, "medium", details, stamp)

    snapshot = creator_level_snapshot(db, creator_id)
    snapshot.update({
        "xp_awarded": xp,
        "levels_gained": gained_levels,
        "leveled_up": gained_levels > 0,
        "new_perks": new_perks,
        "xp_farming_flagged": flagged,
    })
    return snapshot


def set_perk_equipped(db: Database, creator_id: str, perk_id: str, equipped: bool = True) -> bool:
    """Equip or unequip a perk. Returns False if the creator hasn't unlocked it."""
    if get_perk(perk_id) is None:
        raise ValueError(f"Unknown perk: {perk_id}")
    return db.set_perk_equipped(creator_id, perk_id, equipped)


# ── Seasons ───────────────────────────────────────────────────────────────────


def create_season(db: Database, duration_days: int = DEFAULT_SEASON_DAYS, now: datetime | None = None) -> dict:
    """Complete any active season and open the next one."""
    if duration_days < 1:
        raise ValueError(f"Season must last at least one day, got {duration_days}")
    now = _as_utc(now)
    db.complete_active_seasons()
    number = db.get_last_season_number() + 1
    end = now + timedelta(days=duration_days)
    season_id = db.create_season(number, now.isoformat(), end.isoformat(), duration_days)
    log.info("season_created", season_number=number, duration_days=duration_days)
    return db.get_season(season_id)


def _resolve_season(db: Database, season_id: int | None) -> dict | None:
    if season_id is None:
        return db.get_active_season()
    return db.get_season(season_id)


def record_battle(
    db: Database,
    participation: BattleParticipation,
    config: SeasonConfig | None = None,
    now: datetime | None = None,
    played_at: datetime | None = None,
) -> dict | None:
    """Score a battle into the active season. Casual battles are skipped (returns None)."""
    season = db.get_active_season()
    if season is None:
        raise ValueError("No active season. Run: roast-rank season start")
    now = _as_utc(now)
    played_at = _as_utc(played_at) if played_at else now
    hours_ago = max(0.0, (now - played_at).total_seconds() / 3600)

    score = calculate_season_score(participation, config, hours_ago=hours_ago)
    battle_type = BattleType(participation.battle_type)
    if battle_type == BattleType.CASUAL:
        log.info("casual_battle_skipped", creator_id=participation.creator_id,
                 match_id=participation.match_id)
        return None

    db.add_participation(
        season["id"], participation.creator_id, participation.match_id,
        participation.team_size, participation.is_winner, battle_type.value,
        score, played_at.isoformat(),
    )
    log.info("battle_recorded", season_id=season["id"], creator_id=participation.creator_id,
             match_id=participation.match_id, season_score=score)
    return {
        "season_id": season["id"],
        "creator_id": participation.creator_id,
        "match_id": participation.match_id,
        "season_score": score,
    }


def season_standings(db: Database, season_id: int | None = None) -> tuple[dict | None, list[dict]]:
    """(season, ranked entries) for the given or active season."""
    season = _resolve_season(db, season_id)
    if season is None:
        return None, []
    return season, rank_entries(db.get_season_totals(season["id"]))


def season_progress(
    db: Database, creator_id: str, season_id: int | None = None, now: datetime | None = None
) -> dict | None:
    """A creator's standing in a season; None without a season or any battles."""
    season, ranked = season_standings(db, season_id)
    if season is None:
        return None
    entry = find_entry(ranked, creator_id)
    if entry is None:
        return None
    now = _as_utc(now)
    tier = entry["current_tier"]
    return {
        "season_id": season["id"],
        "season_number": season["season_number"],
        "season_score": entry["composite_score"],
        "rank_tier": tier,
        "tier_color": tier_color(tier),
        "tier_icon": tier_icon(tier),
        "current_rank": entry["rank"],
        "total_creators": len(ranked),
        "percentile": entry["percentile"],
        "percentile_label": percentile_description(entry["percentile"]),
        "next_tier_threshold": entry["next_tier_threshold"],
        "progress_to_next_tier": entry["progress_to_next_tier"],
        "near_rank_up": entry["near_rank_up"],
        "battles_won": entry["battles_won"],
        "battles_participated": entry["battles_participated"],
        "days_remaining": days_remaining(_parse_ts(season["end_date"]), now),
    }


def end_season(db: Database, season_id: int | None = None, now: datetime | None = None) -> dict:
    """Freeze a season's standings and grant a reward to every ranked creator."""
    season, ranked = season_standings(db, season_id)
    if season is None:
        raise ValueError("No season to end")
    now = _as_utc(now)
    db.set_season_status(season["id"], "completed")
    rewards = []
    for entry in ranked:
        reward = build_reward(entry, season["season_number"])
        db.add_season_reward(season["id"], reward, now.isoformat())
        rewards.append(reward)
    log.info("season_ended", season_number=season["season_number"], rewards=len(rewards))
    return {"season": db.get_season(season["id"]), "standings": ranked, "rewards": rewards}


def creator_rewards(db: Database, creator_id: str) -> list[dict]:
    """Rewards granted to a creator across all ended seasons, newest first."""
    rewards = []
    for row in db.get_creator_rewards(creator_id):
        row["is_top_tier"] = bool(row["is_top_tier"])
        row["highlighted_in_discovery"] = bool(row["highlighted_in_discovery"])
        rewards.append(row)
    return rewards


# ── VIP clubs ─────────────────────────────────────────────────────────────────


def set_club_perk(db: Database, club_id: str, perk_type: str, min_vip_level: int = 1) -> dict:
    """Offer a perk to club members from `min_vip_level` up. Only cosmetic/UX perks are allowed."""
    if not validate_perk(perk_type):
        log.warning("vip_perk_rejected", club_id=club_id, perk_type=perk_type)
        raise ValueError(
            f"Perk {perk_type!r} is not allowed. Must be one of: {', '.join(sorted(ALLOWED_PERK_TYPES))}"
        )
    if not 1 <= min_vip_level <= VIP_MAX_LEVEL:
        raise ValueError(f"VIP level must be between 1 and {VIP_MAX_LEVEL}, got {min_vip_level}")
    db.set_club_perk(club_id, perk_type, min_vip_level)
    log.info("vip_perk_set", club_id=club_id, perk_type=perk_type, min_vip_level=min_vip_level)
    return {"club_id": club_id, "perk_type": perk_type, "min_vip_level": min_vip_level}


def _member_view(member: dict, now: datetime, club_perks: list[dict]) -> dict:
    level = member["vip_level"]
    total = member["total_gifted_sek"]
    return {
        "club_id": member["club_id"],
        "user_id": member["user_id"],
        "vip_level": level,
        "total_gifted_sek": total,
        "joined_at": member["joined_at"],
        "progress": vip_level_progress(level, total),
        "loyalty_days": loyalty_days(_parse_ts(member["joined_at"]), now),
        "sek_to_next_level": sek_for_next_level(level, total),
        "label": vip_level_label(level),
        "color": vip_level_color(level),
        "perks": [p["perk_type"] for p in club_perks if p["min_vip_level"] <= level],
    }


def vip_membership(db: Database, club_id: str, user_id: str, now: datetime | None = None) -> dict | None:
    """Membership snapshot with progress and loyalty; None for non-members."""
    member = db.get_vip_member(club_id, user_id)
    if member is None:
        return None
    return _member_view(member, _as_utc(now), db.get_club_perks(club_id))


def club_members(db: Database, club_id: str, now: datetime | None = None) -> list[dict]:
    now = _as_utc(now)
    perks = db.get_club_perks(club_id)
    return [_member_view(m, now, perks) for m in db.get_club_members(club_id)]


def record_gift(
    db: Database,
    club_id: str,
    sender_id: str,
    receiver_id: str,
    amount_sek: float,
    now: datetime | None = None,
) -> dict:
    """Add a confirmed gift to the sender's VIP membership and recompute the level.

    The membership is created on the first gift. Self-gifting and rapid gifting
    are logged for human review, never blocked.
    """
    if amount_sek <= 0:
        raise ValueError(f"Gift amount must be positive, got {amount_sek}")
    now = _as_utc(now)
    stamp = now.isoformat()
    flags: list[str] = []

    db.add_vip_gift(club_id, sender_id, receiver_id, amount_sek, stamp)

    if is_self_gift(sender_id, receiver_id):
        details = {"receiver_id": receiver_id, "gift_amount_sek": amount_sek}
        log.warning("abuse_detected", abuse_type="self_gifting", user_id=sender_id, **details)
        db.log_abuse_event("self_gifting", sender_id, "high", details, stamp, club_id=club_id)
        flags.append("self_gifting")

    since = (now - timedelta(seconds=VIP_FARMING_WINDOW_SECONDS)).isoformat()
    recent = db.count_gifts_since(sender_id, since)
    if is_vip_farming(recent):
        details = {"gift_count": recent, "time_window": "60 seconds", "gift_amount_sek": amount_sek}
        log.warning("abuse_detected", abuse_type="vip_farming", user_id=sender_id, **details)
        db.log_abuse_event("vip_farming", sender_id, "medium", details, stamp, club_id=club_id)
        flags.append("vip_farming")

    member = db.get_vip_member(club_id, sender_id)
    previous_level = member["vip_level"] if member else 1
    joined_at = member["joined_at"] if member else stamp
    total = (member["total_gifted_sek"] if member else 0) + amount_sek
    level = vip_level_from_total(total)
    db.upsert_vip_member(club_id, sender_id, level, total, joined_at, stamp)

    leveled_up = level > previous_level
    if leveled_up:
        log.info("vip_level_up", club_id=club_id, user_id=sender_id,
                 previous_level=previous_level, vip_level=level)

    result = _member_view(db.get_vip_member(club_id, sender_id), now, db.get_club_perks(club_id))
    result.update({
        "gift_amount_sek": amount_sek,
        "previous_level": previous_level,
        "leveled_up": leveled_up,
        "abuse_flags": flags,
    })
    return result
