"""CLI commands for roast-rank."""

from __future__ import annotations

import argparse
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

from roast_rank.badge import generate_badge_svg
from roast_rank.config import (
    get_db_path,
    get_language,
    get_log_level,
    get_season_config,
    get_standings_dir,
    set_config_value,
)
from roast_rank.db import Database
from roast_rank.display import (
    console,
    print_award_result,
    print_badge_result,
    print_club_members,
    print_creator_level,
    print_creator_rewards,
    print_export_result,
    print_gift_result,
    print_no_data_message,
    print_season_created,
    print_season_ended,
    print_season_progress,
    print_standings,
    print_tiers,
    print_vip_membership,
)
from roast_rank.i18n import SUPPORTED_LANGUAGES, LanguageStore
from roast_rank.log import setup_logging
from roast_rank.progression import (
    DEFAULT_SEASON_DAYS,
    award_xp,
    club_members,
    create_season,
    creator_level_snapshot,
    creator_rewards,
    end_season,
    record_battle,
    record_gift,
    season_progress,
    season_standings,
    set_club_perk,
    set_perk_equipped,
    vip_membership,
)
from roast_rank.seasons import BattleParticipation, BattleType
from roast_rank.standings import build_standings_doc, default_export_path, write_standings

CONFIG_KEYS = ("db_path", "language", "log_level", "standings_dir")


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    parser = argparse.ArgumentParser(
        prog="roast-rank",
        description="Creator levels, season ranks and VIP clubs for Roast Live",
    )
    parser.add_argument("--db", default=None, help="Path to the SQLite database")
    parser.add_argument("--lang", choices=SUPPORTED_LANGUAGES, default=None, help="Display language")
    subparsers = parser.add_subparsers(dest="command")

    level_parser = subparsers.add_parser("level", help="Creator XP and levels")
    level_sub = level_parser.add_subparsers(dest="level_command")
    show_p = level_sub.add_parser("show", help="Show a creator's level")
    show_p.add_argument("creator")
    award_p = level_sub.add_parser("award", help="Award XP to a creator")
    award_p.add_argument("creator")
    award_p.add_argument("xp", type=int)
    equip_p = level_sub.add_parser("equip", help="Equip or unequip an unlocked perk")
    equip_p.add_argument("creator")
    equip_p.add_argument("perk")
    equip_p.add_argument("--off", action="store_true", help="Unequip instead")

    season_parser = subparsers.add_parser("season", help="Season rankings")
    season_sub = season_parser.add_subparsers(dest="season_command")
    start_p = season_sub.add_parser("start", help="End the active season and start a new one")
    start_p.add_argument("--days", type=int, default=DEFAULT_SEASON_DAYS)
    record_p = season_sub.add_parser("record", help="Record a battle result for a creator")
    record_p.add_argument("creator")
    record_p.add_argument("--match", required=True, help="Match id")
    record_p.add_argument("--team-size", type=int, default=1)
    record_p.add_argument("--win", action="store_true")
    record_p.add_argument("--gifts", type=float, default=0, help="Individual gift coins")
    record_p.add_argument("--team-score", type=float, default=0)
    record_p.add_argument("--roasters", type=int, default=0, help="Unique roasters")
    record_p.add_argument("--hype", type=float, default=0, help="Peak hype reached")
    record_p.add_argument("--type", choices=[t.value for t in BattleType], default="ranked")
    record_p.add_argument("--hours-ago", type=float, default=0, help="When the battle was played")
    rank_p = season_sub.add_parser("rank", help="Show a creator's season rank")
    rank_p.add_argument("creator")
    rank_p.add_argument("--season", type=int, default=None)
    standings_p = season_sub.add_parser("standings", help="Show season standings")
    standings_p.add_argument("--season", type=int, default=None)
    standings_p.add_argument("--highlight", default=None)
    end_p = season_sub.add_parser("end", help="End a season and grant rewards")
    end_p.add_argument("--season", type=int, default=None)
    export_p = season_sub.add_parser("export", help="Export standings as JSON")
    export_p.add_argument("--season", type=int, default=None)
    export_p.add_argument("--output", "-o", default=None)
    season_sub.add_parser("tiers", help="List season tiers")
    rewards_p = season_sub.add_parser("rewards", help="Show a creator's season rewards")
    rewards_p.add_argument("creator")

    vip_parser = subparsers.add_parser("vip", help="VIP club memberships")
    vip_sub = vip_parser.add_subparsers(dest="vip_command")
    vip_show_p = vip_sub.add_parser("show", help="Show a member's VIP level")
    vip_show_p.add_argument("club")
    vip_show_p.add_argument("user")
    gift_p = vip_sub.add_parser("gift", help="Record a gift into a VIP club")
    gift_p.add_argument("club")
    gift_p.add_argument("sender")
    gift_p.add_argument("receiver")
    gift_p.add_argument("amount", type=float, help="Gift value in SEK")
    members_p = vip_sub.add_parser("members", help="List club members")
    members_p.add_argument("club")
    perk_p = vip_sub.add_parser("perk", help="Offer a cosmetic perk to club members")
    perk_p.add_argument("club")
    perk_p.add_argument("perk", help="Perk type, e.g. custom_chat_color")
    perk_p.add_argument("--level", type=int, default=1, help="Minimum VIP level")

    badge_parser = subparsers.add_parser("badge", help="Generate SVG badge for a creator")
    badge_parser.add_argument("creator")
    badge_parser.add_argument("--output", "-o", default="roast-rank-badge.svg", help="Output file path")

    config_parser = subparsers.add_parser("config", help="Persist a setting")
    config_parser.add_argument("key", choices=CONFIG_KEYS)
    config_parser.add_argument("value")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(get_log_level())

    if args.command is None:
        parser.print_help()
        return
    if args.command == "config":
        try:
            do_config(args.key, args.value)
        except ValueError as exc:
            console.print(f"[red]{exc}[/]")
            sys.exit(1)
        return

    try:
        lang = LanguageStore(args.lang or get_language())
    except ValueError as exc:
        console.print(f"[red]{exc}[/]")
        sys.exit(1)
    db_path = Path(args.db).expanduser() if args.db else get_db_path()
    db = Database(db_path)

    try:
        if args.command == "level":
            _run_level(db, args, lang)
        elif args.command == "season":
            _run_season(db, args, lang)
        elif args.command == "vip":
            _run_vip(db, args, lang)
        elif args.command == "badge":
            do_badge(db, args.creator, output=args.output)
    except ValueError as exc:
        console.print(f"[red]{exc}[/]")
        sys.exit(1)
    finally:
        db.close()


def _run_level(db: Database, args: argparse.Namespace, lang: LanguageStore) -> None:
    cmd = getattr(args, "level_command", None)
    if cmd == "award":
        do_award(db, args.creator, args.xp, lang)
    elif cmd == "equip":
        do_equip(db, args.creator, args.perk, equipped=not args.off)
    elif cmd == "show":
        do_level_show(db, args.creator, lang)
    else:
        console.print("[red]Usage: roast-rank level {show,award,equip} ...[/]")


def _run_season(db: Database, args: argparse.Namespace, lang: LanguageStore) -> None:
    cmd = getattr(args, "season_command", None)
    if cmd == "start":
        do_season_start(db, days=args.days)
    elif cmd == "record":
        participation = BattleParticipation(
            creator_id=args.creator,
            match_id=args.match,
            team_size=args.team_size,
            is_winner=args.win,
            individual_gift_coins=args.gifts,
            team_score=args.team_score,
            unique_roasters_count=args.roasters,
            peak_hype_reached=args.hype,
            battle_type=BattleType(args.type),
        )
        do_season_record(db, participation, hours_ago=args.hours_ago)
    elif cmd == "rank":
        do_season_rank(db, args.creator, season_id=args.season, lang=lang)
    elif cmd == "end":
        do_season_end(db, season_id=args.season)
    elif cmd == "export":
        do_season_export(db, season_id=args.season, output=args.output)
    elif cmd == "tiers":
        print_tiers()
    elif cmd == "rewards":
        do_season_rewards(db, args.creator)
    else:
        do_season_standings(db, season_id=getattr(args, "season", None),
                            highlight=getattr(args, "highlight", None), lang=lang)


def _run_vip(db: Database, args: argparse.Namespace, lang: LanguageStore) -> None:
    cmd = getattr(args, "vip_command", None)
    if cmd == "gift":
        do_vip_gift(db, args.club, args.sender, args.receiver, args.amount, lang)
    elif cmd == "members":
        do_vip_members(db, args.club)
    elif cmd == "perk":
        do_vip_perk(db, args.club, args.perk, min_vip_level=args.level)
    elif cmd == "show":
        do_vip_show(db, args.club, args.user, lang)
    else:
        console.print("[red]Usage: roast-rank vip {show,gift,members,perk} ...[/]")


# ── Creator levels ────────────────────────────────────────────────────────────


def do_level_show(db: Database, creator_id: str, lang: LanguageStore | None = None) -> dict:
    """Show a creator's level and XP progress."""
    snapshot = creator_level_snapshot(db, creator_id)
    if snapshot is None:
        print_no_data_message(creator_id, lang)
        return {"ok": False, "reason": "no_data"}
    print_creator_level(snapshot, lang)
    return {"ok": True, **snapshot}


def do_award(db: Database, creator_id: str, xp: int, lang: LanguageStore | None = None) -> dict:
    """Award XP and show the updated level."""
    result = award_xp(db, creator_id, xp)
    print_award_result(result, lang)
    return {"ok": True, **result}


def do_equip(db: Database, creator_id: str, perk_id: str, equipped: bool = True) -> dict:
    if not set_perk_equipped(db, creator_id, perk_id, equipped):
        console.print(f"[red]{creator_id} has not unlocked {perk_id}[/]")
        return {"ok": False, "reason": "locked"}
    state = "equipped" if equipped else "unequipped"
    console.print(f"[green]{perk_id} {state}[/]")
    return {"ok": True, "perk_id": perk_id, "is_equipped": equipped}


# ── Seasons ───────────────────────────────────────────────────────────────────


def do_season_start(db: Database, days: int = DEFAULT_SEASON_DAYS) -> dict:
    season = create_season(db, duration_days=days)
    print_season_created(season)
    return {"ok": True, "season": season}


def do_season_record(
    db: Database,
    participation: BattleParticipation,
    hours_ago: float = 0,
    config_path: Path | None = None,
) -> dict:
    """Score a battle into the active season using the configured weights."""
    now = datetime.now(tz=timezone.utc)
    played_at = now - timedelta(hours=hours_ago)
    result = record_battle(db, participation, get_season_config(config_path), now=now, played_at=played_at)
    if result is None:
        console.print("[yellow]Casual battles do not affect season scores[/]")
        return {"ok": False, "reason": "casual"}
    console.print(
        f"[green]Recorded {result['match_id']} for {result['creator_id']}: "
        f"+{result['season_score']} season score[/]"
    )
    return {"ok": True, **result}


def do_season_rank(
    db: Database, creator_id: str, season_id: int | None = None, lang: LanguageStore | None = None
) -> dict:
    progress = season_progress(db, creator_id, season_id=season_id)
    if progress is None:
        print_no_data_message(creator_id, lang)
        return {"ok": False, "reason": "no_data"}
    print_season_progress(progress, lang)
    return {"ok": True, **progress}


def do_season_standings(
    db: Database,
    season_id: int | None = None,
    highlight: str | None = None,
    lang: LanguageStore | None = None,
) -> dict:
    season, ranked = season_standings(db, season_id)
    if season is None:
        console.print("[red]No season found. Run: roast-rank season start[/]")
        return {"ok": False, "reason": "no_season"}
    print_standings(season, ranked, highlight=highlight, lang=lang)
    return {"ok": True, "season": season, "entries": ranked, "count": len(ranked)}


def do_season_end(db: Database, season_id: int | None = None) -> dict:
    result = end_season(db, season_id)
    print_season_ended(result)
    return {"ok": True, **result}


def do_season_rewards(db: Database, creator_id: str) -> dict:
    """Show every season reward granted to a creator."""
    rewards = creator_rewards(db, creator_id)
    if not rewards:
        console.print(f"[yellow]{creator_id} has no season rewards yet[/]")
        return {"ok": False, "reason": "no_rewards"}
    print_creator_rewards(creator_id, rewards)
    return {"ok": True, "rewards": rewards, "count": len(rewards)}


def do_season_export(
    db: Database,
    season_id: int | None = None,
    output: str | None = None,
    config_path: Path | None = None,
) -> dict:
    """Write season standings to a JSON file."""
    season, ranked = season_standings(db, season_id)
    if season is None:
        console.print("[red]No season found. Run: roast-rank season start[/]")
        return {"ok": False, "reason": "no_season"}

    if output:
        output_path = Path(output)
    else:
        standings_dir = get_standings_dir(config_path)
        if standings_dir is None:
            console.print(
                "[red]No standings directory set. "
                "Use --output or run: roast-rank config standings_dir <path>[/]"
            )
            return {"ok": False, "reason": "no_dir"}
        output_path = default_export_path(season["season_number"], standings_dir)

    write_standings(build_standings_doc(season, ranked), output_path)
    result = {"ok": True, "output": str(output_path), "count": len(ranked)}
    print_export_result(result)
    return result


# ── VIP clubs ─────────────────────────────────────────────────────────────────


def do_vip_show(db: Database, club_id: str, user_id: str, lang: LanguageStore | None = None) -> dict:
    membership = vip_membership(db, club_id, user_id)
    if membership is None:
        print_no_data_message(f"{user_id} @ {club_id}", lang)
        return {"ok": False, "reason": "not_member"}
    print_vip_membership(membership, lang)
    return {"ok": True, **membership}


def do_vip_gift(
    db: Database,
    club_id: str,
    sender_id: str,
    receiver_id: str,
    amount_sek: float,
    lang: LanguageStore | None = None,
) -> dict:
    result = record_gift(db, club_id, sender_id, receiver_id, amount_sek)
    print_gift_result(result, lang)
    return {"ok": True, **result}


def do_vip_members(db: Database, club_id: str) -> dict:
    members = club_members(db, club_id)
    print_club_members(club_id, members)
    return {"ok": True, "members": members, "count": len(members)}


def do_vip_perk(db: Database, club_id: str, perk_type: str, min_vip_level: int = 1) -> dict:
    perk = set_club_perk(db, club_id, perk_type, min_vip_level)
    console.print(f"[green]{perk_type} unlocked for {club_id} members from VIP {min_vip_level}[/]")
    return {"ok": True, **perk}


# ── Badge & config ────────────────────────────────────────────────────────────


def do_badge(db: Database, creator_id: str, output: str = "roast-rank-badge.svg") -> dict:
    """Generate an SVG badge from the creator's level and current season tier."""
    snapshot = creator_level_snapshot(db, creator_id)
    if snapshot is None:
        print_no_data_message(creator_id)
        return {"ok": False, "reason": "no_data"}
    progress = season_progress(db, creator_id)
    season_tier = progress["rank_tier"] if progress else None
    svg = generate_badge_svg(snapshot["level"], season_tier=season_tier, total_xp=snapshot["total_xp"])
    output_path = Path(output)
    output_path.write_text(svg, encoding="utf-8")
    result = {
        "ok": True,
        "output": str(output_path.resolve()),
        "level": snapshot["level"],
        "tier_name": season_tier or snapshot["tier_name"],
    }
    print_badge_result(result)
    return result


def do_config(key: str, value: str, config_path: Path | None = None) -> dict:
    if key == "language":
        LanguageStore(value)
    set_config_value(key, value, config_path)
    console.print(f"[green]{key} = {value}[/]")
    return {"ok": True, key: value}
