"""Rich terminal display for roast-rank."""

from __future__ import annotations

from datetime import datetime

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from roast_rank.i18n import LanguageStore
from roast_rank.seasons import (
    SEASON_TIERS,
    format_season_date_range,
    format_season_score,
    get_tier,
    next_tier,
    tier_color,
    tier_icon,
    win_rate,
    win_rate_color,
)
from roast_rank.vip import VIP_MAX_LEVEL

console = Console()

_DEFAULT_LANG = LanguageStore()


def format_number(n: float) -> str:
    """Format large numbers: 421543 -> '421.5K', 1200 -> '1,200', 1234567 -> '1.2M'."""
    if n >= 1_000_000:
        value = n / 1_000_000
        if value >= 100:
            return f"{value:.0f}M"
        return f"{value:.1f}M"
    if n >= 10_000:
        value = n / 1_000
        if value >= 1000:
            return f"{value:.0f}K"
        return f"{value:.1f}K"
    return f"{n:,.0f}"


def _xp_bar(current: float, total: float, width: int = 20) -> str:
    """Render a progress bar as text: [████████░░░░░░░░░░░░]."""
    if total <= 0:
        return "[" + "█" * width + "]"
    ratio = max(0.0, min(current / total, 1.0))
    filled = int(ratio * width)
    empty = width - filled
    return "[" + "█" * filled + "░" * empty + "]"


def print_creator_level(data: dict, lang: LanguageStore | None = None) -> None:
    """Print a creator's level, XP bar and perks."""
    lang = lang or _DEFAULT_LANG
    color = data.get("tier_color", "#CCCCCC")
    current = data.get("current_xp", 0)
    needed = data.get("xp_to_next_level", 0)

    lines: list[str] = []
    lines.append("")
    lines.append(
        f"  [bold {color}]"
        f"{lang.t('level_title', level=data.get('level', 1), tier=data.get('tier_name', 'Beginner'))}[/]"
    )
    bar = _xp_bar(current, needed)
    progress_text = lang.t("xp_progress", current=format_number(current), needed=format_number(needed))
    lines.append(f"  {bar} {progress_text} ({data.get('progress', 0)}%)")
    lines.append(f"  Total: [bold]{format_number(data.get('total_xp', 0))}[/] XP")

    perks = data.get("perks", [])
    if perks:
        lines.append("")
        lines.append("  [bold]Perks:[/]")
        for perk in perks:
            marker = " [green](equipped)[/]" if perk.get("is_equipped") else ""
            lines.append(f"  {perk['icon']} {perk['name']}{marker}")

    upcoming = data.get("next_perk")
    if upcoming:
        lines.append("")
        lines.append(f"  Next perk: {upcoming['name']} at level {upcoming['unlock_level']}")
    lines.append("")

    panel = Panel(
        "\n".join(lines),
        title=f"[bold]{data.get('creator_id', '')}[/]",
        box=box.ROUNDED,
        border_style=color,
        width=56,
    )
    console.print(panel)


def print_award_result(data: dict, lang: LanguageStore | None = None) -> None:
    """Print the outcome of an XP award, then the updated level panel."""
    lang = lang or _DEFAULT_LANG
    console.print(f"  +{format_number(data.get('xp_awarded', 0))} XP")
    if data.get("leveled_up"):
        console.print(f"  [bold yellow]{lang.t('level_up', level=data.get('level', 1))}[/]")
    for perk_id in data.get("new_perks", []):
        console.print(f"  \U0001f513 Unlocked perk: {perk_id}")
    if data.get("xp_farming_flagged"):
        console.print("  [red]Unusual XP gain flagged for review[/]")
    print_creator_level(data, lang)


def print_season_progress(data: dict, lang: LanguageStore | None = None) -> None:
    """Print a creator's season rank, tier and rank-up progress."""
    lang = lang or _DEFAULT_LANG
    tier = data.get("rank_tier")
    color = data.get("tier_color", tier_color(tier))
    icon = data.get("tier_icon", tier_icon(tier))
    progress = data.get("progress_to_next_tier", 0)

    lines: list[str] = []
    lines.append("")
    lines.append(f"  {icon} [bold {color}]{tier or lang.t('unranked')}[/]")
    lines.append(
        f"  {lang.t('rank_position', rank=data.get('current_rank', 0), total=data.get('total_creators', 0))}"
        f"  ({data.get('percentile_label', '')})"
    )
    lines.append(f"  Score: [bold]{format_season_score(data.get('season_score', 0))}[/]")
    threshold = data.get("next_tier_threshold")
    if threshold is None:
        lines.append(f"  {_xp_bar(1, 1)} {lang.t('top_tier')}")
    else:
        lines.append(f"  {_xp_bar(progress, 100)} {progress:.0f}% to {format_number(threshold)}")
    current = get_tier(tier)
    upcoming = next_tier(current) if current else None
    if data.get("near_rank_up") and upcoming:
        lines.append(
            f"  [bold {color}]{lang.t('near_rank_up', progress=f'{progress:.0f}', tier=upcoming.name)}[/]"
        )
    lines.append(
        f"  Battles: {_win_rate_text(data.get('battles_won', 0), data.get('battles_participated', 0))}"
        f"  |  {data.get('days_remaining', 0)} days left"
    )
    lines.append("")

    panel = Panel(
        "\n".join(lines),
        title=f"[bold]{lang.t('season_rank')} - Season {data.get('season_number', '?')}[/]",
        box=box.ROUNDED,
        border_style=color,
        width=56,
    )
    console.print(panel)


def _win_rate_text(won: int, played: int) -> str:
    """'3/4 won (75%)' with the percentage colored by win rate."""
    rate = win_rate(won, played)
    return f"{won}/{played} won ([{win_rate_color(rate)}]{rate}%[/])"


def print_standings(
    season: dict,
    ranked: list[dict],
    highlight: str | None = None,
    lang: LanguageStore | None = None,
) -> None:
    """Print a season standings table, highlighting one creator if given."""
    lang = lang or _DEFAULT_LANG
    table = Table(
        title=lang.t("standings", number=season.get("season_number", "?")),
        box=box.ROUNDED,
        show_header=True,
        header_style="bold",
    )
    table.add_column("#", justify="right", width=4)
    table.add_column("Creator", min_width=14)
    table.add_column("Tier", min_width=18)
    table.add_column("Score", justify="right")
    table.add_column("Won", justify="right")
    table.add_column("Next Tier", min_width=12)

    for entry in ranked:
        tier = entry.get("current_tier")
        color = tier_color(tier)
        name = entry.get("creator_id", "")
        if highlight and name == highlight:
            name = f"[bold reverse]{name}[/]"
        progress = entry.get("progress_to_next_tier", 0)
        next_text = "MAX" if entry.get("next_tier_threshold") is None else f"{progress:.0f}%"
        table.add_row(
            str(entry.get("rank", "")),
            name,
            f"{tier_icon(tier)} [{color}]{tier}[/]",
            format_season_score(entry.get("composite_score", 0)),
            _win_rate_text(entry.get("battles_won", 0), entry.get("battles_participated", 0)),
            next_text,
        )

    console.print(table)


def print_tiers() -> None:
    """Print the season tier table."""
    table = Table(title="Season Tiers", box=box.ROUNDED, show_header=True, header_style="bold")
    table.add_column("", width=2)
    table.add_column("Tier", min_width=18)
    table.add_column("Score", justify="right")
    for tier in SEASON_TIERS:
        if tier.max_score is None:
            span = f"{tier.min_score:,}+"
        else:
            span = f"{tier.min_score:,} - {tier.max_score:,}"
        table.add_row(tier.icon, f"[{tier.color}]{tier.name}[/]", span)
    console.print(table)


def print_season_created(season: dict) -> None:
    start = datetime.fromisoformat(season["start_date"])
    end = datetime.fromisoformat(season["end_date"])
    lines = [
        "",
        f"  Season {season.get('season_number')} is live",
        f"  {format_season_date_range(start, end)} ({season.get('duration_days')} days)",
        "",
    ]
    panel = Panel("\n".join(lines), title="[bold]New Season[/]", box=box.ROUNDED,
                  border_style="green", width=56)
    console.print(panel)


def print_season_ended(result: dict) -> None:
    """Print granted season rewards."""
    season = result.get("season", {})
    table = Table(
        title=f"Season {season.get('season_number', '?')} Rewards",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold",
    )
    table.add_column("#", justify="right", width=4)
    table.add_column("Creator", min_width=14)
    table.add_column("Title", min_width=20)
    table.add_column("Top 10", justify="center")
    for reward in result.get("rewards", []):
        table.add_row(
            str(reward["final_rank"]),
            reward["creator_id"],
            f"{reward['badge_icon']} [{reward['badge_color']}]{reward['seasonal_title']}[/]",
            "⭐" if reward["is_top_tier"] else "",
        )
    console.print(table)


def print_creator_rewards(creator_id: str, rewards: list[dict]) -> None:
    """Print every season reward a creator holds, newest first."""
    table = Table(
        title=f"Season Rewards - {creator_id}",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold",
    )
    table.add_column("Season", justify="right")
    table.add_column("Title", min_width=20)
    table.add_column("Rank", justify="right")
    table.add_column("Score", justify="right")
    table.add_column("Intro")
    for reward in rewards:
        title = f"{reward['badge_icon']} [{reward['badge_color']}]{reward['seasonal_title']}[/]"
        if reward["is_top_tier"]:
            title += " ⭐"
        table.add_row(
            str(reward["season_number"]),
            title,
            f"#{reward['final_rank']}",
            format_season_score(reward["final_score"]),
            reward["ultra_intro_animation"] or reward["intro_animation"],
        )
    console.print(table)


def print_vip_membership(data: dict, lang: LanguageStore | None = None) -> None:
    """Print a VIP membership with level progress and loyalty."""
    lang = lang or _DEFAULT_LANG
    color = data.get("color", "#FFD700")
    level = data.get("vip_level", 1)
    to_next = data.get("sek_to_next_level", 0)
    progress = data.get("progress", 0)

    lines: list[str] = []
    lines.append("")
    lines.append(f"  [bold {color}]{data.get('label', 'VIP')}  {lang.t('vip_level', level=level)}[/]")
    lines.append(f"  {_xp_bar(progress, 100)} {progress:.0f}%")
    if level >= VIP_MAX_LEVEL:
        lines.append(f"  {lang.t('vip_max_level')}")
    else:
        lines.append(f"  {lang.t('sek_to_next', amount=format_number(to_next))}")
    lines.append(f"  Gifted: [bold]{format_number(data.get('total_gifted_sek', 0))}[/] SEK")
    lines.append(f"  {lang.t('loyalty', days=data.get('loyalty_days', 0))}")
    perks = data.get("perks", [])
    if perks:
        lines.append(f"  Perks: {', '.join(perks)}")
    lines.append("")

    panel = Panel(
        "\n".join(lines),
        title=f"[bold]{lang.t('vip_membership')} - {data.get('user_id', '')} @ {data.get('club_id', '')}[/]",
        box=box.ROUNDED,
        border_style=color,
        width=56,
    )
    console.print(panel)


def print_gift_result(data: dict, lang: LanguageStore | None = None) -> None:
    lang = lang or _DEFAULT_LANG
    console.print(f"  {lang.t('gift_recorded')}: {format_number(data.get('gift_amount_sek', 0))} SEK")
    if data.get("leveled_up"):
        console.print(
            f"  [bold yellow]VIP {data.get('previous_level')} → {data.get('vip_level')}[/]"
        )
    for flag in data.get("abuse_flags", []):
        console.print(f"  [red]Flagged for review: {flag}[/]")
    print_vip_membership(data, lang)


def print_club_members(club_id: str, members: list[dict]) -> None:
    table = Table(title=f"VIP Club {club_id}", box=box.ROUNDED, show_header=True, header_style="bold")
    table.add_column("Member", min_width=14)
    table.add_column("Level", justify="right")
    table.add_column("Rank", min_width=10)
    table.add_column("Gifted (SEK)", justify="right")
    table.add_column("Days", justify="right")
    for m in members:
        table.add_row(
            m["user_id"],
            str(m["vip_level"]),
            f"[{m['color']}]{m['label']}[/]",
            format_number(m["total_gifted_sek"]),
            str(m["loyalty_days"]),
        )
    console.print(table)


def print_no_data_message(subject: str, lang: LanguageStore | None = None) -> None:
    """Print message when nothing is stored for the requested subject."""
    lang = lang or _DEFAULT_LANG
    panel = Panel(
        f"\n  {lang.t('no_data', subject=subject)}\n",
        title="[bold]ROAST RANK[/]",
        box=box.ROUNDED,
        border_style="grey50",
        width=56,
    )
    console.print(panel)


def print_badge_result(result: dict) -> None:
    """Print badge generation result."""
    lines: list[str] = []
    lines.append("")
    lines.append(f"  Badge saved to: [bold]{result.get('output', '')}[/]")
    lines.append(f"  Level {result.get('level', 1)} - {result.get('tier_name', '')}")
    lines.append("")

    panel = Panel(
        "\n".join(lines),
        title="[bold]Badge Generated[/]",
        box=box.ROUNDED,
        border_style="green",
        width=56,
    )
    console.print(panel)


def print_export_result(result: dict) -> None:
    console.print(
        f"[green]Exported {result.get('count', 0)} entries to[/] [bold]{result.get('output', '')}[/]"
    )
