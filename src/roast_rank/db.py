"""SQLite database layer for roast-rank."""

import json
import sqlite3
from pathlib import Path


DEFAULT_DB_PATH = Path.home() / ".roast-rank" / "data.db"


class Database:
    """SQLite database manager with WAL mode."""

    def __init__(self, db_path: Path | None = None) -> None:
        self.db_path = db_path or DEFAULT_DB_PATH
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.conn = sqlite3.connect(str(self.db_path))
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA journal_mode=WAL")
        self.init_db()

    def init_db(self) -> None:
        """Create tables if they do not exist."""
        self.conn.executescript("""
            CREATE TABLE IF NOT EXISTS creator_levels (
                creator_id TEXT PRIMARY KEY,
                level INTEGER NOT NULL DEFAULT 1,
                current_xp INTEGER NOT NULL DEFAULT 0,
                total_xp INTEGER NOT NULL DEFAULT 0,
                updated_at TEXT
            );

            CREATE TABLE IF NOT EXISTS xp_history (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                creator_id TEXT NOT NULL,
                xp_gained INTEGER NOT NULL,
                created_at TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS creator_unlocked_perks (
                creator_id TEXT NOT NULL,
                perk_id TEXT NOT NULL,
                unlocked_at TEXT NOT NULL,
                is_equipped BOOLEAN DEFAULT 0,
                PRIMARY KEY (creator_id, perk_id)
            );

            CREATE TABLE IF NOT EXISTS seasons (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                season_number INTEGER NOT NULL,
                start_date TEXT NOT NULL,
                end_date TEXT NOT NULL,
                duration_days INTEGER NOT NULL,
                status TEXT NOT NULL DEFAULT 'active'
            );

            CREATE TABLE IF NOT EXISTS season_participation (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                season_id INTEGER NOT NULL,
                creator_id TEXT NOT NULL,
                match_id TEXT NOT NULL,
                team_size INTEGER NOT NULL,
                is_winner BOOLEAN DEFAULT 0,
                battle_type TEXT NOT NULL,
                season_score INTEGER NOT NULL,
                created_at TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS season_rewards (
                season_id INTEGER NOT NULL,
                creator_id TEXT NOT NULL,
                final_rank INTEGER NOT NULL,
                final_score REAL NOT NULL,
                tier_name TEXT NOT NULL,
                seasonal_title TEXT,
                badge_icon TEXT,
                badge_color TEXT,
                intro_animation TEXT,
                profile_effect TEXT,
                stream_intro_sound TEXT,
                battle_victory_animation TEXT,
                ultra_intro_animation TEXT,
                highlighted_in_discovery BOOLEAN DEFAULT 0,
                is_top_tier BOOLEAN DEFAULT 0,
                granted_at TEXT NOT NULL,
                PRIMARY KEY (season_id, creator_id)
            );

            CREATE TABLE IF NOT EXISTS vip_members (
                club_id TEXT NOT NULL,
                user_id TEXT NOT NULL,
                vip_level INTEGER NOT NULL DEFAULT 1,
                total_gifted_sek REAL NOT NULL DEFAULT 0,
                joined_at TEXT NOT NULL,
                updated_at TEXT,
                PRIMARY KEY (club_id, user_id)
            );

            CREATE TABLE IF NOT EXISTS vip_club_perks (
                club_id TEXT NOT NULL,
                perk_type TEXT NOT NULL,
                min_vip_level INTEGER NOT NULL DEFAULT 1,
                PRIMARY KEY (club_id, perk_type)
            );

            CREATE TABLE IF NOT EXISTS vip_gifts (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                club_id TEXT NOT NULL,
                sender_id TEXT NOT NULL,
                receiver_id TEXT NOT NULL,
                amount_sek REAL NOT NULL,
                created_at TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS abuse_events (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                event_type TEXT NOT NULL,
                user_id TEXT NOT NULL,
                club_id TEXT,
                severity TEXT NOT NULL,
                details TEXT,
                created_at TEXT NOT NULL
            );
        """)
        self.conn.commit()

    # ── Creator levels ────────────────────────────────────────────────────

    def get_creator_level(self, creator_id: str) -> dict | None:
        row = self.conn.execute(
            "SELECT * FROM creator_levels WHERE creator_id = ?", (creator_id,)
        ).fetchone()
        return dict(row) if row else None

    def upsert_creator_level(
        self, creator_id: str, level: int, current_xp: int, total_xp: int, updated_at: str
    ) -> None:
        self.conn.execute(
            "INSERT INTO creator_levels (creator_id, level, current_xp, total_xp, updated_at) "
            "VALUES (?, ?, ?, ?, ?) "
            "ON CONFLICT(creator_id) DO UPDATE SET level = excluded.level, "
            "current_xp = excluded.current_xp, total_xp = excluded.total_xp, "
            "updated_at = excluded.updated_at",
            (creator_id, level, current_xp, total_xp, updated_at),
        )
        self.conn.commit()

    def add_xp_history(self, creator_id: str, xp_gained: int, created_at: str) -> None:
        self.conn.execute(
            "INSERT INTO xp_history (creator_id, xp_gained, created_at) VALUES (?, ?, ?)",
            (creator_id, xp_gained, created_at),
        )
        self.conn.commit()

    def get_xp_since(self, creator_id: str, since: str) -> int:
        """Sum of XP gained by a creator at or after `since`."""
        row = self.conn.execute(
            "SELECT COALESCE(SUM(xp_gained), 0) AS total FROM xp_history "
            "WHERE creator_id = ? AND created_at >= ?",
            (creator_id, since),
        ).fetchone()
        return int(row["total"])

    # ── Creator perks ─────────────────────────────────────────────────────

    def unlock_perk(self, creator_id: str, perk_id: str, unlocked_at: str) -> bool:
        """Record a perk unlock. Returns False if it was already unlocked."""
        cursor = self.conn.execute(
            "INSERT OR IGNORE INTO creator_unlocked_perks (creator_id, perk_id, unlocked_at) "
            "VALUES (?, ?, ?)",
            (creator_id, perk_id, unlocked_at),
        )
        self.conn.commit()
        return cursor.rowcount > 0

    def get_unlocked_perks(self, creator_id: str) -> list[dict]:
        rows = self.conn.execute(
            "SELECT * FROM creator_unlocked_perks WHERE creator_id = ? ORDER BY unlocked_at, perk_id",
            (creator_id,),
        ).fetchall()
        return [dict(row) for row in rows]

    def set_perk_equipped(self, creator_id: str, perk_id: str, equipped: bool) -> bool:
        """Equip or unequip an unlocked perk. Returns False if the perk isn't unlocked."""
        cursor = self.conn.execute(
            "UPDATE creator_unlocked_perks SET is_equipped = ? WHERE creator_id = ? AND perk_id = ?",
            (1 if equipped else 0, creator_id, perk_id),
        )
        self.conn.commit()
        return cursor.rowcount > 0

    # ── Seasons ───────────────────────────────────────────────────────────

    def create_season(
        self, season_number: int, start_date: str, end_date: str, duration_days: int
    ) -> int:
        cursor = self.conn.execute(
            "INSERT INTO seasons (season_number, start_date, end_date, duration_days, status) "
            "VALUES (?, ?, ?, ?, 'active')",
            (season_number, start_date, end_date, duration_days),
        )
        self.conn.commit()
        return int(cursor.lastrowid)

    def get_season(self, season_id: int) -> dict | None:
        row = self.conn.execute("SELECT * FROM seasons WHERE id = ?", (season_id,)).fetchone()
        return dict(row) if row else None

    def get_active_season(self) -> dict | None:
        row = self.conn.execute(
            "SELECT * FROM seasons WHERE status = 'active' ORDER BY season_number DESC LIMIT 1"
        ).fetchone()
        return dict(row) if row else None

    def get_last_season_number(self) -> int:
        row = self.conn.execute(
            "SELECT COALESCE(MAX(season_number), 0) AS n FROM seasons"
        ).fetchone()
        return int(row["n"])

    def set_season_status(self, season_id: int, status: str) -> None:
        self.conn.execute("UPDATE seasons SET status = ? WHERE id = ?", (status, season_id))
        self.conn.commit()

    def complete_active_seasons(self) -> None:
        self.conn.execute("UPDATE seasons SET status = 'completed' WHERE status = 'active'")
        self.conn.commit()

    def add_participation(
        self,
        season_id: int,
        creator_id: str,
        match_id: str,
        team_size: int,
        is_winner: bool,
        battle_type: str,
        season_score: int,
        created_at: str,
    ) -> None:
        self.conn.execute(
            "INSERT INTO season_participation (season_id, creator_id, match_id, team_size, "
            "is_winner, battle_type, season_score, created_at) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
            (season_id, creator_id, match_id, team_size, 1 if is_winner else 0,
             battle_type, season_score, created_at),
        )
        self.conn.commit()

    def get_season_totals(self, season_id: int) -> list[dict]:
        """Aggregate participation per creator: composite score, wins, battles."""
        rows = self.conn.execute(
            "SELECT creator_id, SUM(season_score) AS composite_score, "
            "SUM(is_winner) AS battles_won, COUNT(*) AS battles_participated "
            "FROM season_participation WHERE season_id = ? GROUP BY creator_id",
            (season_id,),
        ).fetchall()
        return [dict(row) for row in rows]

    def add_season_reward(self, season_id: int, reward: dict, granted_at: str) -> None:
        """Store a reward built by standings.build_reward, cosmetics included."""
        self.conn.execute(
            "INSERT OR REPLACE INTO season_rewards (season_id, creator_id, final_rank, final_score, "
            "tier_name, seasonal_title, badge_icon, badge_color, intro_animation, profile_effect, "
            "stream_intro_sound, battle_victory_animation, ultra_intro_animation, "
            "highlighted_in_discovery, is_top_tier, granted_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                season_id, reward["creator_id"], reward["final_rank"], reward["final_score"],
                reward["tier_name"], reward["seasonal_title"], reward["badge_icon"],
                reward["badge_color"], reward["intro_animation"], reward["profile_effect"],
                reward["stream_intro_sound"], reward["battle_victory_animation"],
                reward["ultra_intro_animation"], 1 if reward["highlighted_in_discovery"] else 0,
                1 if reward["is_top_tier"] else 0, granted_at,
            ),
        )
        self.conn.commit()

    def get_creator_rewards(self, creator_id: str) -> list[dict]:
        """All rewards granted to a creator, newest first, with season numbers."""
        rows = self.conn.execute(
            "SELECT r.*, s.season_number FROM season_rewards r "
            "JOIN seasons s ON s.id = r.season_id "
            "WHERE r.creator_id = ? ORDER BY r.granted_at DESC, s.season_number DESC",
            (creator_id,),
        ).fetchall()
        return [dict(row) for row in rows]

    # ── VIP clubs ─────────────────────────────────────────────────────────

    def get_vip_member(self, club_id: str, user_id: str) -> dict | None:
        row = self.conn.execute(
            "SELECT * FROM vip_members WHERE club_id = ? AND user_id = ?", (club_id, user_id)
        ).fetchone()
        return dict(row) if row else None

    def upsert_vip_member(
        self,
        club_id: str,
        user_id: str,
        vip_level: int,
        total_gifted_sek: float,
        joined_at: str,
        updated_at: str,
    ) -> None:
        """Insert or update a membership. joined_at is kept from the first insert."""
        self.conn.execute(
            "INSERT INTO vip_members (club_id, user_id, vip_level, total_gifted_sek, joined_at, updated_at) "
            "VALUES (?, ?, ?, ?, ?, ?) "
            "ON CONFLICT(club_id, user_id) DO UPDATE SET vip_level = excluded.vip_level, "
            "total_gifted_sek = excluded.total_gifted_sek, updated_at = excluded.updated_at",
            (club_id, user_id, vip_level, total_gifted_sek, joined_at, updated_at),
        )
        self.conn.commit()

    def get_club_members(self, club_id: str) -> list[dict]:
        rows = self.conn.execute(
            "SELECT * FROM vip_members WHERE club_id = ? "
            "ORDER BY vip_level DESC, total_gifted_sek DESC, user_id",
            (club_id,),
        ).fetchall()
        return [dict(row) for row in rows]

    def set_club_perk(self, club_id: str, perk_type: str, min_vip_level: int) -> None:
        self.conn.execute(
            "INSERT INTO vip_club_perks (club_id, perk_type, min_vip_level) VALUES (?, ?, ?) "
            "ON CONFLICT(club_id, perk_type) DO UPDATE SET min_vip_level = excluded.min_vip_level",
            (club_id, perk_type, min_vip_level),
        )
        self.conn.commit()

    def get_club_perks(self, club_id: str) -> list[dict]:
        rows = self.conn.execute(
            "SELECT * FROM vip_club_perks WHERE club_id = ? ORDER BY min_vip_level, perk_type",
            (club_id,),
        ).fetchall()
        return [dict(row) for row in rows]

    def add_vip_gift(
        self, club_id: str, sender_id: str, receiver_id: str, amount_sek: float, created_at: str
    ) -> None:
        self.conn.execute(
            "INSERT INTO vip_gifts (club_id, sender_id, receiver_id, amount_sek, created_at) "
            "VALUES (?, ?, ?, ?, ?)",
            (club_id, sender_id, receiver_id, amount_sek, created_at),
        )
        self.conn.commit()

    def count_gifts_since(self, sender_id: str, since: str) -> int:
        row = self.conn.execute(
            "SELECT COUNT(*) AS n FROM vip_gifts WHERE sender_id = ? AND created_at >= ?",
            (sender_id, since),
        ).fetchone()
        return int(row["n"])

    # ── Abuse flags ───────────────────────────────────────────────────────

    def log_abuse_event(
        self,
        event_type: str,
        user_id: str,
        severity: str,
        details: dict,
        created_at: str,
        club_id: str | None = None,
    ) -> None:
        self.conn.execute(
            "INSERT INTO abuse_events (event_type, user_id, club_id, severity, details, created_at) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            (event_type, user_id, club_id, severity, json.dumps(details), created_at),
        )
        self.conn.commit()

    def get_abuse_events(self, user_id: str | None = None) -> list[dict]:
        if user_id is None:
            rows = self.conn.execute("SELECT * FROM abuse_events ORDER BY id").fetchall()
        else:
            rows = self.conn.execute(
                "SELECT * FROM abuse_events WHERE user_id = ? ORDER BY id", (user_id,)
            ).fetchall()
        events = []
        for row in rows:
            event = dict(row)
            event["details"] = json.loads(event["details"]) if event["details"] else {}
            events.append(event)
        return events

    def close(self) -> None:
        """Close the database connection."""
        self.conn.close()
