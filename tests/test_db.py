"""Tests for the SQLite database layer."""

import pytest

from roast_rank.db import Database
from roast_rank.standings import build_reward, rank_entries


@pytest.fixture
def db(tmp_path):
    database = Database(db_path=tmp_path / "test.db")
    yield database
    database.close()


class TestDatabaseInit:
    def test_creates_file(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "data.db"
        database = Database(db_path=path)
        assert path.exists()
        database.close()

    def test_wal_mode(self, db):
        mode = db.conn.execute("PRAGMA journal_mode").fetchone()[0]
        assert mode == "wal"

    def test_tables_exist(self, db):
        names = {
            row[0] for row in
            db.conn.execute("SELECT name FROM sqlite_master WHERE type='table'").fetchall()
        }
        for table in [
            "creator_levels", "xp_history", "creator_unlocked_perks", "seasons",
            "season_participation", "season_rewards", "vip_members", "vip_club_perks",
            "vip_gifts", "abuse_events",
        ]:
            assert table in names

    def test_init_is_idempotent(self, db):
        db.init_db()
        db.init_db()


class TestCreatorLevels:
    def test_missing(self, db):
        assert db.get_creator_level("nobody") is None

    def test_upsert(self, db):
        db.upsert_creator_level("alice", 2, 150, 1150, "2026-03-01T00:00:00+00:00")
        db.upsert_creator_level("alice", 3, 10, 2160, "2026-03-02T00:00:00+00:00")
        row = db.get_creator_level("alice")
        assert row["level"] == 3
        assert row["current_xp"] == 10
        assert row["total_xp"] == 2160

    def test_xp_since(self, db):
        db.add_xp_history("alice", 100, "2026-03-01T10:00:00+00:00")
        db.add_xp_history("alice", 200, "2026-03-01T11:30:00+00:00")
        db.add_xp_history("bob", 999, "2026-03-01T11:30:00+00:00")
        assert db.get_xp_since("alice", "2026-03-01T11:00:00+00:00") == 200
        assert db.get_xp_since("alice", "2026-03-01T00:00:00+00:00") == 300
        assert db.get_xp_since("carol", "2026-03-01T00:00:00+00:00") == 0


class TestPerks:
    def test_unlock_once(self, db):
        assert db.unlock_perk("alice", "chat_highlight", "2026-03-01") is True
        assert db.unlock_perk("alice", "chat_highlight", "2026-03-02") is False
        perks = db.get_unlocked_perks("alice")
        assert len(perks) == 1
        assert perks[0]["unlocked_at"] == "2026-03-01"

    def test_equip(self, db):
        db.unlock_perk("alice", "chat_highlight", "2026-03-01")
        assert db.set_perk_equipped("alice", "chat_highlight", True) is True
        assert db.get_unlocked_perks("alice")[0]["is_equipped"] == 1
        assert db.set_perk_equipped("alice", "chat_highlight", False) is True
        assert db.get_unlocked_perks("alice")[0]["is_equipped"] == 0

    def test_equip_locked_perk(self, db):
        assert db.set_perk_equipped("alice", "legendary_aura", True) is False


class TestSeasons:
    def test_create_and_get(self, db):
        sid = db.create_season(1, "2026-03-01", "2026-03-15", 14)
        season = db.get_season(sid)
        assert season["season_number"] == 1
        assert season["status"] == "active"
        assert db.get_active_season()["id"] == sid

    def test_last_season_number(self, db):
        assert db.get_last_season_number() == 0
        db.create_season(1, "a", "b", 14)
        db.create_season(2, "c", "d", 14)
        assert db.get_last_season_number() == 2

    def test_complete_active(self, db):
        sid = db.create_season(1, "a", "b", 14)
        db.complete_active_seasons()
        assert db.get_active_season() is None
        assert db.get_season(sid)["status"] == "completed"

    def test_totals(self, db):
        sid = db.create_season(1, "a", "b", 14)
        db.add_participation(sid, "alice", "m1", 1, True, "ranked", 300, "t1")
        db.add_participation(sid, "alice", "m2", 1, False, "ranked", 100, "t2")
        db.add_participation(sid, "bob", "m1", 1, False, "ranked", 150, "t1")
        totals = {t["creator_id"]: t for t in db.get_season_totals(sid)}
        assert totals["alice"]["composite_score"] == 400
        assert totals["alice"]["battles_won"] == 1
        assert totals["alice"]["battles_participated"] == 2
        assert totals["bob"]["battles_won"] == 0

    def test_totals_scoped_to_season(self, db):
        s1 = db.create_season(1, "a", "b", 14)
        s2 = db.create_season(2, "c", "d", 14)
        db.add_participation(s1, "alice", "m1", 1, True, "ranked", 300, "t1")
        assert db.get_season_totals(s2) == []

    def test_rewards_keep_cosmetics(self, db):
        sid = db.create_season(3, "a", "b", 14)
        entry = rank_entries([{"creator_id": "alice", "composite_score": 400, "battles_won": 1}])[0]
        db.add_season_reward(sid, build_reward(entry, 3), "2026-03-15T00:00:00+00:00")
        rewards = db.get_creator_rewards("alice")
        assert len(rewards) == 1
        stored = rewards[0]
        assert stored["season_number"] == 3
        assert stored["seasonal_title"] == "Season 3 Bronze Mouth"
        assert stored["badge_icon"] == "\U0001f949"
        assert stored["badge_color"] == "#CD7F32"
        assert stored["intro_animation"] == "bronze_intro"
        assert stored["profile_effect"] == "bronze_glow"
        assert stored["stream_intro_sound"] == "bronze_mouth_intro_sound"
        assert stored["battle_victory_animation"] == "bronze_mouth_victory"
        assert stored["ultra_intro_animation"] == "ultra_champion_intro"
        assert stored["highlighted_in_discovery"] == 1
        assert stored["is_top_tier"] == 1

    def test_rewards_newest_first(self, db):
        s1 = db.create_season(1, "a", "b", 14)
        s2 = db.create_season(2, "c", "d", 14)
        entry = rank_entries([{"creator_id": "alice", "composite_score": 100}])[0]
        db.add_season_reward(s1, build_reward(entry, 1), "2026-01-15")
        db.add_season_reward(s2, build_reward(entry, 2), "2026-02-15")
        assert [r["season_number"] for r in db.get_creator_rewards("alice")] == [2, 1]
        assert db.get_creator_rewards("bob") == []


class TestClubPerks:
    def test_set_and_list(self, db):
        db.set_club_perk("club", "priority_chat", 5)
        db.set_club_perk("club", "custom_chat_color", 1)
        db.set_club_perk("other", "intro_sound", 1)
        perks = db.get_club_perks("club")
        assert [(p["perk_type"], p["min_vip_level"]) for p in perks] == [
            ("custom_chat_color", 1), ("priority_chat", 5),
        ]

    def test_update_level(self, db):
        db.set_club_perk("club", "priority_chat", 5)
        db.set_club_perk("club", "priority_chat", 10)
        assert db.get_club_perks("club")[0]["min_vip_level"] == 10


class TestVipMembers:
    def test_upsert_keeps_joined_at(self, db):
        db.upsert_vip_member("club", "u1", 1, 500, "2026-01-01", "2026-01-01")
        db.upsert_vip_member("club", "u1", 2, 1500, "2026-02-01", "2026-02-01")
        member = db.get_vip_member("club", "u1")
        assert member["joined_at"] == "2026-01-01"
        assert member["updated_at"] == "2026-02-01"
        assert member["vip_level"] == 2
        assert member["total_gifted_sek"] == 1500

    def test_club_members_ordered(self, db):
        db.upsert_vip_member("club", "low", 1, 100, "t", "t")
        db.upsert_vip_member("club", "high", 5, 6000, "t", "t")
        db.upsert_vip_member("other", "x", 20, 25000, "t", "t")
        ids = [m["user_id"] for m in db.get_club_members("club")]
        assert ids == ["high", "low"]

    def test_count_gifts_since(self, db):
        db.add_vip_gift("club", "u1", "host", 10, "2026-03-01T12:00:00+00:00")
        db.add_vip_gift("club", "u1", "host", 10, "2026-03-01T12:00:30+00:00")
        db.add_vip_gift("club", "u2", "host", 10, "2026-03-01T12:00:30+00:00")
        assert db.count_gifts_since("u1", "2026-03-01T12:00:10+00:00") == 1
        assert db.count_gifts_since("u1", "2026-03-01T11:00:00+00:00") == 2


class TestAbuseEvents:
    def test_details_round_trip(self, db):
        db.log_abuse_event("self_gifting", "u1", "high", {"gift_amount_sek": 50}, "t", club_id="club")
        events = db.get_abuse_events("u1")
        assert len(events) == 1
        assert events[0]["details"] == {"gift_amount_sek": 50}
        assert events[0]["club_id"] == "club"

    def test_filter_by_user(self, db):
        db.log_abuse_event("xp_farming", "alice", "medium", {}, "t")
        db.log_abuse_event("vip_farming", "bob", "medium", {}, "t")
        assert len(db.get_abuse_events()) == 2
        assert [e["event_type"] for e in db.get_abuse_events("bob")] == ["vip_farming"]
