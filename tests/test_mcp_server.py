"""Tests for the MCP server tool functions."""
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest

from roast_rank.db import Database
from roast_rank.mcp_server import (
    get_badge,
    get_creator_level,
    get_season_rank,
    get_season_rewards,
    get_season_standings,
    get_season_tiers,
    get_vip_membership,
)
from roast_rank.progression import award_xp, create_season, end_season, record_battle, record_gift
from roast_rank.seasons import BattleParticipation


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "mcp.db"


@pytest.fixture
def seeded(db_path):
    """Populate a database, then hand each tool call its own connection."""
    database = Database(db_path=db_path)
    now = datetime.now(tz=timezone.utc)
    award_xp(database, "alice", 1500, now=now)
    create_season(database, now=now)
    record_battle(
        database,
        BattleParticipation(creator_id="alice", match_id="m1", team_size=1, is_winner=True),
        now=now,
    )
    record_gift(database, "club", "fan", "alice", 1500, now=now)
    database.close()
    with patch("roast_rank.mcp_server._get_db", side_effect=lambda: Database(db_path=db_path)):
        yield


@pytest.fixture
def empty(db_path):
    with patch("roast_rank.mcp_server._get_db", side_effect=lambda: Database(db_path=db_path)):
        yield


class TestGetCreatorLevel:
    def test_returns_snapshot(self, seeded):
        result = get_creator_level("alice")
        assert result["level"] == 2
        assert result["current_xp"] == 500
        assert result["perks"][0]["id"] == "custom_stream_frame"

    def test_unknown_creator(self, empty):
        assert "error" in get_creator_level("ghost")

    @patch("roast_rank.mcp_server._get_db")
    def test_closes_db(self, mock_get_db):
        mock_db = MagicMock()
        mock_db.get_creator_level.return_value = None
        mock_get_db.return_value = mock_db
        get_creator_level("ghost")
        mock_db.close.assert_called_once()


class TestGetSeasonRank:
    def test_active_season(self, seeded):
        result = get_season_rank("alice")
        assert result["current_rank"] == 1
        assert result["season_score"] == 300
        assert result["rank_tier"] == "Bronze Mouth"

    def test_explicit_season(self, seeded):
        assert get_season_rank("alice", season_id=1)["season_number"] == 1

    def test_unranked(self, seeded):
        assert "error" in get_season_rank("bob")


class TestGetSeasonStandings:
    def test_entries(self, seeded):
        result = get_season_standings()
        assert result["count"] == 1
        assert result["entries"][0]["creator_id"] == "alice"
        assert result["season"]["season_number"] == 1

    def test_limit(self, seeded):
        result = get_season_standings(limit=0)
        assert result["entries"] == []
        assert result["count"] == 1

    def test_no_season(self, empty):
        assert "error" in get_season_standings()


class TestGetSeasonRewards:
    def test_none_before_season_ends(self, seeded):
        assert get_season_rewards("alice") == {"creator_id": "alice", "rewards": [], "count": 0}

    def test_after_season_ends(self, seeded, db_path):
        database = Database(db_path=db_path)
        end_season(database)
        database.close()
        result = get_season_rewards("alice")
        assert result["count"] == 1
        reward = result["rewards"][0]
        assert reward["seasonal_title"] == "Season 1 Bronze Mouth"
        assert reward["is_top_tier"] is True
        assert reward["stream_intro_sound"] == "bronze_mouth_intro_sound"


class TestGetSeasonTiers:
    def test_lists_all_tiers(self):
        tiers = get_season_tiers()["tiers"]
        assert [t["name"] for t in tiers] == [
            "Bronze Mouth", "Silver Tongue", "Golden Roast",
            "Diamond Disrespect", "Legendary Menace",
        ]
        assert tiers[-1]["max_score"] is None


class TestGetVipMembership:
    def test_member(self, seeded):
        result = get_vip_membership("club", "fan")
        assert result["vip_level"] == 2
        assert result["label"] == "VIP"

    def test_non_member(self, seeded):
        assert "error" in get_vip_membership("club", "stranger")


class TestGetBadge:
    def test_badge(self, seeded):
        result = get_badge("alice")
        assert "<svg" in result["svg"]
        assert result["season_tier"] == "Bronze Mouth"
        assert result["total_xp"] == 1500

    def test_no_data(self, empty):
        assert "error" in get_badge("ghost")
