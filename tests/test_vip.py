"""Tests for VIP club levels."""

from datetime import datetime, timedelta, timezone

import pytest

from roast_rank.vip import (
    VIP_MAX_LEVEL,
    cumulative_sek_for_level,
    is_self_gift,
    is_vip_farming,
    is_xp_farming,
    loyalty_days,
    sek_for_next_level,
    sek_to_reach_level,
    validate_perk,
    vip_level_color,
    vip_level_from_total,
    vip_level_label,
    vip_level_progress,
)

STEP = 25000 / 19


class TestCumulativeSek:
    def test_level_zero(self):
        assert cumulative_sek_for_level(0) == 0

    def test_level_one(self):
        assert cumulative_sek_for_level(1) == pytest.approx(STEP)

    def test_top_level_is_exactly_25000(self):
        assert cumulative_sek_for_level(20) == 25000
        assert cumulative_sek_for_level(19) == 25000

    def test_negative_level(self):
        assert cumulative_sek_for_level(-3) == 0

    def test_non_decreasing(self):
        values = [cumulative_sek_for_level(lv) for lv in range(0, VIP_MAX_LEVEL + 1)]
        assert values == sorted(values)

    def test_strictly_increasing_below_cap(self):
        for lv in range(0, 19):
            assert cumulative_sek_for_level(lv) < cumulative_sek_for_level(lv + 1)


class TestVipLevelFromTotal:
    def test_nothing_gifted(self):
        assert vip_level_from_total(0) == 1
        assert vip_level_from_total(-5) == 1

    def test_first_boundary(self):
        assert vip_level_from_total(1315) == 1
        assert vip_level_from_total(1316) == 2

    def test_near_top(self):
        assert vip_level_from_total(24999) == 19

    def test_top(self):
        assert vip_level_from_total(25000) == 20

    def test_capped(self):
        assert vip_level_from_total(1_000_000) == 20

    def test_always_in_range(self):
        for total in range(0, 40000, 777):
            assert 1 <= vip_level_from_total(total) <= 20


class TestSekToLevel:
    def test_from_zero_to_level_2(self):
        assert sek_to_reach_level(2, 0) == 1316

    def test_level_1_already_reached(self):
        assert sek_to_reach_level(1, 500) == 0

    def test_to_top(self):
        assert sek_to_reach_level(20, 0) == 25000
        assert sek_to_reach_level(20, 24000) == 1000

    def test_next_level(self):
        assert sek_for_next_level(1, 0) == 1316
        assert sek_for_next_level(1, 500) == 816
        assert sek_for_next_level(19, 24000) == 1000

    def test_next_level_at_max_is_zero(self):
        assert sek_for_next_level(20, 25000) == 0
        assert sek_for_next_level(20, 0) == 0

    def test_never_negative(self):
        assert sek_for_next_level(1, 2000) == 0


class TestVipLevelProgress:
    def test_start(self):
        assert vip_level_progress(1, 0) == 0.0

    def test_midway(self):
        assert vip_level_progress(1, STEP / 2) == pytest.approx(50.0)

    def test_terminal_level_is_complete(self):
        assert vip_level_progress(20, 25000) == 100.0
        assert vip_level_progress(20, 0) == 100.0

    def test_clamped(self):
        assert vip_level_progress(2, 0) == 0.0
        assert vip_level_progress(1, 5000) == 100.0


class TestLoyaltyDays:
    JOINED = datetime(2026, 1, 1, tzinfo=timezone.utc)

    def test_same_instant(self):
        assert loyalty_days(self.JOINED, self.JOINED) == 0

    def test_exact_day(self):
        assert loyalty_days(self.JOINED, self.JOINED + timedelta(days=1)) == 1

    def test_started_day_counts(self):
        assert loyalty_days(self.JOINED, self.JOINED + timedelta(days=1, seconds=1)) == 2

    def test_order_does_not_matter(self):
        assert loyalty_days(self.JOINED + timedelta(days=3), self.JOINED) == 3


class TestLabels:
    def test_labels(self):
        assert vip_level_label(1) == "VIP"
        assert vip_level_label(4) == "VIP"
        assert vip_level_label(5) == "PREMIUM"
        assert vip_level_label(10) == "ELITE"
        assert vip_level_label(15) == "LEGENDARY"
        assert vip_level_label(20) == "LEGENDARY"

    def test_colors(self):
        assert vip_level_color(1) == "#FFD700"
        assert vip_level_color(5) == "#3498DB"
        assert vip_level_color(10) == "#9B59B6"
        assert vip_level_color(15) == "#FF1493"


class TestPerkValidation:
    def test_allowed(self):
        assert validate_perk("custom_chat_color") is True
        assert validate_perk("intro_sound") is True

    def test_rejected(self):
        assert validate_perk("double_battle_points") is False
        assert validate_perk("") is False


class TestAbuseChecks:
    def test_self_gift(self):
        assert is_self_gift("u1", "u1") is True
        assert is_self_gift("u1", "u2") is False

    def test_vip_farming_threshold(self):
        assert is_vip_farming(5) is False
        assert is_vip_farming(6) is True

    def test_xp_farming_threshold(self):
        assert is_xp_farming(10_000) is False
        assert is_xp_farming(10_001) is True
