import logging

from roast_rank.log import get_logger, setup_logging


class TestLogging:
    def test_events_reach_stdlib_logging(self, caplog):
        setup_logging("INFO")
        with caplog.at_level(logging.INFO):
            get_logger("roast_rank.test").info("season_created", season_number=3)
        assert "season_created" in caplog.text
        assert "season_number=3" in caplog.text

    def test_below_level_is_dropped(self, caplog):
        setup_logging("WARNING")
        with caplog.at_level(logging.WARNING):
            get_logger("roast_rank.test").info("battle_recorded")
        assert "battle_recorded" not in caplog.text

    def test_unknown_level_defaults_to_warning(self):
        setup_logging("DEBUG")
        setup_logging("LOUD")
        assert logging.getLogger().level == logging.WARNING

    def test_reconfigure_changes_root_level(self):
        setup_logging("WARNING")
        setup_logging("INFO")
        assert logging.getLogger().level == logging.INFO
