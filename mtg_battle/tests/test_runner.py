"""
Test suite for the headless match runner and logger setup.
"""
import logging

from ..run_match import main
from ..utils.logger import setup_logger


class TestSetupLogger:
    """Console and file handlers."""

    def test_handlers_added_once(self, tmp_path):
        log_file = tmp_path / "engine.log"
        logger = setup_logger("mtg_battle.test_once", log_file=str(log_file))
        setup_logger("mtg_battle.test_once", log_file=str(log_file))
        assert len(logger.handlers) == 2
        assert logger.handlers[0].level == logging.WARNING

        logger.debug("written to file only")
        for handler in logger.handlers:
            handler.flush()
        assert "written to file only" in log_file.read_text(encoding="utf-8")


class TestMain:
    """Command-line entry point."""

    def test_single_game(self, capsys):
        assert main(["--games", "1", "--seed", "1", "--difficulty", "hard"]) == 0
        out = capsys.readouterr().out
        assert "MATCH RESULT" in out
        assert "Winner:" in out

    def test_missing_deck_file(self, tmp_path, capsys):
        missing = tmp_path / "nope.txt"
        assert main(["--ai-deck", str(missing)]) == 1
        assert "file not found" in capsys.readouterr().out

    def test_unknown_card_in_deck(self, tmp_path, capsys):
        deck = tmp_path / "Odd_AI.txt"
        deck.write_text("4 Black Lotus\n56 Forest\n", encoding="utf-8")
        assert main(["--ai-deck", str(deck), "--games", "1"]) == 1
        assert "Black Lotus" in capsys.readouterr().out

    def test_deck_breaking_copy_limit(self, tmp_path, capsys):
        deck = tmp_path / "Burn_AI.txt"
        deck.write_text("8 Lightning Bolt\n52 Mountain\n", encoding="utf-8")
        assert main(["--ai-deck", str(deck), "--games", "1"]) == 1
        assert "Lightning Bolt has 8 copies, maximum is 4" in capsys.readouterr().out
