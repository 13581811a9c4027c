"""
Tests for logging utilities.
"""

import logging
from pathlib import Path

from wod_scraper.config import LoggingSettings
from wod_scraper.utils.logging import (
    ROOT_LOGGER_NAME,
    get_logger,
    get_logger_with_context,
    reset_logging,
    setup_logging,
)


class TestGetLogger:
    """Tests for logger naming."""

    def test_module_name_nested(self):
        """Package module names should be used as is."""
        assert get_logger("wod_scraper.pipeline").name == "wod_scraper.pipeline"

    def test_foreign_name_prefixed(self):
        """Other names should be nested under the application logger."""
        assert get_logger("scripts.backfill").name == "wod_scraper.scripts.backfill"

    def test_root(self):
        """No name should give the application logger."""
        assert get_logger().name == ROOT_LOGGER_NAME


class TestSetupLogging:
    """Tests for handler configuration."""

    def test_only_first_call_applies(self):
        """Repeated setup should not add handlers."""
        logger = logging.getLogger(ROOT_LOGGER_NAME)
        handler_count = len(logger.handlers)

        setup_logging(level="ERROR")

        assert len(logger.handlers) == handler_count
        assert logger.level == logging.DEBUG

    def test_file_handler(self, temp_dir: Path):
        """A configured file path should receive log records."""
        reset_logging()
        log_file = temp_dir / "logs" / "wod.log"
        settings = LoggingSettings(file_path=str(log_file), log_to_console=False)

        setup_logging(settings)
        get_logger("wod_scraper.test").info("Scraped WOD")
        reset_logging()

        assert "Scraped WOD" in log_file.read_text(encoding="utf-8")

    def test_level_override(self):
        """An explicit level should win over the settings."""
        reset_logging()

        logger = setup_logging(LoggingSettings(level="WARNING"), level="debug")

        assert logger.level == logging.DEBUG


class TestContextLogger:
    """Tests for contextual loggers."""

    def test_context_prefix(self):
        """Context should prefix every message."""
        adapter = get_logger_with_context("wod_scraper.pipeline", date="2025-01-06")

        msg, _ = adapter.process("Fetching page", {})

        assert msg == "[date=2025-01-06] Fetching page"

    def test_no_context(self):
        """Without context the message should be unchanged."""
        adapter = get_logger_with_context("wod_scraper.pipeline")

        msg, _ = adapter.process("Fetching page", {})

        assert msg == "Fetching page"
