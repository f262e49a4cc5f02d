"""Unit tests for logging and settings."""

import logging

import pytest

from app.core.config import DatabaseSettings, DetectionSettings, Settings
from app.utils.logging import ContextFormatter, get_logger


class TestContextFormatter:
    """Structured ``extra`` context is rendered after the message."""

    def test_extra_fields_are_appended(self):
        """Test key=value rendering in sorted order."""
        formatter = ContextFormatter(fmt="%(levelname)s - %(message)s")
        record = logging.LogRecord("app.test", logging.INFO, __file__, 1, "Reconciled", None, None)
        record.script_id = "abc"
        record.status = "READY"

        assert formatter.format(record) == "INFO - Reconciled | script_id=abc status=READY"

    def test_plain_message_unchanged(self):
        """Test that records without extra context are not decorated."""
        formatter = ContextFormatter(fmt="%(message)s")
        record = logging.LogRecord("app.test", logging.INFO, __file__, 1, "Hello", None, None)

        assert formatter.format(record) == "Hello"

    def test_get_logger_adds_single_handler(self):
        """Test that repeated calls do not duplicate handlers."""
        first = get_logger("app.tests.logging_handlers", level="debug")
        second = get_logger("app.tests.logging_handlers", level="debug")

        assert first is second
        assert len(first.handlers) == 1
        assert first.level == logging.DEBUG


class TestSettings:
    """Environment driven configuration."""

    def test_defaults(self, monkeypatch):
        """Test the documented defaults."""
        for key in ("TEMPORAL_TASK_QUEUE", "FUZZY_MATCH_THRESHOLD", "STORAGE_BUCKET", "SCAN_ACTION_PROPS"):
            monkeypatch.delenv(key, raising=False)

        settings = Settings(_env_file=None)

        assert settings.temporal_task_queue == "revisions-queue"
        assert settings.fuzzy_match_threshold == 0.7
        assert settings.storage.bucket == "scripts"
        assert settings.detection.scan_action_props is False

    def test_postgres_url_gets_asyncpg_driver(self, monkeypatch):
        """Test URL normalisation for plain postgres URLs."""
        monkeypatch.setenv("DATABASE_URL", "postgres://u:p@db:5432/backbone")

        db = DatabaseSettings(_env_file=None)

        assert db.connection_url == "postgresql+asyncpg://u:p@db:5432/backbone"
        assert db.is_postgres

    def test_sqlite_url_untouched(self, monkeypatch):
        """Test that non-postgres URLs pass through."""
        monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///./local.db")

        db = DatabaseSettings(_env_file=None)

        assert db.connection_url == "sqlite+aiosqlite:///./local.db"
        assert not db.is_postgres

    def test_threshold_bounds(self, monkeypatch):
        """Test that an out-of-range threshold is rejected."""
        monkeypatch.setenv("FUZZY_MATCH_THRESHOLD", "1.5")

        with pytest.raises(ValueError):
            DetectionSettings(_env_file=None)
