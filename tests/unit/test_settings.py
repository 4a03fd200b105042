"""
Unit tests for settings and logging configuration.
"""

import json
import logging
import pytest

from scriptflow.config.settings import TREND_SOURCES, YOUTUBE_CATEGORIES, Settings
from scriptflow.utils.logger import JsonFormatter, configure_logging


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self, monkeypatch):
        for name in ("RETRY_MAX_RETRIES", "STREAM_IDLE_TIMEOUT_SECONDS", "TREND_BATCH_SIZE"):
            monkeypatch.delenv(name, raising=False)
        settings = Settings(_env_file=None)

        assert settings.retry_max_retries == 3
        assert settings.research_timeout_seconds == 30.0
        assert settings.stream_establish_timeout_seconds is None
        assert settings.stream_idle_timeout_seconds is None
        assert settings.trend_batch_size == 5

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("RETRY_MAX_RETRIES", "5")
        monkeypatch.setenv("RETRY_BASE_DELAY_MS", "200")
        monkeypatch.setenv("STREAM_IDLE_TIMEOUT_SECONDS", "15")
        settings = Settings(_env_file=None)

        policy = settings.retry_policy()
        assert policy.max_retries == 5
        assert policy.base_delay_ms == 200
        assert settings.stream_idle_timeout_seconds == 15.0

    def test_invalid_retry_policy(self, monkeypatch):
        monkeypatch.setenv("RETRY_BASE_DELAY_MS", "20000")
        monkeypatch.setenv("RETRY_MAX_DELAY_MS", "1000")
        with pytest.raises(ValueError):
            Settings(_env_file=None).retry_policy()

    def test_trend_sources(self):
        assert set(TREND_SOURCES) == {"reddit", "youtube", "google_trends"}
        assert TREND_SOURCES["youtube"]["category_id"] == YOUTUBE_CATEGORIES["SCIENCE_TECH"] == "28"


class TestLogging:
    """Tests for logging setup."""

    def test_json_formatter_includes_structured_fields(self):
        record = logging.LogRecord("scriptflow.test", logging.WARNING, __file__, 1, "retrying", None, None)
        record.flow = "chat"
        record.attempt = 2
        record.status_code = 429

        payload = json.loads(JsonFormatter().format(record))

        assert payload["message"] == "retrying"
        assert payload["flow"] == "chat"
        assert payload["attempt"] == 2
        assert payload["status_code"] == 429
        assert "category" not in payload

    def test_configure_logging_is_idempotent(self, tmp_path):
        logger = logging.getLogger("scriptflow")
        saved = list(logger.handlers)
        logger.handlers.clear()
        try:
            configure_logging("DEBUG", str(tmp_path / "logs" / "app.jsonl"))
            count = len(logger.handlers)
            configure_logging("DEBUG")

            assert count == 2
            assert len(logger.handlers) == 2
            assert (tmp_path / "logs").exists()
        finally:
            for handler in logger.handlers:
                handler.close()
            logger.handlers[:] = saved
