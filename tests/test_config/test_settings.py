"""Tests for settings defaults and environment overrides."""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

import pytest

from blogguard.config.logging_config import setup_logging, setup_logging_from_settings
from blogguard.config.settings import ApiSettings, ConfigError, LoggingSettings, Settings


class TestDefaults:
    def test_rate_limit_defaults(self):
        rl = Settings().rate_limit
        assert rl.capacity == 5
        assert rl.refill_tokens == 5
        assert rl.refill_period_seconds == 60.0
        assert rl.expire_after_access_seconds == 600.0
        assert rl.max_entries == 10_000

    def test_trusts_proxy_headers_by_default(self):
        assert Settings().api.trust_proxy_headers is True

    def test_ensure_dirs(self, tmp_path: Path):
        s = Settings(project_root=tmp_path)
        s.ensure_dirs()
        assert s.logs_dir.is_dir()


class TestFromEnv:
    def test_empty_environment_gives_defaults(self):
        s = Settings.from_env({})
        assert s.rate_limit == Settings().rate_limit
        assert s.api == Settings().api

    def test_overrides_rate_limit_values(self):
        s = Settings.from_env({
            "BLOGGUARD_RATELIMIT_CAPACITY": "10",
            "BLOGGUARD_RATELIMIT_REFILL_TOKENS": "2",
            "BLOGGUARD_RATELIMIT_REFILL_PERIOD_SECONDS": "30",
            "BLOGGUARD_RATELIMIT_EXPIRE_AFTER_ACCESS_SECONDS": "120.5",
            "BLOGGUARD_RATELIMIT_MAX_ENTRIES": "50",
        })
        assert s.rate_limit.capacity == 10
        assert s.rate_limit.refill_tokens == 2
        assert s.rate_limit.refill_period_seconds == 30.0
        assert s.rate_limit.expire_after_access_seconds == 120.5
        assert s.rate_limit.max_entries == 50

    @pytest.mark.parametrize("raw, expected", [("false", False), ("0", False), ("YES", True)])
    def test_boolean_override(self, raw: str, expected: bool):
        s = Settings.from_env({"BLOGGUARD_TRUST_PROXY_HEADERS": raw})
        assert s.api.trust_proxy_headers is expected

    def test_log_level_override(self):
        s = Settings.from_env({"BLOGGUARD_LOG_LEVEL": "debug"})
        assert s.logging.level_number == logging.DEBUG

    @pytest.mark.parametrize(
        "name, raw",
        [
            ("BLOGGUARD_RATELIMIT_CAPACITY", "five"),
            ("BLOGGUARD_RATELIMIT_CAPACITY", "0"),
            ("BLOGGUARD_RATELIMIT_MAX_ENTRIES", "-1"),
            ("BLOGGUARD_RATELIMIT_REFILL_PERIOD_SECONDS", "soon"),
            ("BLOGGUARD_TRUST_PROXY_HEADERS", "maybe"),
            ("BLOGGUARD_LOG_LEVEL", "  "),
            ("BLOGGUARD_RATELIMIT_REFILL_PERIOD_SECONDS", "nan"),
            ("BLOGGUARD_RATELIMIT_REFILL_PERIOD_SECONDS", "inf"),
            ("BLOGGUARD_RATELIMIT_EXPIRE_AFTER_ACCESS_SECONDS", "NaN"),
            ("BLOGGUARD_RATELIMIT_EXPIRE_AFTER_ACCESS_SECONDS", "Infinity"),
            ("BLOGGUARD_ADMIN_ENABLED", "true"),
        ],
    )
    def test_malformed_values_raise(self, name: str, raw: str):
        with pytest.raises(ConfigError):
            Settings.from_env({name: raw})

    def test_unknown_log_level_raises(self):
        with pytest.raises(ConfigError):
            LoggingSettings(level="chatty").level_number

    def test_admin_routes_off_by_default(self):
        s = Settings.from_env({})
        assert s.api.admin_enabled is False
        assert s.api.admin_token == ""

    def test_admin_override_with_token(self):
        s = Settings.from_env({
            "BLOGGUARD_ADMIN_ENABLED": "true",
            "BLOGGUARD_ADMIN_TOKEN": "s3cret",
        })
        assert s.api.admin_enabled is True
        assert s.api.admin_token == "s3cret"

    def test_admin_enabled_without_token_is_rejected(self):
        with pytest.raises(ConfigError):
            ApiSettings(admin_enabled=True)

    def test_log_rotation_override(self):
        s = Settings.from_env({
            "BLOGGUARD_LOG_MAX_BYTES": "2048",
            "BLOGGUARD_LOG_BACKUP_COUNT": "2",
        })
        assert s.logging.max_bytes == 2048
        assert s.logging.backup_count == 2


class TestSetupLogging:
    @pytest.fixture(autouse=True)
    def _reset_handlers(self):
        logger = logging.getLogger("blogguard")
        saved, saved_level = list(logger.handlers), logger.level
        logger.handlers.clear()
        yield
        for handler in logger.handlers:
            handler.close()
        logger.handlers[:] = saved
        logger.setLevel(saved_level)

    def test_console_only(self):
        setup_logging()
        assert len(logging.getLogger("blogguard").handlers) == 1

    def test_file_handler(self, tmp_path: Path):
        setup_logging(log_dir=tmp_path, log_file="test.log")
        logging.getLogger("blogguard.test").warning("hello")
        assert (tmp_path / "test.log").exists()

    def test_repeated_calls_do_not_duplicate_handlers(self, tmp_path: Path):
        setup_logging(log_dir=tmp_path)
        setup_logging(log_dir=tmp_path)
        assert len(logging.getLogger("blogguard").handlers) == 2

    def test_repeated_call_adjusts_level(self):
        setup_logging(level=logging.INFO)
        setup_logging(level=logging.DEBUG)
        logger = logging.getLogger("blogguard")
        assert logger.level == logging.DEBUG
        assert all(h.level == logging.DEBUG for h in logger.handlers)

    def test_extra_loggers_share_handlers(self):
        other = logging.getLogger("blogguard_test_server")
        try:
            setup_logging(extra_loggers=["blogguard_test_server"])
            assert other.handlers == logging.getLogger("blogguard").handlers
            assert other.propagate is False
        finally:
            other.handlers.clear()
            other.propagate = True

    def test_from_settings_uses_rotation_settings(self, tmp_path: Path, monkeypatch):
        # Keep the real uvicorn loggers untouched
        monkeypatch.setattr("blogguard.config.logging_config.SERVER_LOGGERS", ())
        settings = Settings(
            project_root=tmp_path,
            logging=LoggingSettings(level="WARNING", max_bytes=4096, backup_count=1),
        )
        setup_logging_from_settings(settings)

        logger = logging.getLogger("blogguard")
        assert logger.level == logging.WARNING
        (file_handler,) = [
            h for h in logger.handlers if isinstance(h, logging.handlers.RotatingFileHandler)
        ]
        assert file_handler.maxBytes == 4096
        assert file_handler.backupCount == 1
        assert file_handler.baseFilename == str(settings.logs_dir / "blogguard.log")
