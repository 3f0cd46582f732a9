"""Tests for Settings configuration class."""

from pathlib import Path

import pytest


class TestSettingsDefaults:
    """Test that Settings loads sensible defaults."""

    def test_settings_loads_with_defaults(self, monkeypatch):
        """Settings should load with default values when no env vars are set."""
        for var in ("DB_PATH", "LOG_LEVEL", "LOG_FILE", "KNOWLEDGE_BASE_PATH"):
            monkeypatch.delenv(var, raising=False)

        from src.config.settings import Settings

        settings = Settings(_env_file=None)  # type: ignore[call-arg]

        assert settings.db_path == Path("./data/candidates.db")
        assert settings.knowledge_base_path is None
        assert settings.log_file is None
        assert settings.log_level == "INFO"


class TestSettingsFromEnvironment:
    """Test that Settings reads environment variables."""

    def test_settings_reads_environment(self, monkeypatch, tmp_path):
        from src.config.settings import Settings

        monkeypatch.setenv("DB_PATH", str(tmp_path / "store.db"))
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("LOG_FILE", str(tmp_path / "run.log"))

        settings = Settings(_env_file=None)  # type: ignore[call-arg]

        assert settings.db_path == tmp_path / "store.db"
        assert settings.log_level == "DEBUG"
        assert settings.log_file == tmp_path / "run.log"

    def test_invalid_log_level_rejected(self, monkeypatch):
        from pydantic import ValidationError

        from src.config.settings import Settings

        monkeypatch.setenv("LOG_LEVEL", "LOUD")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)  # type: ignore[call-arg]


class TestGetSettings:
    """Test the settings singleton."""

    def test_get_settings_is_singleton(self):
        from src.config.settings import get_settings, reset_settings

        reset_settings()
        assert get_settings() is get_settings()

    def test_reset_settings_clears_singleton(self):
        from src.config.settings import get_settings, reset_settings

        first = get_settings()
        reset_settings()
        assert get_settings() is not first
