"""Tests for extractor configuration."""

import pytest


class TestExtractorConfig:
    """Test ExtractorConfig settings."""

    def test_extractor_config_has_defaults(self):
        """ExtractorConfig should load with sensible defaults."""
        from src.extractor.config import ExtractorConfig

        config = ExtractorConfig(_env_file=None)  # type: ignore[call-arg]

        assert config.llm_provider == "openai"
        assert config.llm_model == "gpt-4o-mini"
        assert config.llm_fallback_models == []
        assert config.llm_api_key is None
        assert config.llm_base_url is None
        assert config.llm_timeout == 30.0
        assert config.llm_max_retries == 2
        assert config.llm_reasoning_effort is None
        assert config.max_resume_chars == 20_000

    def test_extractor_config_reads_from_environment_variables(self, monkeypatch):
        """ExtractorConfig should read from environment variables."""
        from src.extractor.config import ExtractorConfig

        monkeypatch.setenv("EXTRACTOR_LLM_PROVIDER", "anthropic")
        monkeypatch.setenv("EXTRACTOR_LLM_MODEL", "claude-3-5-haiku-latest")
        monkeypatch.setenv("EXTRACTOR_LLM_FALLBACK_MODELS", "gpt-4o-mini, gpt-4o ,")
        monkeypatch.setenv("EXTRACTOR_LLM_TIMEOUT", "45")
        monkeypatch.setenv("EXTRACTOR_LLM_MAX_RETRIES", "0")

        config = ExtractorConfig(_env_file=None)  # type: ignore[call-arg]

        assert config.llm_provider == "anthropic"
        assert config.llm_model == "claude-3-5-haiku-latest"
        assert config.llm_fallback_models == ["gpt-4o-mini", "gpt-4o"]
        assert config.llm_timeout == 45.0
        assert config.llm_max_retries == 0

    def test_extractor_config_validates_bounds(self):
        """Timeouts must be positive and retries non-negative."""
        from pydantic import ValidationError

        from src.extractor.config import ExtractorConfig

        with pytest.raises(ValidationError):
            ExtractorConfig(_env_file=None, llm_timeout=0)  # type: ignore[call-arg]

        with pytest.raises(ValidationError):
            ExtractorConfig(_env_file=None, llm_max_retries=-1)  # type: ignore[call-arg]

        with pytest.raises(ValidationError):
            ExtractorConfig(_env_file=None, max_resume_chars=0)  # type: ignore[call-arg]


class TestGetExtractorConfig:
    """Test get_extractor_config function."""

    def test_get_extractor_config_is_singleton(self):
        from src.extractor.config import get_extractor_config, reset_extractor_config

        reset_extractor_config()
        assert get_extractor_config() is get_extractor_config()

    def test_reset_extractor_config_clears_singleton(self):
        from src.extractor.config import get_extractor_config, reset_extractor_config

        first = get_extractor_config()
        reset_extractor_config()
        assert get_extractor_config() is not first
