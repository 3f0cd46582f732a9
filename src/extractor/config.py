"""Configuration settings for the Feature Extractor."""

from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ExtractorConfig(BaseSettings):
    """Feature extractor configuration settings.

    All settings have sensible defaults and can be overridden via
    environment variables with EXTRACTOR_ prefix or a .env file.

    Attributes:
        llm_provider: LLM provider used for LiteLLM routing ("openai", "anthropic", ...).
        llm_model: Primary model ID for extraction.
        llm_fallback_models: Models tried in order once the primary is exhausted.
        llm_api_key: API key for the LLM provider.
        llm_base_url: Base URL for OpenAI-compatible endpoints.
        llm_timeout: Timeout per completion call in seconds.
        llm_max_retries: Retries per model before moving to the next one.
        llm_reasoning_effort: Reasoning effort for models that support it.
        max_resume_chars: Résumé characters included in the extraction prompt.
    """

    model_config = SettingsConfigDict(
        env_prefix="EXTRACTOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        enable_decoding=False,
        extra="ignore",
    )

    # LLM settings
    llm_provider: str = Field(
        default="openai",
        description="LLM provider: 'openai', 'anthropic', 'gemini', ...",
    )
    llm_model: str = Field(
        default="gpt-4o-mini",
        description="Primary model ID for résumé extraction",
    )
    llm_fallback_models: list[str] = Field(
        default_factory=list,
        description="Models tried in order after the primary model fails",
    )
    llm_api_key: str | None = Field(
        default=None,
        description="API key for the LLM provider",
    )
    llm_base_url: str | None = Field(
        default=None,
        description="Base URL for the LLM API (for OpenAI-compatible endpoints)",
    )
    llm_timeout: Annotated[float, Field(gt=0)] = Field(
        default=30.0,
        description="Timeout per completion call in seconds",
    )
    llm_max_retries: Annotated[int, Field(ge=0)] = Field(
        default=2,
        description="Retries per model for transient failures",
    )
    llm_reasoning_effort: str | None = Field(
        default=None,
        description="Reasoning effort for supported models (e.g. 'low', 'medium')",
    )

    # Prompt budget
    max_resume_chars: Annotated[int, Field(gt=0)] = Field(
        default=20_000,
        description="Résumé characters sent to the extraction prompt",
    )

    @field_validator("llm_fallback_models", mode="before")
    @classmethod
    def parse_fallback_models(cls, v: object) -> list[str]:
        """Accept a comma-separated string from the environment."""
        if v is None:
            return []
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        if isinstance(v, list):
            return [str(item).strip() for item in v if str(item).strip()]
        raise ValueError("llm_fallback_models must be a list or comma-separated string")


# Singleton instance for easy import
_extractor_config: ExtractorConfig | None = None


def get_extractor_config() -> ExtractorConfig:
    """Get the extractor configuration singleton."""
    global _extractor_config
    if _extractor_config is None:
        _extractor_config = ExtractorConfig()
    return _extractor_config


def reset_extractor_config() -> None:
    """Reset the extractor configuration singleton (useful for testing)."""
    global _extractor_config
    _extractor_config = None
