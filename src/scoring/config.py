"""Configuration settings for the Scoring Engine."""

from __future__ import annotations

from typing import Annotated

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.utils.logging import get_logger

logger = get_logger("scoring.config")

WEIGHT_TOLERANCE = 0.01


class ScoringConfig(BaseSettings):
    """Scoring configuration settings.

    All settings have sensible defaults and can be overridden via
    environment variables with `SCORING_` prefix or a .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="SCORING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Default dimension weights (used when a job profile has none)
    weight_role_fit: Annotated[float, Field(ge=0.0, le=1.0)] = Field(
        default=0.30,
        description="Weight for role fit",
    )
    weight_skills_quality: Annotated[float, Field(ge=0.0, le=1.0)] = Field(
        default=0.25,
        description="Weight for skills quality",
    )
    weight_experience_quality: Annotated[float, Field(ge=0.0, le=1.0)] = Field(
        default=0.20,
        description="Weight for experience quality",
    )
    weight_projects_impact: Annotated[float, Field(ge=0.0, le=1.0)] = Field(
        default=0.10,
        description="Weight for projects and impact",
    )
    weight_language_clarity: Annotated[float, Field(ge=0.0, le=1.0)] = Field(
        default=0.05,
        description="Weight for language clarity",
    )
    weight_ats_format: Annotated[float, Field(ge=0.0, le=1.0)] = Field(
        default=0.10,
        description="Weight for ATS format",
    )

    # Recommendation thresholds (0-100)
    strong_fit_threshold: Annotated[float, Field(ge=0.0, le=100.0)] = Field(
        default=70.0,
        description="Minimum score labelled 'strong_fit' and counted as qualified",
    )
    review_threshold: Annotated[float, Field(ge=0.0, le=100.0)] = Field(
        default=50.0,
        description="Minimum score labelled 'review'",
    )

    # Optional AI review
    ai_review_enabled: bool = Field(
        default=False,
        description="Ask the AI for a second-opinion review alongside the score",
    )
    ai_review_max_chars: Annotated[int, Field(gt=0)] = Field(
        default=15_000,
        description="Résumé characters sent to the review prompt",
    )

    @model_validator(mode="after")
    def validate_thresholds(self) -> ScoringConfig:
        """Ensure the review band sits below the strong-fit band."""
        if self.review_threshold > self.strong_fit_threshold:
            raise ValueError(
                "review_threshold must not exceed strong_fit_threshold "
                f"(review={self.review_threshold}, strong_fit={self.strong_fit_threshold})."
            )
        return self

    def default_weights(self) -> dict[str, float]:
        return {
            "role_fit": self.weight_role_fit,
            "skills_quality": self.weight_skills_quality,
            "experience_quality": self.weight_experience_quality,
            "projects_impact": self.weight_projects_impact,
            "language_clarity": self.weight_language_clarity,
            "ats_format": self.weight_ats_format,
        }

    def weights_deviation(self) -> float:
        """Return how far the default weights sum is from 1.0."""
        return sum(self.default_weights().values()) - 1.0


# Singleton instance for easy import
_scoring_config: ScoringConfig | None = None


def get_scoring_config() -> ScoringConfig:
    """Get the scoring configuration singleton."""
    global _scoring_config
    if _scoring_config is None:
        _scoring_config = ScoringConfig()
        deviation = _scoring_config.weights_deviation()
        if abs(deviation) > WEIGHT_TOLERANCE:
            logger.warning("Default scoring weights sum to %.3f", 1.0 + deviation)
    return _scoring_config


def reset_scoring_config() -> None:
    """Reset the scoring configuration singleton (useful for testing)."""
    global _scoring_config
    _scoring_config = None
