"""Optional AI second-opinion review of a candidate."""

from __future__ import annotations

from src.extractor.llm import CompletionError, CompletionRateLimitError, TextCompleter
from src.extractor.parsing import ParseErr, parse_model
from src.scoring.config import ScoringConfig, get_scoring_config
from src.scoring.models import AIReview, JobProfile
from src.scoring.prompts import REVIEW_SYSTEM_PROMPT, build_review_prompt
from src.utils.logging import get_logger

logger = get_logger("scoring.review")


class AIReviewer:
    """Ask the AI for its own verdict; failures degrade to no review."""

    def __init__(self, llm: TextCompleter, config: ScoringConfig | None = None) -> None:
        self.llm = llm
        self.config = config or get_scoring_config()

    async def review(self, resume_text: str, job: JobProfile) -> AIReview | None:
        """Return the AI review, or None when it cannot be obtained or parsed.

        Raises:
            CompletionRateLimitError: If the AI provider throttled the request.
        """
        prompt = build_review_prompt(
            job=job, resume_text=resume_text, max_chars=self.config.ai_review_max_chars
        )
        try:
            content = await self.llm.complete(prompt, system_prompt=REVIEW_SYSTEM_PROMPT)
        except CompletionRateLimitError:
            raise
        except CompletionError as e:
            logger.warning("AI review unavailable: %s", e)
            return None

        result = parse_model(content, AIReview)
        if isinstance(result, ParseErr):
            logger.warning("AI review response rejected: %s", result.error.reason)
            return None
        return result.value
