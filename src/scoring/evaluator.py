"""End-to-end evaluation of one résumé against one job profile."""

from __future__ import annotations

from collections.abc import Mapping

from src.extractor.service import FeatureExtractor
from src.scoring.config import ScoringConfig, get_scoring_config
from src.scoring.models import JobProfile, ScoreResult, ScoringWeights
from src.scoring.review import AIReviewer
from src.scoring.service import ScoringEngine


class CandidateEvaluator:
    """Extract features from résumé text, score them, and optionally attach an AI review."""

    def __init__(
        self,
        extractor: FeatureExtractor | None = None,
        engine: ScoringEngine | None = None,
        reviewer: AIReviewer | None = None,
        config: ScoringConfig | None = None,
    ) -> None:
        self.config = config or get_scoring_config()
        self.extractor = extractor or FeatureExtractor()
        self.engine = engine or ScoringEngine(config=self.config)
        if reviewer is None and self.config.ai_review_enabled:
            reviewer = AIReviewer(self.extractor.llm, config=self.config)
        self.reviewer = reviewer

    async def evaluate(
        self,
        resume_text: str,
        job: JobProfile,
        weights: ScoringWeights | Mapping[str, float] | None = None,
    ) -> ScoreResult:
        """Score a résumé.

        Raises:
            MissingDataError: If the résumé text is empty.
            CompletionRateLimitError: If the AI provider throttled a request.
        """
        features = await self.extractor.extract(resume_text)
        result = self.engine.evaluate(features, job, weights)

        if self.reviewer is not None:
            review = await self.reviewer.review(resume_text, job)
            if review is not None:
                result.ai_review = review
                summary = review.summary or "no summary"
                result.explanation.append(
                    f"AI review ({review.overall_score:.0f}/100): {summary}"
                )
        return result
