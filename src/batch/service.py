"""Batch scoring entry points."""

from __future__ import annotations

import asyncio
from typing import Any

from src.batch.models import BatchRequest, BatchResult, CandidateOutcome
from src.batch.orchestrator import BatchOrchestrator, Evaluator, ProgressCallback
from src.config.settings import Settings, get_settings
from src.errors import NotFoundError
from src.scoring.evaluator import CandidateEvaluator
from src.store.repository import CandidateRepository
from src.utils.logging import get_logger

logger = get_logger("batch.service")


async def score_single_candidate(
    store: Any,
    evaluator: Evaluator,
    candidate_id: str,
    job_id: str,
) -> CandidateOutcome:
    """Score one stored candidate against one stored job profile.

    Applies the same finalized-status guards as a batch run. Failures
    propagate instead of being recorded.

    Raises:
        NotFoundError: If the job profile or the candidate does not exist.
        MissingDataError: If the candidate has no résumé content.
    """
    job = await store.get_job_profile(job_id)
    if job is None:
        raise NotFoundError("job", job_id)
    logger.info("Scoring candidate %s against job %s (%s)", candidate_id, job_id, job.title)
    return await BatchOrchestrator(store, evaluator).score_candidate(candidate_id, job)


class BatchService:
    """Open the configured store and run batches against it."""

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        evaluator: Evaluator | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.evaluator = evaluator
        self.progress_callback = progress_callback

    def _repository(self) -> CandidateRepository:
        return CandidateRepository(self.settings.db_path)

    def _evaluator(self) -> Evaluator:
        if self.evaluator is None:
            self.evaluator = CandidateEvaluator()
        return self.evaluator

    async def run(
        self,
        request: BatchRequest,
        cancel_event: asyncio.Event | None = None,
    ) -> BatchResult:
        store = self._repository()
        await store.initialize()
        try:
            orchestrator = BatchOrchestrator(store, self._evaluator())
            return await orchestrator.run(
                request,
                progress_callback=self.progress_callback,
                cancel_event=cancel_event,
            )
        finally:
            await store.close()

    async def score_one(self, candidate_id: str, job_id: str) -> CandidateOutcome:
        store = self._repository()
        await store.initialize()
        try:
            return await score_single_candidate(store, self._evaluator(), candidate_id, job_id)
        finally:
            await store.close()
