"""Sequential batch scoring with finalized-status guards."""

from __future__ import annotations

import asyncio
import contextlib
import json
import signal
import time
from collections.abc import Callable
from typing import Any, Protocol

from src.batch.models import (
    BatchProgressEvent,
    BatchRequest,
    BatchResult,
    CandidateOutcome,
    CandidateState,
)
from src.errors import ConcurrencyConflictError, MissingDataError, NotFoundError
from src.scoring.models import JobProfile, ScoreResult
from src.store.models import (
    FINALIZED_STATUSES,
    SERVER_TIMESTAMP,
    CandidateRecord,
    CandidateStatus,
    is_finalized_status,
)
from src.utils.logging import get_logger

logger = get_logger("batch.orchestrator")

ProgressCallback = Callable[[BatchProgressEvent], None]
Reporter = Callable[[CandidateState, str], None]


class Evaluator(Protocol):
    async def evaluate(self, resume_text: str, job: JobProfile) -> ScoreResult: ...


def resolve_resume_text(record: CandidateRecord) -> str:
    """Return the text to score for a candidate.

    Looks at the ``resume_text`` column, then the ``text`` and ``content``
    document fields, then a previously parsed résumé serialized as JSON.

    Raises:
        MissingDataError: If the candidate has no usable résumé content.
    """
    for value in (record.resume_text, record.data.get("text"), record.data.get("content")):
        if isinstance(value, str) and value.strip():
            return value

    parsed = record.data.get("parsed")
    if parsed:
        return json.dumps(parsed, ensure_ascii=False)

    raise MissingDataError(f"No resume text for candidate {record.id}")


def build_score_payload(result: ScoreResult, job: JobProfile) -> dict[str, Any]:
    """Fields merged into a candidate document after a successful evaluation."""
    data = result.to_dict()
    return {
        "status": CandidateStatus.SCORED.value,
        "score": result.score,
        "match_score": result.score,
        "job_profile_id": job.id,
        "target_role": job.title,
        "score_breakdown": data["breakdown"],
        "score_detailed_breakdown": data["detailed_breakdown"],
        "score_risk_flags": data["risk_flags"],
        "score_experience_years": result.experience_years,
        "score_relevant_experience_years": result.relevant_experience_years,
        "score_education_detected": data["education_detected"],
        "score_inferred_skills": data["inferred_skills"],
        "score_skills_analysis": data["skills_analysis"],
        "score_recommendation": result.recommendation,
        "is_qualified": result.is_qualified,
        "ai_analysis": "\n\n".join(result.explanation),
        "ai_review": data["ai_review"],
        "improvements": result.improvements,
        "extracted_contact": data["extracted_contact"],
        "updated_at": SERVER_TIMESTAMP,
        "last_scored_at": SERVER_TIMESTAMP,
    }


class BatchOrchestrator:
    """Score candidates one at a time without overwriting human decisions.

    Each candidate goes ``pending -> processing -> success | error | skipped``.
    A candidate whose status is finalized is skipped on the first read and
    again on the re-read just before the write; the write itself only lands
    if the status is still not finalized inside the store transaction.
    """

    def __init__(
        self,
        store: Any,
        evaluator: Evaluator,
        *,
        finalized_statuses: frozenset[str] = FINALIZED_STATUSES,
    ) -> None:
        self.store = store
        self.evaluator = evaluator
        self.finalized_statuses = finalized_statuses

    async def run(
        self,
        request: BatchRequest,
        progress_callback: ProgressCallback | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> BatchResult:
        """Run a batch.

        Raises:
            NotFoundError: If the job profile does not exist. No candidate
                is processed in that case.
        """
        start_time = time.monotonic()

        job = await self.store.get_job_profile(request.job_id)
        if job is None:
            raise NotFoundError("job", request.job_id)

        candidate_ids = await self._candidate_ids(request)
        total = len(candidate_ids)
        logger.info(
            "Scoring %d candidate(s) against job %s (%s)", total, request.job_id, job.title
        )

        stop_event = cancel_event or asyncio.Event()
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            with contextlib.suppress(Exception):
                loop.add_signal_handler(sig, stop_event.set)

        success = 0
        failed = 0
        skipped = 0
        cancelled = False
        outcomes: list[CandidateOutcome] = []

        try:
            for index, candidate_id in enumerate(candidate_ids):
                if stop_event.is_set():
                    cancelled = True
                    logger.info("Batch cancelled after %d of %d candidate(s)", index, total)
                    break

                def report(
                    state: CandidateState,
                    message: str,
                    *,
                    _index: int = index,
                    _candidate_id: str = candidate_id,
                ) -> None:
                    self._emit_progress(
                        progress_callback,
                        processed_count=_index,
                        total=total,
                        candidate_id=_candidate_id,
                        state=state,
                        message=message,
                    )

                job_start = time.monotonic()
                try:
                    outcome = await self.score_candidate(candidate_id, job, report)
                except Exception as exc:
                    logger.exception("Candidate %s failed: %s", candidate_id, exc)
                    outcome = CandidateOutcome(
                        candidate_id=candidate_id,
                        state=CandidateState.ERROR,
                        message=str(exc) or type(exc).__name__,
                        duration_seconds=time.monotonic() - job_start,
                    )

                if outcome.state == CandidateState.SUCCESS:
                    success += 1
                elif outcome.state == CandidateState.SKIPPED:
                    skipped += 1
                else:
                    failed += 1
                outcomes.append(outcome)

                self._emit_progress(
                    progress_callback,
                    processed_count=index + 1,
                    total=total,
                    candidate_id=candidate_id,
                    state=outcome.state,
                    message=outcome.message,
                )
        finally:
            for sig in (signal.SIGINT, signal.SIGTERM):
                with contextlib.suppress(Exception):
                    loop.remove_signal_handler(sig)

        logger.info(
            "Batch finished: %d scored, %d failed, %d skipped", success, failed, skipped
        )
        return BatchResult(
            success_count=success,
            fail_count=failed,
            skipped_count=skipped,
            total=total,
            cancelled=cancelled,
            duration_seconds=time.monotonic() - start_time,
            outcomes=outcomes,
        )

    async def score_candidate(
        self,
        candidate_id: str,
        job: JobProfile,
        report: Reporter | None = None,
    ) -> CandidateOutcome:
        """Score one candidate and write the result unless it is finalized.

        Returns a ``success`` or ``skipped`` outcome; any other failure
        propagates to the caller.
        """
        started = time.monotonic()

        def note(message: str) -> None:
            if report is not None:
                report(CandidateState.PROCESSING, message)

        note("Fetching candidate data...")
        record = await self.store.get_candidate(candidate_id)
        if record is None:
            raise NotFoundError("candidate", candidate_id)

        if is_finalized_status(record.status, self.finalized_statuses):
            logger.info("Skipping %s: finalized status %r", candidate_id, record.status)
            return CandidateOutcome(
                candidate_id=candidate_id,
                state=CandidateState.SKIPPED,
                message=f"Skipping finalized status: {record.status}",
                duration_seconds=time.monotonic() - started,
            )

        resume_text = resolve_resume_text(record)

        note("Running AI evaluation...")
        result = await self.evaluator.evaluate(resume_text, job)

        note("Updating database...")
        try:
            await self._guarded_write(candidate_id, build_score_payload(result, job))
        except ConcurrencyConflictError as exc:
            logger.warning("Discarded score for %s: status became %r", candidate_id, exc.status)
            return CandidateOutcome(
                candidate_id=candidate_id,
                state=CandidateState.SKIPPED,
                message=f"Skipping finalized status: {exc.status}",
                duration_seconds=time.monotonic() - started,
            )

        return CandidateOutcome(
            candidate_id=candidate_id,
            state=CandidateState.SUCCESS,
            message=f"Scored: {round(result.score)}%",
            score=result.score,
            duration_seconds=time.monotonic() - started,
        )

    async def _guarded_write(self, candidate_id: str, payload: dict[str, Any]) -> None:
        """Re-check the status, then write in a status-conditional transaction.

        Raises:
            ConcurrencyConflictError: If the candidate became finalized.
        """
        current = await self.store.get_candidate(candidate_id)
        if current is None:
            raise NotFoundError("candidate", candidate_id)
        if is_finalized_status(current.status, self.finalized_statuses):
            raise ConcurrencyConflictError(candidate_id, current.status)

        applied = await self.store.update_candidate_unless_status(
            candidate_id, payload, self.finalized_statuses
        )
        if not applied:
            latest = await self.store.get_candidate(candidate_id)
            raise ConcurrencyConflictError(candidate_id, latest.status if latest else None)

    async def _candidate_ids(self, request: BatchRequest) -> list[str]:
        if request.mode == "selection":
            return list(dict.fromkeys(request.candidate_ids))
        records = await self.store.query_candidates_by_date_range(request.start, request.end)
        return [record.id for record in records]

    def _emit_progress(
        self,
        callback: ProgressCallback | None,
        *,
        processed_count: int,
        total: int,
        candidate_id: str,
        state: CandidateState,
        message: str,
    ) -> None:
        if callback is None:
            return
        event = BatchProgressEvent(
            processed_count=processed_count,
            total=total,
            candidate_id=candidate_id,
            state=state,
            message=message,
        )
        with contextlib.suppress(Exception):
            callback(event)
