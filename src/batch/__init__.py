"""Batch scoring.

This module applies the scoring engine across a set of stored candidates
while leaving finalized human decisions untouched.

Public API:
    - BatchOrchestrator: Sequential, guarded batch scoring
    - BatchService: Runs batches against the configured store
    - score_single_candidate: Guarded scoring of one stored candidate
    - BatchRequest: Selection or date-range request
    - BatchResult: Aggregate counts and per-candidate outcomes
    - BatchProgressEvent: Progress notification
"""

from src.batch.models import (
    BatchProgressEvent,
    BatchRequest,
    BatchResult,
    CandidateOutcome,
    CandidateState,
)
from src.batch.orchestrator import BatchOrchestrator, build_score_payload, resolve_resume_text
from src.batch.service import BatchService, score_single_candidate

__all__ = [
    "BatchOrchestrator",
    "BatchService",
    "score_single_candidate",
    "build_score_payload",
    "resolve_resume_text",
    "BatchRequest",
    "BatchResult",
    "BatchProgressEvent",
    "CandidateOutcome",
    "CandidateState",
]
