"""Candidate document store.

This module provides async SQLite persistence for job profiles and
candidate documents, including the guarded write used by batch scoring.

Public API:
    - CandidateRepository: Async SQLite repository
    - CandidateRecord: Candidate document model
    - CandidateStatus: Statuses the application reads or writes
    - FINALIZED_STATUSES: Statuses re-scoring must never overwrite
    - SERVER_TIMESTAMP: Placeholder resolved to the store clock on write
"""

from src.store.models import (
    FINALIZED_STATUSES,
    SERVER_TIMESTAMP,
    CandidateRecord,
    CandidateStatus,
    is_finalized_status,
    normalize_status,
)
from src.store.repository import CandidateRepository

__all__ = [
    "CandidateRepository",
    "CandidateRecord",
    "CandidateStatus",
    "FINALIZED_STATUSES",
    "SERVER_TIMESTAMP",
    "is_finalized_status",
    "normalize_status",
]
