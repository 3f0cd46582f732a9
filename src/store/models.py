"""Data models for the candidate document store."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class CandidateStatus(str, Enum):
    """Hiring status of a candidate.

    Statuses are free text in the store; these are the values the
    application itself reads or writes.
    """

    NEW = "new"
    SCORED = "scored"
    REJECTED = "rejected"
    ACCEPTED = "accepted"
    HIRED = "hired"
    STRONG_FIT = "strong_fit"
    NOT_A_FIT = "not_a_fit"
    INTERVIEWED = "interviewed"
    OFFER_SENT = "offer_sent"


# Human decisions that automated re-scoring must never overwrite
FINALIZED_STATUSES = frozenset(
    {
        CandidateStatus.REJECTED.value,
        CandidateStatus.ACCEPTED.value,
        CandidateStatus.HIRED.value,
        CandidateStatus.STRONG_FIT.value,
        CandidateStatus.NOT_A_FIT.value,
        CandidateStatus.INTERVIEWED.value,
        CandidateStatus.OFFER_SENT.value,
    }
)

_SEPARATORS = re.compile(r"[\s\-]+")


def normalize_status(status: object) -> str:
    """Lower-case, trim and underscore a status ("Not a Fit" -> "not_a_fit")."""
    if status is None:
        return ""
    if isinstance(status, Enum):
        status = status.value
    return _SEPARATORS.sub("_", str(status).strip().lower())


def is_finalized_status(status: object, finalized: frozenset[str] = FINALIZED_STATUSES) -> bool:
    return normalize_status(status) in {normalize_status(s) for s in finalized}


class _ServerTimestamp:
    """Placeholder replaced by the store clock when a write is applied."""

    _instance: _ServerTimestamp | None = None

    def __new__(cls) -> _ServerTimestamp:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


@dataclass
class CandidateRecord:
    """A candidate document.

    Attributes:
        id: Store identifier.
        status: Current hiring status (free text).
        resume_text: Raw résumé text, if uploaded as text.
        created_at: When the candidate was added (UTC).
        updated_at: When the record last changed (UTC).
        data: Remaining document fields, including any scoring results.
    """

    id: str
    status: str = CandidateStatus.NEW.value
    resume_text: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def is_finalized(self) -> bool:
        return is_finalized_status(self.status)

    def to_dict(self) -> dict:
        """Serialize the record to a dictionary."""
        return {
            "id": self.id,
            "status": self.status,
            "resume_text": self.resume_text,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
            "data": dict(self.data),
        }
