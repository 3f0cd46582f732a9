"""Batch scoring data models."""

from __future__ import annotations

from dataclasses import dataclass, field, is_dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Literal


def _jsonable(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, list | tuple):
        return [_jsonable(item) for item in value]
    if isinstance(value, dict):
        return {str(key): _jsonable(item) for key, item in value.items()}
    if is_dataclass(value):
        return {name: _jsonable(getattr(value, name)) for name in value.__dict__}
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return _jsonable(to_dict())
    return value


class CandidateState(str, Enum):
    """Processing state of one candidate within a batch."""

    PENDING = "pending"
    PROCESSING = "processing"
    SUCCESS = "success"
    ERROR = "error"
    SKIPPED = "skipped"


BatchMode = Literal["selection", "date_range"]


@dataclass(frozen=True)
class BatchProgressEvent:
    processed_count: int
    total: int
    candidate_id: str
    state: CandidateState
    message: str

    def to_dict(self) -> dict[str, Any]:
        return _jsonable(self)


@dataclass
class BatchRequest:
    """What to score: an explicit id list or a creation-date window."""

    mode: BatchMode
    job_id: str
    candidate_ids: list[str] = field(default_factory=list)
    start: datetime | None = None
    end: datetime | None = None

    def __post_init__(self) -> None:
        if not self.job_id or not self.job_id.strip():
            raise ValueError("job_id is required")
        if self.mode == "selection":
            if not self.candidate_ids:
                raise ValueError("candidate_ids is required for selection mode")
        elif self.mode == "date_range":
            if self.start is None or self.end is None:
                raise ValueError("start and end are required for date_range mode")
            if self.start > self.end:
                raise ValueError("start must not be after end")
        else:
            raise ValueError(f"unknown batch mode: {self.mode!r}")

    @classmethod
    def selection(cls, job_id: str, candidate_ids: list[str]) -> BatchRequest:
        return cls(mode="selection", job_id=job_id, candidate_ids=list(candidate_ids))

    @classmethod
    def date_range(cls, job_id: str, start: datetime, end: datetime) -> BatchRequest:
        return cls(mode="date_range", job_id=job_id, start=start, end=end)


@dataclass
class CandidateOutcome:
    """Result of processing a single candidate."""

    candidate_id: str
    state: CandidateState
    message: str
    score: float | None = None
    duration_seconds: float = 0.0

    def __post_init__(self) -> None:
        if self.duration_seconds < 0:
            raise ValueError("duration_seconds must be >= 0")
        if self.state == CandidateState.SUCCESS and self.score is None:
            raise ValueError("score is required when state=success")

    def to_dict(self) -> dict[str, Any]:
        return _jsonable(self)


@dataclass
class BatchResult:
    """Summary of a batch scoring run."""

    success_count: int
    fail_count: int
    skipped_count: int
    total: int
    cancelled: bool = False
    duration_seconds: float = 0.0
    outcomes: list[CandidateOutcome] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.success_count < 0:
            raise ValueError("success_count must be >= 0")
        if self.fail_count < 0:
            raise ValueError("fail_count must be >= 0")
        if self.skipped_count < 0:
            raise ValueError("skipped_count must be >= 0")
        if self.total < 0:
            raise ValueError("total must be >= 0")
        if self.success_count + self.fail_count + self.skipped_count > self.total:
            raise ValueError("counts must not exceed total")
        if self.duration_seconds < 0:
            raise ValueError("duration_seconds must be >= 0")

    @property
    def processed_count(self) -> int:
        return self.success_count + self.fail_count + self.skipped_count

    def to_dict(self) -> dict[str, Any]:
        return _jsonable(self)
