"""Database repository for candidates and job profiles.

This module provides async SQLite operations for the document store the
batch orchestrator reads from and writes scoring results to.
"""

from __future__ import annotations

import json
import uuid
from collections.abc import AsyncGenerator, Callable, Iterable, Mapping
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Any

import aiosqlite

from src.errors import NotFoundError
from src.scoring.models import JobProfile
from src.store.models import SERVER_TIMESTAMP, CandidateRecord, normalize_status
from src.utils.logging import get_logger

logger = get_logger("store.repository")

CREATE_TABLES_SQL = """
CREATE TABLE IF NOT EXISTS job_profiles (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    data TEXT NOT NULL,
    created_at TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS candidates (
    id TEXT PRIMARY KEY,
    status TEXT NOT NULL,
    resume_text TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT,
    data TEXT NOT NULL DEFAULT '{}'
);
"""

CREATE_INDEX_SQL = """
CREATE INDEX IF NOT EXISTS idx_candidates_status ON candidates(status);
CREATE INDEX IF NOT EXISTS idx_candidates_created ON candidates(created_at);
"""


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _to_utc_iso(value: datetime) -> str:
    """Format a datetime as a sortable UTC ISO-8601 string.

    Naive datetimes are taken to be UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="microseconds")


def _status_text(status: object) -> str:
    if isinstance(status, Enum):
        return str(status.value)
    return str(status)


def _parse_datetime(value: str | None) -> datetime | None:
    if value is None:
        return None
    return datetime.fromisoformat(value)


def resolve_server_timestamps(value: Any, now: str) -> Any:
    """Replace every SERVER_TIMESTAMP placeholder in ``value`` with ``now``."""
    if value is SERVER_TIMESTAMP:
        return now
    if isinstance(value, Mapping):
        return {str(key): resolve_server_timestamps(item, now) for key, item in value.items()}
    if isinstance(value, list | tuple):
        return [resolve_server_timestamps(item, now) for item in value]
    return value


class CandidateRepository:
    """Async SQLite repository for candidate and job profile documents.

    Candidate documents keep ``status``, ``resume_text`` and the audit
    timestamps in columns and everything else in a JSON ``data`` column.
    Partial updates merge into that document.
    """

    def __init__(
        self,
        db_path: Path | str,
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize the repository.

        Args:
            db_path: Path to the SQLite database file.
            clock: Source of server timestamps. Defaults to the UTC wall clock.
        """
        self.db_path = Path(db_path)
        self.clock = clock or _utc_now
        self._connection: aiosqlite.Connection | None = None

    @asynccontextmanager
    async def _get_connection(self) -> AsyncGenerator[aiosqlite.Connection, None]:
        """Get a database connection.

        Yields:
            An aiosqlite connection.
        """
        if self._connection is None:
            self._connection = await aiosqlite.connect(self.db_path)
            self._connection.row_factory = aiosqlite.Row
        yield self._connection

    def _now(self) -> str:
        return _to_utc_iso(self.clock())

    async def initialize(self) -> None:
        """Initialize the database, creating tables if needed."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        async with self._get_connection() as conn:
            await conn.executescript(CREATE_TABLES_SQL)
            await conn.executescript(CREATE_INDEX_SQL)
            await conn.commit()

    async def close(self) -> None:
        """Close the database connection."""
        if self._connection is not None:
            await self._connection.close()
            self._connection = None

    async def insert_job_profile(self, profile: JobProfile) -> str:
        """Insert a job profile and return its id.

        A profile without an id is assigned a random one.

        Raises:
            sqlite3.IntegrityError: If a profile with the same id exists.
        """
        profile_id = profile.id or uuid.uuid4().hex
        stored = profile.model_copy(update={"id": profile_id})

        async with self._get_connection() as conn:
            await conn.execute(
                "INSERT INTO job_profiles (id, title, data, created_at) VALUES (?, ?, ?, ?)",
                (profile_id, stored.title, json.dumps(stored.to_dict()), self._now()),
            )
            await conn.commit()

        logger.debug("Stored job profile %s (%s)", profile_id, stored.title)
        return profile_id

    async def get_job_profile(self, profile_id: str) -> JobProfile | None:
        """Get a job profile by id, or None if it does not exist."""
        async with self._get_connection() as conn:
            cursor = await conn.execute(
                "SELECT data FROM job_profiles WHERE id = ?",
                (profile_id,),
            )
            row = await cursor.fetchone()

        if row is None:
            return None

        profile = JobProfile.from_dict(json.loads(row["data"]))
        return profile.model_copy(update={"id": profile_id})

    async def insert_candidate(self, record: CandidateRecord) -> CandidateRecord:
        """Insert a new candidate.

        ``created_at`` defaults to the store clock. Placeholders in ``data``
        are resolved the same way as in updates.

        Returns:
            The record as stored.

        Raises:
            sqlite3.IntegrityError: If a candidate with the same id exists.
            NotFoundError: If the row cannot be read back after the insert.
        """
        now = self._now()
        created_at = _to_utc_iso(record.created_at) if record.created_at else now
        data = resolve_server_timestamps(dict(record.data), now)

        async with self._get_connection() as conn:
            await conn.execute(
                """
                INSERT INTO candidates (id, status, resume_text, created_at, updated_at, data)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    record.id,
                    _status_text(record.status),
                    record.resume_text,
                    created_at,
                    _to_utc_iso(record.updated_at) if record.updated_at else None,
                    json.dumps(data),
                ),
            )
            await conn.commit()

        stored = await self.get_candidate(record.id)
        if stored is None:
            raise NotFoundError("candidate", record.id)
        return stored

    async def get_candidate(self, candidate_id: str) -> CandidateRecord | None:
        """Get a candidate by id, or None if it does not exist."""
        async with self._get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM candidates WHERE id = ?",
                (candidate_id,),
            )
            row = await cursor.fetchone()

        if row is None:
            return None

        return self._row_to_record(row)

    async def query_candidates_by_date_range(
        self, start: datetime, end: datetime
    ) -> list[CandidateRecord]:
        """List candidates created within ``[start, end]``, newest first."""
        async with self._get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM candidates
                WHERE created_at >= ? AND created_at <= ?
                ORDER BY created_at DESC, id ASC
                """,
                (_to_utc_iso(start), _to_utc_iso(end)),
            )
            rows = await cursor.fetchall()

        return [self._row_to_record(row) for row in rows]

    async def list_recent(
        self,
        limit: int = 10,
        status_filter: str | None = None,
    ) -> list[CandidateRecord]:
        """List recently created candidates.

        Args:
            limit: Maximum number of records to return.
            status_filter: Optional status to filter by.

        Returns:
            Candidate records, ordered by created_at descending.
        """
        async with self._get_connection() as conn:
            if status_filter is not None:
                cursor = await conn.execute(
                    """
                    SELECT * FROM candidates
                    WHERE status = ?
                    ORDER BY created_at DESC
                    LIMIT ?
                    """,
                    (status_filter, limit),
                )
            else:
                cursor = await conn.execute(
                    """
                    SELECT * FROM candidates
                    ORDER BY created_at DESC
                    LIMIT ?
                    """,
                    (limit,),
                )
            rows = await cursor.fetchall()

        return [self._row_to_record(row) for row in rows]

    async def update_candidate(self, candidate_id: str, partial: Mapping[str, Any]) -> None:
        """Merge ``partial`` into a candidate document.

        Raises:
            NotFoundError: If the candidate does not exist.
        """
        await self.update_candidate_unless_status(candidate_id, partial, ())

    async def update_candidate_unless_status(
        self,
        candidate_id: str,
        partial: Mapping[str, Any],
        blocked_statuses: Iterable[str],
    ) -> bool:
        """Merge ``partial`` unless the candidate's current status is blocked.

        The status read and the write happen in one ``BEGIN IMMEDIATE``
        transaction, so no other writer can change the status in between.

        Returns:
            True if the update was applied, False if the status was blocked.

        Raises:
            NotFoundError: If the candidate does not exist.
        """
        blocked = {normalize_status(status) for status in blocked_statuses}
        now = self._now()

        async with self._get_connection() as conn:
            await conn.execute("BEGIN IMMEDIATE")
            try:
                cursor = await conn.execute(
                    "SELECT status, data FROM candidates WHERE id = ?",
                    (candidate_id,),
                )
                row = await cursor.fetchone()
                if row is None:
                    raise NotFoundError("candidate", candidate_id)

                if normalize_status(row["status"]) in blocked:
                    await conn.rollback()
                    logger.info(
                        "Update of %s blocked by status %r", candidate_id, row["status"]
                    )
                    return False

                changes = resolve_server_timestamps(partial, now)
                status = changes.pop("status", row["status"])
                changes.pop("updated_at", None)
                data = json.loads(row["data"] or "{}")
                data.update(changes)

                await conn.execute(
                    """
                    UPDATE candidates
                    SET status = ?, updated_at = ?, data = ?
                    WHERE id = ?
                    """,
                    (_status_text(status), now, json.dumps(data), candidate_id),
                )
                await conn.commit()
            except BaseException:
                await conn.rollback()
                raise

        return True

    def _row_to_record(self, row: aiosqlite.Row) -> CandidateRecord:
        """Convert a database row to a CandidateRecord."""
        return CandidateRecord(
            id=row["id"],
            status=row["status"],
            resume_text=row["resume_text"],
            created_at=_parse_datetime(row["created_at"]),
            updated_at=_parse_datetime(row["updated_at"]),
            data=json.loads(row["data"] or "{}"),
        )
