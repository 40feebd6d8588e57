# changelog_scribe/models/jobs.py
"""
Job tracking models and in-memory storage.

A job is created in PROCESSING when a generation request is accepted and
transitions exactly once, to COMPLETED or ERROR. The table lives for the
lifetime of the process; finished jobs are evicted after a retention window.
"""

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from uuid import uuid4

from changelog_scribe.errors import JobStateError
from changelog_scribe.models.changelog import CompletedChangelog

logger = logging.getLogger(__name__)


class JobStatus(Enum):
    """Job lifecycle states."""

    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


@dataclass
class JobRecord:
    """
    Internal job record.

    Owned by the orchestrator; the HTTP layer only reads it.
    """

    job_id: str
    status: JobStatus
    created_at: datetime
    start_date: str | None = None
    end_date: str | None = None
    finished_at: datetime | None = None
    changelog: CompletedChangelog | None = None  # Set when status=COMPLETED
    error: str | None = None  # Caller-facing message when status=ERROR

    @property
    def completed(self) -> bool:
        """True once the job has reached a terminal state (success or error)."""
        return self.status != JobStatus.PROCESSING


class InMemoryJobStore:
    """
    In-memory job table.

    Safe for a single event loop: every method runs without awaiting, so a
    read never observes a half-applied transition.
    """

    def __init__(self, retention_seconds: int = 3600) -> None:
        """
        Initialize empty job store.

        Args:
            retention_seconds: How long finished jobs are kept (0 = forever)
        """
        self._jobs: dict[str, JobRecord] = {}
        self._retention = (
            timedelta(seconds=retention_seconds) if retention_seconds > 0 else None
        )
        logger.info(f"Initialized InMemoryJobStore (retention={retention_seconds}s)")

    def __len__(self) -> int:
        return len(self._jobs)

    async def add(self, record: JobRecord) -> None:
        """
        Add a job record to the store.

        Raises:
            ValueError: If job_id already exists
        """
        if record.job_id in self._jobs:
            raise ValueError(f"Job {record.job_id} already exists")

        self._jobs[record.job_id] = record
        logger.info(f"Added job {record.job_id} to store")

    async def get(self, job_id: str) -> JobRecord | None:
        """Get a job record by ID, or None if unknown or evicted."""
        return self._jobs.get(job_id)

    async def finish(
        self,
        job_id: str,
        status: JobStatus,
        changelog: CompletedChangelog | None = None,
        error: str | None = None,
        finished_at: datetime | None = None,
    ) -> JobRecord:
        """
        Apply the single terminal transition for a job.

        Args:
            job_id: Job identifier
            status: COMPLETED or ERROR
            changelog: Result payload for COMPLETED
            error: Caller-facing message for ERROR
            finished_at: Transition time (defaults to now)

        Returns:
            The updated JobRecord

        Raises:
            ValueError: If job_id doesn't exist
            JobStateError: If status is PROCESSING or the job already finished
        """
        record = self._jobs.get(job_id)
        if record is None:
            raise ValueError(f"Job {job_id} not found")

        if status == JobStatus.PROCESSING:
            raise JobStateError("A job cannot transition back to processing")
        if record.completed:
            raise JobStateError(
                f"Job {job_id} already finished with status '{record.status.value}'"
            )

        record.status = status
        record.changelog = changelog
        record.error = error
        record.finished_at = finished_at or datetime.now(timezone.utc)

        logger.info(f"Job {job_id} finished: {status.value}")
        return record

    async def purge_expired(self, now: datetime | None = None) -> int:
        """
        Evict finished jobs older than the retention window.

        Processing jobs are never evicted.

        Returns:
            Number of jobs removed
        """
        if self._retention is None:
            return 0

        cutoff = (now or datetime.now(timezone.utc)) - self._retention
        expired = [
            job_id
            for job_id, record in self._jobs.items()
            if record.finished_at is not None and record.finished_at <= cutoff
        ]
        for job_id in expired:
            del self._jobs[job_id]

        if expired:
            logger.info(f"Evicted {len(expired)} finished job(s) past retention")
        return len(expired)


def generate_job_id() -> str:
    """
    Generate a unique job ID.

    Returns:
        Millisecond epoch timestamp plus 6 random hex chars,
        e.g. "1704067200000-3f9a1c"
    """
    return f"{time.time_ns() // 1_000_000}-{uuid4().hex[:6]}"
