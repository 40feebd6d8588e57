# changelog_scribe/background/orchestrator.py
"""
Changelog generation jobs.

``submit`` records a PROCESSING job and dispatches an asyncio task without
awaiting it; callers poll ``get_status``. Each task performs exactly one
terminal transition on its job.
"""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from changelog_scribe.changelog.assembler import assemble_record, completed_changelog
from changelog_scribe.errors import JobNotFoundError
from changelog_scribe.models.changelog import ChangelogDraft, ChangelogRecord
from changelog_scribe.models.jobs import (
    InMemoryJobStore,
    JobRecord,
    JobStatus,
    generate_job_id,
)
from changelog_scribe.models.store import ChangelogStore
from changelog_scribe.validation.sanitize import parse_timestamp

if TYPE_CHECKING:
    from changelog_scribe.changelog.summarizer import ChangelogSummarizer
    from changelog_scribe.github.client import GitHubCommitSource

logger = logging.getLogger(__name__)

# The only failure detail callers ever see; root causes go to the logs.
GENERIC_FAILURE = "Failed to generate changelog"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ChangelogOrchestrator:
    """
    Owns the job table and the background generation tasks.

    Pipeline per job:
        1. Fetch commits in range (GitHub)
        2. Summarize them into a draft (LLM)
        3. Assemble and append the record (store)
        4. Mark the job COMPLETED, or ERROR on any failure in 1-3
    """

    def __init__(
        self,
        commit_source: "GitHubCommitSource",
        summarizer: "ChangelogSummarizer",
        store: ChangelogStore,
        jobs: InMemoryJobStore | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """
        Initialize orchestrator.

        Args:
            commit_source: Provides fetch_commits_in_range()
            summarizer: Provides summarize(commits) -> ChangelogDraft
            store: Changelog persistence
            jobs: Job table (defaults to a fresh InMemoryJobStore)
            clock: Returns the current UTC time (tests inject a fixed clock)
        """
        self._commit_source = commit_source
        self._summarizer = summarizer
        self._store = store
        self._jobs = jobs if jobs is not None else InMemoryJobStore()
        self._clock = clock
        self._tasks: dict[str, asyncio.Task] = {}

    @property
    def jobs(self) -> InMemoryJobStore:
        return self._jobs

    @property
    def pending(self) -> int:
        """Number of jobs whose background task is still running."""
        return sum(1 for task in self._tasks.values() if not task.done())

    async def submit(
        self,
        start_date: str,
        end_date: str,
        version: str | None = None,
        title: str | None = None,
    ) -> str:
        """
        Accept a generation request and start it in the background.

        The job is in the table before this returns; the background work is
        never awaited here. ``start_date <= end_date`` is not checked.

        Args:
            start_date: Range start (ISO-8601), stored verbatim
            end_date: Range end (ISO-8601), stored verbatim
            version: Optional release version
            title: Optional release title

        Returns:
            Job ID for polling

        Raises:
            InvalidDateError: If either date doesn't parse
        """
        parse_timestamp(start_date, "startDate")
        parse_timestamp(end_date, "endDate")

        await self._jobs.purge_expired(self._clock())

        job_id = generate_job_id()
        await self._jobs.add(
            JobRecord(
                job_id=job_id,
                status=JobStatus.PROCESSING,
                created_at=self._clock(),
                start_date=start_date,
                end_date=end_date,
            )
        )

        task = asyncio.create_task(
            self._run(job_id, start_date, end_date, version, title),
            name=f"changelog-job-{job_id}",
        )
        self._tasks[job_id] = task
        task.add_done_callback(lambda _: self._tasks.pop(job_id, None))

        logger.info(f"Submitted changelog job {job_id} ({start_date} - {end_date})")
        return job_id

    async def get_status(self, job_id: str) -> JobRecord:
        """
        Look up a job.

        Raises:
            JobNotFoundError: If no job has this ID (never submitted or evicted)
        """
        await self._jobs.purge_expired(self._clock())

        record = await self._jobs.get(job_id)
        if record is None:
            raise JobNotFoundError(job_id)
        return record

    async def wait(self, job_id: str) -> JobRecord:
        """Wait for a job's background task to finish, then return its record."""
        task = self._tasks.get(job_id)
        if task is not None:
            await task
        return await self.get_status(job_id)

    async def drain(self, timeout: float) -> None:
        """
        Wait up to ``timeout`` seconds for running jobs, then cancel the rest.

        Cancelled jobs end in ERROR like any other failure.
        """
        tasks = [task for task in self._tasks.values() if not task.done()]
        if not tasks:
            return

        logger.info(f"Waiting up to {timeout}s for {len(tasks)} running job(s)")
        _, still_running = await asyncio.wait(tasks, timeout=timeout)

        for task in still_running:
            task.cancel()
        if still_running:
            logger.warning(f"Cancelled {len(still_running)} job(s) at shutdown")
            await asyncio.gather(*still_running, return_exceptions=True)

    async def _generate(
        self,
        start_date: str,
        end_date: str,
        version: str | None,
        title: str | None,
    ) -> tuple[ChangelogRecord, ChangelogDraft]:
        commits = await self._commit_source.fetch_commits_in_range(start_date, end_date)
        draft = await self._summarizer.summarize(commits)
        record = assemble_record(draft, commits, start_date, end_date, version, title)
        record_id = await self._store.append(record)
        return record.model_copy(update={"id": record_id}), draft

    async def _run(
        self,
        job_id: str,
        start_date: str,
        end_date: str,
        version: str | None,
        title: str | None,
    ) -> None:
        """Background body: one terminal transition, whatever happens."""
        try:
            record, draft = await self._generate(start_date, end_date, version, title)
            finished_at = self._clock()
            result = completed_changelog(record.id, draft, finished_at, version, title)
        except asyncio.CancelledError:
            logger.warning(f"Job {job_id} cancelled during processing")
            await self._jobs.finish(
                job_id, JobStatus.ERROR, error=GENERIC_FAILURE, finished_at=self._clock()
            )
            raise
        except Exception:
            logger.exception(f"Changelog generation failed for job {job_id}")
            await self._jobs.finish(
                job_id, JobStatus.ERROR, error=GENERIC_FAILURE, finished_at=self._clock()
            )
            return

        await self._jobs.finish(
            job_id, JobStatus.COMPLETED, changelog=result, finished_at=finished_at
        )
        logger.info(f"Job {job_id} completed: changelog {record.id}")
