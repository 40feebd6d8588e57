# tests/unit/test_orchestrator.py
"""
Unit tests for ChangelogOrchestrator.

Covers asynchronous submission, terminal transitions, failure masking,
retention, and shutdown draining. Collaborators are in-process fakes.
"""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from changelog_scribe.background.orchestrator import GENERIC_FAILURE, ChangelogOrchestrator
from changelog_scribe.changelog.summarizer import ChangelogSummarizer
from changelog_scribe.errors import CommitSourceError, InvalidDateError, JobNotFoundError
from changelog_scribe.models.jobs import InMemoryJobStore, JobStatus
from changelog_scribe.models.memory_store import InMemoryChangelogStore

from conftest import FakeCommitSource, FakeLLM

T0 = datetime(2024, 2, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: datetime = T0):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def _orchestrator(source, llm=None, store=None, jobs=None, clock=None):
    llm = llm or FakeLLM()
    return ChangelogOrchestrator(
        commit_source=source,
        summarizer=ChangelogSummarizer(source, llm),
        store=store or InMemoryChangelogStore(),
        jobs=jobs,
        clock=clock or FakeClock(),
    )


@pytest.mark.asyncio
async def test_submit_returns_before_work_finishes(commits):
    gate = asyncio.Event()
    source = FakeCommitSource(commits, gate=gate)
    orchestrator = _orchestrator(source)

    job_id = await orchestrator.submit("2024-01-01", "2024-01-31")

    record = await orchestrator.get_status(job_id)
    assert record.status == JobStatus.PROCESSING
    assert record.completed is False
    assert orchestrator.pending == 1

    gate.set()
    record = await orchestrator.wait(job_id)
    assert record.status == JobStatus.COMPLETED
    assert orchestrator.pending == 0


@pytest.mark.asyncio
async def test_completed_job_carries_changelog(commits):
    store = InMemoryChangelogStore()
    orchestrator = _orchestrator(FakeCommitSource(commits), store=store)

    job_id = await orchestrator.submit("2024-01-01", "2024-01-31", version="1.2.0", title="Winter")
    record = await orchestrator.wait(job_id)

    assert record.status == JobStatus.COMPLETED
    assert record.error is None
    changelog = record.changelog
    assert changelog.version == "1.2.0"
    assert changelog.title == "Winter"
    assert changelog.date == T0
    assert [c.category for c in changelog.changes] == ["Features", "Bug Fixes"]

    stored = await store.get(changelog.id)
    assert stored is not None
    assert stored.start_date == "2024-01-01"
    assert stored.end_date == "2024-01-31"
    assert stored.timestamp_of_most_recent_commit == "2024-01-05T10:00:00Z"
    assert stored.sections[0].heading == "Features"
    assert stored.sections[0].bullet_points[0].bullet_point_details == "Dark mode"


@pytest.mark.asyncio
async def test_commit_source_failure_becomes_generic_error():
    source = FakeCommitSource(fail_with=CommitSourceError("GitHub API error 401: Bad credentials", 401))
    store = InMemoryChangelogStore()
    orchestrator = _orchestrator(source, store=store)

    job_id = await orchestrator.submit("2024-01-01", "2024-01-31")
    record = await orchestrator.wait(job_id)

    assert record.status == JobStatus.ERROR
    assert record.completed is True
    assert record.error == GENERIC_FAILURE
    assert "credentials" not in record.error
    assert record.changelog is None
    assert (await store.page(10)).items == []


@pytest.mark.asyncio
async def test_llm_failure_becomes_generic_error(commits):
    orchestrator = _orchestrator(FakeCommitSource(commits), llm=FakeLLM(response="not json at all"))

    job_id = await orchestrator.submit("2024-01-01", "2024-01-31")
    record = await orchestrator.wait(job_id)

    assert record.status == JobStatus.ERROR
    assert record.error == GENERIC_FAILURE


class FailingStore(InMemoryChangelogStore):
    async def append(self, record):
        raise OSError("disk full")


@pytest.mark.asyncio
async def test_store_failure_becomes_generic_error(commits):
    orchestrator = _orchestrator(FakeCommitSource(commits), store=FailingStore())

    job_id = await orchestrator.submit("2024-01-01", "2024-01-31")
    record = await orchestrator.wait(job_id)

    assert record.status == JobStatus.ERROR
    assert record.completed is True
    assert record.error == GENERIC_FAILURE
    assert record.changelog is None
    assert orchestrator.pending == 0


@pytest.mark.asyncio
async def test_empty_commit_range_is_an_error():
    llm = FakeLLM()
    store = InMemoryChangelogStore()
    orchestrator = _orchestrator(FakeCommitSource([]), llm=llm, store=store)

    job_id = await orchestrator.submit("2024-01-01", "2024-01-31")
    record = await orchestrator.wait(job_id)

    assert record.status == JobStatus.ERROR
    assert llm.calls == []
    assert (await store.page(10)).items == []


@pytest.mark.asyncio
async def test_unknown_job_raises():
    orchestrator = _orchestrator(FakeCommitSource())
    with pytest.raises(JobNotFoundError):
        await orchestrator.get_status("does-not-exist")


@pytest.mark.asyncio
async def test_status_reads_are_idempotent(commits):
    orchestrator = _orchestrator(FakeCommitSource(commits))
    job_id = await orchestrator.submit("2024-01-01", "2024-01-31")
    await orchestrator.wait(job_id)

    first = await orchestrator.get_status(job_id)
    second = await orchestrator.get_status(job_id)

    assert first.status == second.status == JobStatus.COMPLETED
    assert first.changelog == second.changelog


@pytest.mark.asyncio
async def test_invalid_dates_rejected_before_job_is_created():
    source = FakeCommitSource()
    orchestrator = _orchestrator(source)

    with pytest.raises(InvalidDateError):
        await orchestrator.submit("last tuesday", "2024-01-31")
    with pytest.raises(InvalidDateError):
        await orchestrator.submit("2024-01-01", "")

    assert len(orchestrator.jobs) == 0
    assert source.fetch_calls == []


@pytest.mark.asyncio
async def test_dates_passed_through_verbatim(commits):
    source = FakeCommitSource(commits)
    orchestrator = _orchestrator(source)

    job_id = await orchestrator.submit("2024-01-01T00:00:00Z", "2024-01-31T23:59:59Z")
    await orchestrator.wait(job_id)

    assert source.fetch_calls == [("2024-01-01T00:00:00Z", "2024-01-31T23:59:59Z")]


@pytest.mark.asyncio
async def test_concurrent_jobs_are_independent(commits):
    good = FakeCommitSource(commits)
    orchestrator = _orchestrator(good)

    ids = [await orchestrator.submit("2024-01-01", f"2024-01-{d:02d}") for d in (10, 20, 30)]
    records = await asyncio.gather(*(orchestrator.wait(i) for i in ids))

    assert len(set(ids)) == 3
    assert all(r.status == JobStatus.COMPLETED for r in records)
    assert len({r.changelog.id for r in records}) == 3


@pytest.mark.asyncio
async def test_finished_jobs_evicted_after_retention(commits):
    clock = FakeClock()
    orchestrator = _orchestrator(
        FakeCommitSource(commits), jobs=InMemoryJobStore(retention_seconds=60), clock=clock
    )
    job_id = await orchestrator.submit("2024-01-01", "2024-01-31")
    await orchestrator.wait(job_id)

    clock.now = T0 + timedelta(seconds=30)
    assert (await orchestrator.get_status(job_id)).status == JobStatus.COMPLETED

    clock.now = T0 + timedelta(seconds=61)
    with pytest.raises(JobNotFoundError):
        await orchestrator.get_status(job_id)


@pytest.mark.asyncio
async def test_drain_waits_for_quick_jobs(commits):
    orchestrator = _orchestrator(FakeCommitSource(commits))
    job_id = await orchestrator.submit("2024-01-01", "2024-01-31")

    await orchestrator.drain(timeout=5)

    assert (await orchestrator.get_status(job_id)).status == JobStatus.COMPLETED


@pytest.mark.asyncio
async def test_drain_cancels_stuck_jobs_as_errors(commits):
    gate = asyncio.Event()
    orchestrator = _orchestrator(FakeCommitSource(commits, gate=gate))
    job_id = await orchestrator.submit("2024-01-01", "2024-01-31")
    await asyncio.sleep(0)

    await orchestrator.drain(timeout=0.01)

    record = await orchestrator.get_status(job_id)
    assert record.status == JobStatus.ERROR
    assert record.error == GENERIC_FAILURE
    assert orchestrator.pending == 0


@pytest.mark.asyncio
async def test_drain_with_no_jobs_is_noop():
    orchestrator = _orchestrator(FakeCommitSource())
    await orchestrator.drain(timeout=0)
