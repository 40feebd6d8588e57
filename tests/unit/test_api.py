# tests/unit/test_api.py
"""Tests for the endpoint implementations shared by HTTP and CLI."""

import pytest

from changelog_scribe.api import check_status, create_changelog, list_changelogs, list_commits
from changelog_scribe.background.orchestrator import ChangelogOrchestrator
from changelog_scribe.changelog.summarizer import ChangelogSummarizer
from changelog_scribe.errors import InvalidDateError, JobNotFoundError
from changelog_scribe.models.memory_store import InMemoryChangelogStore
from changelog_scribe.models.responses import CreateChangelogRequest

from conftest import FakeCommitSource, FakeLLM


class TestListCommits:
    @pytest.mark.asyncio
    async def test_first_page(self, commits):
        source = FakeCommitSource(commits, total=25)

        result = await list_commits(0, 10, None, None, commit_source=source)

        assert result["totalPages"] == 3
        assert result["hasMore"] is True
        assert [i["sha"] for i in result["items"]] == ["aaa111", "bbb222", "ccc333"]
        assert result["items"][0]["link"] == "https://github.com/acme/widgets/commit/aaa111"
        # Zero-based API page maps to GitHub's one-based page
        assert source.list_calls[0]["page"] == 1
        assert source.list_calls[0]["per_page"] == 10

    @pytest.mark.asyncio
    async def test_last_page_has_no_more(self, commits):
        source = FakeCommitSource(commits, total=25)
        result = await list_commits(2, 10, None, None, commit_source=source)

        assert result["hasMore"] is False
        assert source.list_calls[0]["page"] == 3

    @pytest.mark.asyncio
    async def test_date_bounds_are_parsed(self, commits):
        source = FakeCommitSource(commits)
        await list_commits(0, 5, "2024-01-01", "2024-01-31T12:00:00Z", commit_source=source)

        call = source.list_calls[0]
        assert call["since"].isoformat() == "2024-01-01T00:00:00+00:00"
        assert call["until"].isoformat() == "2024-01-31T12:00:00+00:00"

    @pytest.mark.asyncio
    async def test_missing_last_link_counts_as_one(self):
        result = await list_commits(0, 10, None, None, commit_source=FakeCommitSource([], total=1))
        assert result == {"items": [], "totalPages": 1, "hasMore": False}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("page, size", [(-1, 10), (0, 0), (0, 101)])
    async def test_out_of_range_params(self, page, size):
        with pytest.raises(ValueError):
            await list_commits(page, size, None, None, commit_source=FakeCommitSource())

    @pytest.mark.asyncio
    async def test_invalid_date(self):
        with pytest.raises(InvalidDateError):
            await list_commits(0, 10, "soon", None, commit_source=FakeCommitSource())


class TestChangelogEndpoints:
    @pytest.fixture
    def orchestrator(self, commits):
        source = FakeCommitSource(commits)
        return ChangelogOrchestrator(
            commit_source=source,
            summarizer=ChangelogSummarizer(source, FakeLLM()),
            store=InMemoryChangelogStore(),
        )

    @pytest.mark.asyncio
    async def test_create_then_check(self, orchestrator):
        created = await create_changelog(
            CreateChangelogRequest(start_date="2024-01-01", end_date="2024-01-31", version="2.0"),
            orchestrator=orchestrator,
        )
        job_id = created["id"]

        pending = await check_status(job_id, orchestrator=orchestrator)
        assert pending == {"status": "processing", "completed": False}

        await orchestrator.wait(job_id)
        done = await check_status(job_id, orchestrator=orchestrator)

        assert done["status"] == "completed"
        assert done["completed"] is True
        assert "error" not in done
        assert done["changelog"]["version"] == "2.0"
        assert done["changelog"]["changes"][0]["items"][0]["commitLink"].endswith("/commit/abc")

    @pytest.mark.asyncio
    async def test_check_unknown(self, orchestrator):
        with pytest.raises(JobNotFoundError):
            await check_status("nope", orchestrator=orchestrator)

    @pytest.mark.asyncio
    async def test_list_changelogs(self, orchestrator):
        job_id = (
            await create_changelog(
                CreateChangelogRequest(start_date="2024-01-01", end_date="2024-01-31"),
                orchestrator=orchestrator,
            )
        )["id"]
        await orchestrator.wait(job_id)

        page = await list_changelogs(10, None, store=orchestrator._store)

        assert page["hasMore"] is False
        assert page["lastTimestamp"] == "2024-01-01"
        assert page["items"][0]["timestampOfMostRecentCommit"] == "2024-01-05T10:00:00Z"

    @pytest.mark.asyncio
    async def test_list_changelogs_rejects_bad_page_size(self):
        with pytest.raises(ValueError):
            await list_changelogs(0, None, store=InMemoryChangelogStore())
