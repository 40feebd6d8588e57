# tests/unit/conftest.py
"""Shared fakes for the GitHub commit source and LLM clients."""

import asyncio
import json

import pytest

from changelog_scribe.config.schema import ScribeConfig
from changelog_scribe.models.changelog import CommitDetail, CommitListItem, CommitSummary

REPO_URL = "https://github.com/acme/widgets"


def make_commit(sha: str, date: str, message: str = "Fix things", author: str = "Ada") -> CommitSummary:
    return CommitSummary(sha=sha, message=message, author=author, date=date)


def draft_json(link: str = f"{REPO_URL}/commit/abc") -> str:
    return json.dumps(
        {
            "changes": [
                {
                    "category": "Features",
                    "items": [{"description": "Dark mode", "commitLink": link}],
                },
                {
                    "category": "Bug Fixes",
                    "items": [{"description": "Login no longer hangs", "commitLink": link}],
                },
            ]
        }
    )


class FakeCommitSource:
    """In-process stand-in for GitHubCommitSource."""

    def __init__(self, commits=None, total=1, fail_with=None, gate: asyncio.Event | None = None):
        self.commits = list(commits or [])
        self.total = total
        self.fail_with = fail_with
        self.gate = gate
        self.fetch_calls: list[tuple] = []
        self.list_calls: list[dict] = []
        self.closed = False

    def commit_link(self, sha: str) -> str:
        return f"{REPO_URL}/commit/{sha}"

    async def fetch_commits_in_range(self, start_date, end_date):
        self.fetch_calls.append((start_date, end_date))
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_with is not None:
            raise self.fail_with
        return list(self.commits)

    async def get_commit_details(self, commits):
        return [
            CommitDetail(**c.model_dump(), link=self.commit_link(c.sha), additions=3, deletions=1)
            for c in commits
        ]

    async def count_commits(self, since=None, until=None):
        if self.fail_with is not None:
            raise self.fail_with
        return self.total

    async def list_commit_items(self, since=None, until=None, page=1, per_page=30):
        self.list_calls.append({"since": since, "until": until, "page": page, "per_page": per_page})
        return [
            CommitListItem(**c.model_dump(), link=self.commit_link(c.sha))
            for c in self.commits[:per_page]
        ]

    async def close(self):
        self.closed = True


class FakeLLM:
    """Returns a canned JSON response from generate_json()."""

    def __init__(self, response: str | None = None, fail_with=None, healthy: bool = True):
        self.response = response if response is not None else draft_json()
        self.fail_with = fail_with
        self.healthy = healthy
        self.calls: list[list[dict]] = []
        self.closed = False

    async def generate_json(self, messages):
        self.calls.append(messages)
        if self.fail_with is not None:
            raise self.fail_with
        return self.response

    async def health_check(self) -> bool:
        return self.healthy

    async def close(self):
        self.closed = True


@pytest.fixture
def commits() -> list[CommitSummary]:
    return [
        make_commit("aaa111", "2024-01-01T00:00:00Z", "Add dark mode"),
        make_commit("bbb222", "2024-01-05T10:00:00Z", "Fix login hang"),
        make_commit("ccc333", "2024-01-03T00:00:00Z", "Bump version"),
    ]


@pytest.fixture
def config(tmp_path) -> ScribeConfig:
    return ScribeConfig(
        github={"owner": "acme", "repo": "widgets"},
        storage={"db_path": str(tmp_path / "changelogs.db")},
        jobs={"retention_seconds": 3600, "shutdown_grace_seconds": 1},
    )
