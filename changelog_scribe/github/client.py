# changelog_scribe/github/client.py
"""GitHub commit source: list commits in a date range and fetch commit details."""

import asyncio
import logging
from datetime import datetime
from typing import Any

import httpx

from changelog_scribe.config.schema import GitHubConfig
from changelog_scribe.errors import CommitSourceError
from changelog_scribe.models.changelog import (
    CommitDetail,
    CommitListItem,
    CommitSummary,
    FileChange,
)
from changelog_scribe.validation.sanitize import to_github_iso

from .pagination import last_page_number
from .retry import github_retry

logger = logging.getLogger(__name__)

MAX_PER_PAGE = 100


class GitHubCommitSource:
    """
    Async client for the commits API of a single GitHub repository.

    Handles:
    - Date-bounded commit listing (single page, or every page up to a cap)
    - Commit count probing via Link headers
    - Commit detail retrieval (stats + per-file patches), bounded concurrency
    """

    def __init__(
        self,
        owner: str,
        repo: str,
        token: str | None = None,
        base_url: str = "https://api.github.com",
        timeout: float = 30.0,
        max_commits: int = 250,
        max_concurrency: int = 5,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize GitHub commit source.

        Args:
            owner: Repository owner
            repo: Repository name
            token: Personal access token (optional, raises rate limits)
            base_url: GitHub REST API base URL
            timeout: Request timeout in seconds
            max_commits: Cap for fetch_commits_in_range
            max_concurrency: Concurrent get_commit calls in get_commit_details
            transport: Custom httpx transport (tests use httpx.MockTransport)
        """
        self.owner = owner
        self.repo = repo
        self.max_commits = max_commits
        self._semaphore = asyncio.Semaphore(max_concurrency)

        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": "changelog-scribe",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    @classmethod
    def from_config(
        cls, config: GitHubConfig, transport: httpx.AsyncBaseTransport | None = None
    ) -> "GitHubCommitSource":
        return cls(
            owner=config.owner,
            repo=config.repo,
            token=config.token,
            base_url=config.base_url,
            timeout=config.timeout,
            max_commits=config.max_commits,
            max_concurrency=config.max_concurrency,
            transport=transport,
        )

    @property
    def _repo_path(self) -> str:
        return f"/repos/{self.owner}/{self.repo}"

    def commit_link(self, sha: str) -> str:
        """Permanent web link to a commit."""
        return f"https://github.com/{self.owner}/{self.repo}/commit/{sha}"

    async def close(self) -> None:
        await self._client.aclose()

    @github_retry
    async def _get(self, path: str, params: dict[str, Any] | None = None) -> httpx.Response:
        """
        GET a GitHub API path.

        Raises:
            CommitSourceError: On transport failure or non-2xx status
        """
        clean_params = {k: v for k, v in (params or {}).items() if v is not None}
        try:
            response = await self._client.get(path, params=clean_params)
        except httpx.TransportError as e:
            raise CommitSourceError(f"GitHub request failed: {e}") from e

        if response.is_error:
            try:
                message = response.json().get("message", response.reason_phrase)
            except ValueError:
                message = response.reason_phrase
            raise CommitSourceError(
                f"GitHub API error {response.status_code} for {path}: {message}",
                status_code=response.status_code,
            )

        return response

    def _parse_summary(self, item: dict) -> CommitSummary:
        try:
            return CommitSummary(
                sha=item["sha"],
                message=item["commit"]["message"],
                author=item["commit"]["author"]["name"],
                date=item["commit"]["author"]["date"],
            )
        except (KeyError, TypeError) as e:
            raise CommitSourceError(f"Malformed commit in GitHub response: missing {e}") from e

    async def list_commits(
        self,
        since: str | datetime | None = None,
        until: str | datetime | None = None,
        page: int = 1,
        per_page: int = 30,
    ) -> tuple[list[CommitSummary], httpx.Response]:
        """
        Fetch one page of commits.

        Args:
            since: Only commits after this timestamp
            until: Only commits before this timestamp
            page: One-based page number
            per_page: Page size (GitHub max 100)

        Returns:
            (commits, raw response) - the response carries the Link header
        """
        response = await self._get(
            f"{self._repo_path}/commits",
            params={
                "since": to_github_iso(since, "since") if since else None,
                "until": to_github_iso(until, "until") if until else None,
                "per_page": per_page,
                "page": page,
            },
        )
        payload = response.json()
        if not isinstance(payload, list):
            raise CommitSourceError("Unexpected GitHub response: commit list is not an array")
        return [self._parse_summary(item) for item in payload], response

    async def list_commit_items(
        self,
        since: str | datetime | None = None,
        until: str | datetime | None = None,
        page: int = 1,
        per_page: int = 30,
    ) -> list[CommitListItem]:
        """list_commits with each commit's permanent link attached."""
        commits, _ = await self.list_commits(since, until, page=page, per_page=per_page)
        return [
            CommitListItem(**commit.model_dump(), link=self.commit_link(commit.sha))
            for commit in commits
        ]

    async def count_commits(
        self,
        since: str | datetime | None = None,
        until: str | datetime | None = None,
    ) -> int:
        """
        Approximate commit count in range via a 1-item request.

        Returns the rel="last" page number, or 1 when GitHub sends no
        ``last`` link (which also happens for an empty range).
        """
        _, response = await self.list_commits(since, until, page=1, per_page=1)
        return last_page_number(response, default=1)

    async def fetch_commits_in_range(
        self, start_date: str | datetime, end_date: str | datetime
    ) -> list[CommitSummary]:
        """
        Fetch every commit between start_date and end_date (up to max_commits).

        Follows rel="next" links page by page.
        """
        per_page = min(MAX_PER_PAGE, self.max_commits)
        collected: list[CommitSummary] = []
        page = 1

        while True:
            commits, response = await self.list_commits(
                start_date, end_date, page=page, per_page=per_page
            )
            collected.extend(commits)

            if len(collected) >= self.max_commits:
                if len(collected) > self.max_commits or "next" in response.links:
                    logger.warning(
                        f"Commit range truncated to {self.max_commits} commits "
                        f"({start_date} - {end_date})"
                    )
                collected = collected[: self.max_commits]
                break
            if "next" not in response.links or not commits:
                break
            page += 1

        logger.info(
            f"Fetched {len(collected)} commits from {self.owner}/{self.repo} "
            f"between {start_date} and {end_date}"
        )
        return collected

    async def get_commit(self, sha: str) -> CommitDetail:
        """Fetch a single commit with stats and per-file patches."""
        response = await self._get(f"{self._repo_path}/commits/{sha}")
        data = response.json()

        try:
            summary = self._parse_summary(data)
            stats = data.get("stats") or {}
            files = [
                FileChange(filename=f.get("filename"), patch=f.get("patch"))
                for f in data.get("files") or []
            ]
        except AttributeError as e:
            raise CommitSourceError(f"Malformed commit detail for {sha}: {e}") from e

        return CommitDetail(
            **summary.model_dump(),
            link=self.commit_link(summary.sha),
            additions=stats.get("additions", 0),
            deletions=stats.get("deletions", 0),
            files=files,
        )

    async def get_commit_details(self, commits: list[CommitSummary]) -> list[CommitDetail]:
        """
        Fetch details for many commits concurrently, preserving input order.

        Any failure propagates; remaining requests are left to finish.
        """

        async def _one(commit: CommitSummary) -> CommitDetail:
            async with self._semaphore:
                return await self.get_commit(commit.sha)

        return list(await asyncio.gather(*(_one(c) for c in commits)))
