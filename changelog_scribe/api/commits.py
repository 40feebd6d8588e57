# changelog_scribe/api/commits.py
"""
Commit listing implementation.

Page count is derived from a 1-item request (see github.pagination), then the
requested page is fetched.
"""

import logging

from changelog_scribe.github.client import GitHubCommitSource
from changelog_scribe.github.pagination import has_more, total_pages
from changelog_scribe.models.responses import CommitPage
from changelog_scribe.validation.sanitize import parse_timestamp

logger = logging.getLogger(__name__)


async def list_commits(
    page: int,
    page_size: int,
    start_date: str | None,
    end_date: str | None,
    commit_source: GitHubCommitSource,
) -> dict:
    """
    List one page of repository commits, optionally bounded by dates.

    Args:
        page: Zero-based page number
        page_size: Commits per page (1-100)
        start_date: Optional range start (ISO-8601)
        end_date: Optional range end (ISO-8601)
        commit_source: GitHub client

    Returns:
        CommitPage as dict (camelCase keys)

    Raises:
        ValueError: If page/page_size are out of range
        InvalidDateError: If a date doesn't parse
        CommitSourceError: If GitHub fails
    """
    if page < 0:
        raise ValueError("page must be >= 0")
    if not 1 <= page_size <= 100:
        raise ValueError("pageSize must be between 1 and 100")

    since = parse_timestamp(start_date, "startDate") if start_date else None
    until = parse_timestamp(end_date, "endDate") if end_date else None

    total = await commit_source.count_commits(since, until)
    items = await commit_source.list_commit_items(
        since, until, page=page + 1, per_page=page_size
    )

    logger.info(f"Listed commits page {page} (size {page_size}, ~{total} total)")

    response = CommitPage(
        items=items,
        total_pages=total_pages(total, page_size),
        has_more=has_more(page, page_size, total),
    )
    return response.model_dump(mode="json", by_alias=True)
