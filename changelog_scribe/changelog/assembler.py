# changelog_scribe/changelog/assembler.py
"""
Turn a changelog draft plus its commit set into the persisted record.
"""

import logging
from datetime import datetime

from changelog_scribe.errors import EmptyCommitRangeError
from changelog_scribe.models.changelog import (
    BulletPoint,
    ChangelogDraft,
    ChangelogRecord,
    CommitSummary,
    CompletedChangelog,
    Section,
)
from changelog_scribe.validation.sanitize import parse_timestamp

logger = logging.getLogger(__name__)


def most_recent_commit(commits: list[CommitSummary]) -> CommitSummary:
    """
    The commit with the latest date; ties go to the first one encountered.

    Raises:
        EmptyCommitRangeError: If commits is empty
    """
    if not commits:
        raise EmptyCommitRangeError("No commits found in the requested date range")

    latest = commits[0]
    latest_ts = parse_timestamp(latest.date, "commit date")
    for commit in commits[1:]:
        ts = parse_timestamp(commit.date, "commit date")
        if ts > latest_ts:
            latest, latest_ts = commit, ts
    return latest


def draft_to_sections(draft: ChangelogDraft) -> list[Section]:
    """Map draft categories/items 1:1 onto persisted sections/bullet points."""
    return [
        Section(
            heading=change.category,
            bullet_points=[
                BulletPoint(
                    bullet_point_details=item.description,
                    link_to_relevant_commit=item.commit_link,
                )
                for item in change.items
            ],
        )
        for change in draft.changes
    ]


def assemble_record(
    draft: ChangelogDraft,
    commits: list[CommitSummary],
    start_date: str,
    end_date: str,
    version: str | None = None,
    title: str | None = None,
) -> ChangelogRecord:
    """
    Build the record to persist for a finished generation.

    Args:
        draft: Summarizer output
        commits: Commit set the draft was generated from
        start_date: Range start exactly as submitted
        end_date: Range end exactly as submitted
        version: Optional release version
        title: Optional release title

    Returns:
        ChangelogRecord without an id (the store assigns it)
    """
    latest = most_recent_commit(commits)
    record = ChangelogRecord(
        timestamp_of_most_recent_commit=latest.date,
        version=version or None,
        title=title or None,
        start_date=start_date,
        end_date=end_date,
        sections=draft_to_sections(draft),
    )
    logger.info(
        f"Assembled changelog for {len(commits)} commits "
        f"(most recent {latest.sha[:7]} at {latest.date})"
    )
    return record


def completed_changelog(
    record_id: str,
    draft: ChangelogDraft,
    assembled_at: datetime,
    version: str | None = None,
    title: str | None = None,
) -> CompletedChangelog:
    """Result payload stored on a completed job."""
    return CompletedChangelog(
        id=record_id,
        date=assembled_at,
        version=version,
        title=title,
        changes=draft.changes,
    )
