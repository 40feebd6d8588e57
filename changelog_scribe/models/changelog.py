# changelog_scribe/models/changelog.py
"""
Commit and changelog data models.

Attributes are snake_case; JSON (API responses, LLM output, stored payloads)
uses camelCase aliases so the web client sees the same keys it always has.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase JSON keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Commits (sourced from GitHub, never mutated)
# ---------------------------------------------------------------------------


class CommitSummary(CamelModel):
    """One commit as returned by the list-commits endpoint."""

    model_config = ConfigDict(frozen=True)

    sha: str
    message: str
    author: str
    date: str = Field(description="Author date, ISO-8601 as reported by GitHub")


class CommitListItem(CommitSummary):
    """CommitSummary plus its permanent link (commit listing endpoint)."""

    link: str


class FileChange(CamelModel):
    """A single file touched by a commit."""

    filename: str | None = None
    patch: str | None = Field(
        default=None, description="Unified diff text (absent for binary or rename-only changes)"
    )


class CommitDetail(CommitSummary):
    """CommitSummary enriched with diff stats and per-file patches."""

    link: str
    additions: int = 0
    deletions: int = 0
    files: list[FileChange] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# LLM draft
# ---------------------------------------------------------------------------


class DraftItem(CamelModel):
    """A single user-facing change, as written by the LLM."""

    description: str
    commit_link: str


class DraftSection(CamelModel):
    """A category of changes (e.g. "Features", "Bug Fixes")."""

    category: str
    items: list[DraftItem] = Field(default_factory=list)


class ChangelogDraft(CamelModel):
    """Structured LLM output: ``{"changes": [{category, items: [...]}]}``."""

    changes: list[DraftSection]


# ---------------------------------------------------------------------------
# Persisted record
# ---------------------------------------------------------------------------


class BulletPoint(CamelModel):
    """A persisted changelog line item."""

    bullet_point_details: str
    link_to_relevant_commit: str


class Section(CamelModel):
    """A persisted changelog section."""

    heading: str
    bullet_points: list[BulletPoint] = Field(default_factory=list)


class ChangelogRecord(CamelModel):
    """
    A changelog entry as stored and served to readers.

    Append-only: created once when a job completes, never updated.
    ``start_date``/``end_date`` are kept exactly as the caller supplied them.
    """

    id: str | None = Field(default=None, description="Assigned by the store on append")
    timestamp_of_most_recent_commit: str
    version: str | None = None
    title: str | None = None
    start_date: str
    end_date: str
    sections: list[Section] = Field(default_factory=list)


class CompletedChangelog(CamelModel):
    """Changelog summary attached to a completed job."""

    id: str
    date: datetime = Field(description="When the changelog was assembled")
    version: str | None = None
    title: str | None = None
    changes: list[DraftSection] = Field(default_factory=list)
