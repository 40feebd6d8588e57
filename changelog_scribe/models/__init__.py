# changelog_scribe/models/__init__.py
"""
Data models for changelog-scribe.

Provides Pydantic commit/changelog/response models, internal job tracking,
and changelog persistence.
"""

from changelog_scribe.models.changelog import (
    BulletPoint,
    ChangelogDraft,
    ChangelogRecord,
    CommitDetail,
    CommitListItem,
    CommitSummary,
    CompletedChangelog,
    DraftItem,
    DraftSection,
    FileChange,
    Section,
)
from changelog_scribe.models.jobs import (
    InMemoryJobStore,
    JobRecord,
    JobStatus,
    generate_job_id,
)
from changelog_scribe.models.memory_store import InMemoryChangelogStore
from changelog_scribe.models.responses import (
    ChangelogPage,
    CommitPage,
    CreateChangelogRequest,
    CreateChangelogResponse,
    ErrorResponse,
    HealthResponse,
    JobStatusResponse,
)
from changelog_scribe.models.sqlite_store import SQLiteChangelogStore
from changelog_scribe.models.store import ChangelogStore

__all__ = [
    # Commits
    "CommitSummary",
    "CommitListItem",
    "CommitDetail",
    "FileChange",
    # Changelogs
    "ChangelogDraft",
    "DraftSection",
    "DraftItem",
    "ChangelogRecord",
    "Section",
    "BulletPoint",
    "CompletedChangelog",
    # API
    "CreateChangelogRequest",
    "CreateChangelogResponse",
    "JobStatusResponse",
    "CommitPage",
    "ChangelogPage",
    "ErrorResponse",
    "HealthResponse",
    # Job tracking
    "JobStatus",
    "JobRecord",
    "InMemoryJobStore",
    "generate_job_id",
    # Persistence
    "ChangelogStore",
    "SQLiteChangelogStore",
    "InMemoryChangelogStore",
]
