# changelog_scribe/models/responses.py
"""
Pydantic request/response models for the HTTP API.

All endpoints return structured responses using these models for consistency.
"""

from pydantic import Field

from changelog_scribe.models.changelog import (
    CamelModel,
    ChangelogRecord,
    CommitListItem,
    CompletedChangelog,
)
from changelog_scribe.models.jobs import JobRecord


class CreateChangelogRequest(CamelModel):
    """Body of POST /api/changelogs."""

    start_date: str = Field(description="Range start (ISO-8601)")
    end_date: str = Field(description="Range end (ISO-8601)")
    version: str | None = Field(default=None, description="Release version label")
    title: str | None = Field(default=None, description="Release title")


class CreateChangelogResponse(CamelModel):
    """Response from POST /api/changelogs."""

    id: str = Field(description="Job identifier for polling the status endpoint")


class JobStatusResponse(CamelModel):
    """Response from GET /api/changelogs/status/{id}."""

    status: str = Field(description="processing/completed/error")
    completed: bool = Field(description="True once the job reached a terminal state")
    changelog: CompletedChangelog | None = Field(
        default=None, description="Result when status=completed"
    )
    error: str | None = Field(default=None, description="Message when status=error")

    @classmethod
    def from_record(cls, record: JobRecord) -> "JobStatusResponse":
        return cls(
            status=record.status.value,
            completed=record.completed,
            changelog=record.changelog,
            error=record.error,
        )


class CommitPage(CamelModel):
    """Response from GET /api/commits."""

    items: list[CommitListItem] = Field(default_factory=list)
    total_pages: int = Field(description="ceil(totalCommits / pageSize)")
    has_more: bool = Field(description="True if (page+1)*pageSize < totalCommits")


class ChangelogPage(CamelModel):
    """Response from GET /api/changelogs."""

    items: list[ChangelogRecord] = Field(default_factory=list)
    has_more: bool = Field(description="True if the page came back full")
    last_timestamp: str | None = Field(
        default=None, description="Cursor for the next page (last item's startDate)"
    )


class ErrorResponse(CamelModel):
    """Body of every non-2xx response."""

    error: str


class HealthResponse(CamelModel):
    """Response from GET /health."""

    status: str = "ok"
    pending_jobs: int = Field(default=0, description="Jobs whose background task is running")
    tracked_jobs: int = Field(default=0, description="Jobs in the table, including finished ones")
    llm_available: bool | None = Field(
        default=None, description="Startup LLM health check result"
    )
