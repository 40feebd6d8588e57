# changelog_scribe/errors.py
"""
Exception hierarchy shared by the service layer.

HTTP handlers translate these into status codes; background jobs log them
and surface only a generic message to callers.
"""


class ChangelogScribeError(Exception):
    """Base class for all changelog-scribe errors."""


class CommitSourceError(ChangelogScribeError):
    """GitHub request failed or returned an unusable response."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SummarizerError(ChangelogScribeError):
    """LLM call failed or its output did not match the changelog draft shape."""


class EmptyCommitRangeError(ChangelogScribeError):
    """No commits exist in the requested date range."""


class InvalidDateError(ChangelogScribeError, ValueError):
    """A date parameter could not be parsed as an ISO-8601 timestamp."""


class JobNotFoundError(ChangelogScribeError, LookupError):
    """No job with the given ID exists (or it has been evicted)."""

    def __init__(self, job_id: str) -> None:
        super().__init__(f"Job {job_id} not found")
        self.job_id = job_id


class JobStateError(ChangelogScribeError):
    """Illegal job state transition (e.g. finishing a job twice)."""
