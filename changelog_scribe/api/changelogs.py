# changelog_scribe/api/changelogs.py
"""
Changelog endpoints implementation: paginated reads, job submission, job status.
"""

import logging

from changelog_scribe.background.orchestrator import ChangelogOrchestrator
from changelog_scribe.models.responses import (
    CreateChangelogRequest,
    CreateChangelogResponse,
    JobStatusResponse,
)
from changelog_scribe.models.store import ChangelogStore

logger = logging.getLogger(__name__)


async def list_changelogs(
    page_size: int, last_timestamp: str | None, store: ChangelogStore
) -> dict:
    """
    Read one page of changelogs, newest startDate first.

    Args:
        page_size: Records per page
        last_timestamp: Cursor from the previous page's ``lastTimestamp``
        store: Changelog store

    Returns:
        ChangelogPage as dict ({items, hasMore, lastTimestamp})

    Raises:
        ValueError: If page_size < 1
        InvalidDateError: If last_timestamp doesn't parse
    """
    if page_size < 1:
        raise ValueError("pageSize must be >= 1")

    page = await store.page(page_size, last_timestamp or None)
    return page.model_dump(mode="json", by_alias=True)


async def create_changelog(
    request: CreateChangelogRequest, orchestrator: ChangelogOrchestrator
) -> dict:
    """
    Start a changelog generation job.

    Returns:
        CreateChangelogResponse as dict ({id})

    Raises:
        InvalidDateError: If startDate/endDate don't parse
    """
    job_id = await orchestrator.submit(
        request.start_date,
        request.end_date,
        version=request.version,
        title=request.title,
    )
    return CreateChangelogResponse(id=job_id).model_dump(by_alias=True)


async def check_status(job_id: str, orchestrator: ChangelogOrchestrator) -> dict:
    """
    Check the status of a changelog job.

    Returns:
        JobStatusResponse as dict; unset changelog/error keys are omitted

    Raises:
        JobNotFoundError: If the job doesn't exist
    """
    record = await orchestrator.get_status(job_id)
    return JobStatusResponse.from_record(record).model_dump(
        mode="json", by_alias=True, exclude_none=True
    )
