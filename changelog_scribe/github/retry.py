# changelog_scribe/github/retry.py
"""Retry logic for GitHub API calls with exponential backoff."""

import logging

import httpx
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from changelog_scribe.errors import CommitSourceError

logger = logging.getLogger(__name__)

RETRYABLE_STATUSES = {502, 503, 504}


def is_retryable(exception: BaseException) -> bool:
    """
    Returns True if the exception should be retried.

    Retryable conditions:
    - Transport failures (connection refused, reset, timeouts)
    - CommitSourceError with status 502/503/504 (GitHub edge hiccups)

    Rate limiting (403/429) is not retried: the reset window is usually
    minutes away and the job should fail fast instead.
    """
    if isinstance(exception, httpx.TransportError):
        return True

    if isinstance(exception, CommitSourceError):
        if isinstance(exception.__cause__, httpx.TransportError):
            return True
        return exception.status_code in RETRYABLE_STATUSES

    return False


# Tenacity retry decorator for single GitHub HTTP requests
github_retry = retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception(is_retryable),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)
