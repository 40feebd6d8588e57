# changelog_scribe/llm/retry.py
"""Retry logic for Ollama API calls with exponential backoff."""

import logging

from ollama import ResponseError
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)


def is_retryable(exception: BaseException) -> bool:
    """
    Returns True if the exception should be retried.

    Retryable conditions:
    - ConnectionError (server unavailable)
    - ResponseError with status in (408, 429, 502, 503, 504)
    """
    if isinstance(exception, ConnectionError):
        return True

    if isinstance(exception, ResponseError):
        return exception.status_code in {408, 429, 502, 503, 504}

    return False


# Tenacity retry decorator for Ollama API calls
ollama_retry = retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=30),
    retry=retry_if_exception(is_retryable),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)
