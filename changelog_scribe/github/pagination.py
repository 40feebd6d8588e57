# changelog_scribe/github/pagination.py
"""
Commit count and page arithmetic derived from GitHub Link headers.

GitHub does not report a total count for commit listings. Probing with
``per_page=1`` makes the ``rel="last"`` page number equal to the number of
commits in range. Without a ``last`` link (zero or one page of results) the
total is assumed to be 1.
"""

import logging
import math

import httpx

logger = logging.getLogger(__name__)


def last_page_number(response: httpx.Response, default: int = 1) -> int:
    """
    Read the page number of the ``rel="last"`` link.

    Args:
        response: GitHub response carrying a Link header
        default: Value when no usable ``last`` link exists

    Returns:
        Highest referenced page number, or ``default``
    """
    last = response.links.get("last")
    if not last or not last.get("url"):
        return default

    page = httpx.URL(last["url"]).params.get("page")
    try:
        value = int(page) if page is not None else 0
    except ValueError:
        value = 0

    if value < 1:
        logger.warning(f"Unusable rel=last link in GitHub response: {last['url']}")
        return default
    return value


def total_pages(total_items: int, page_size: int) -> int:
    """ceil(total_items / page_size)."""
    if page_size < 1:
        raise ValueError("page_size must be positive")
    return math.ceil(total_items / page_size)


def has_more(page: int, page_size: int, total_items: int) -> bool:
    """True if items exist beyond zero-based ``page`` of size ``page_size``."""
    return (page + 1) * page_size < total_items
