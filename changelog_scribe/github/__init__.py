# changelog_scribe/github/__init__.py
"""GitHub commit source with Link-header pagination and retry logic."""

from .client import GitHubCommitSource
from .pagination import has_more, last_page_number, total_pages
from .retry import github_retry

__all__ = [
    "GitHubCommitSource",
    "last_page_number",
    "total_pages",
    "has_more",
    "github_retry",
]
