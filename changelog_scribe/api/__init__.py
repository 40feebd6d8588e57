# changelog_scribe/api/__init__.py
"""Endpoint implementations shared by the HTTP routes and the CLI."""

from .changelogs import check_status, create_changelog, list_changelogs
from .commits import list_commits

__all__ = ["list_commits", "list_changelogs", "create_changelog", "check_status"]
