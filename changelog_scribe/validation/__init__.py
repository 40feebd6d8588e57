# changelog_scribe/validation/__init__.py
"""Input parsing and validation helpers."""

from .sanitize import normalize_timestamp, parse_timestamp, to_github_iso

__all__ = ["parse_timestamp", "normalize_timestamp", "to_github_iso"]
