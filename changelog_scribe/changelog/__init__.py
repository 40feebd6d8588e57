# changelog_scribe/changelog/__init__.py
"""Changelog assembly: prompt construction, draft parsing, record assembly."""

from .assembler import (
    assemble_record,
    completed_changelog,
    draft_to_sections,
    most_recent_commit,
)
from .parsing import extract_json, parse_draft
from .prompts import (
    PATCH_PREVIEW_LINES,
    build_changelog_prompt,
    build_messages,
    patch_preview,
    render_commit,
)
from .summarizer import ChangelogSummarizer

__all__ = [
    "ChangelogSummarizer",
    "assemble_record",
    "completed_changelog",
    "draft_to_sections",
    "most_recent_commit",
    "extract_json",
    "parse_draft",
    "PATCH_PREVIEW_LINES",
    "build_changelog_prompt",
    "build_messages",
    "patch_preview",
    "render_commit",
]
