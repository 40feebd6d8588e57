# changelog_scribe/changelog/summarizer.py
"""Commit set -> ChangelogDraft via the configured LLM."""

import logging
from typing import TYPE_CHECKING

from changelog_scribe.errors import EmptyCommitRangeError
from changelog_scribe.models.changelog import ChangelogDraft, CommitSummary

from .parsing import parse_draft
from .prompts import build_messages

if TYPE_CHECKING:
    from changelog_scribe.github.client import GitHubCommitSource
    from changelog_scribe.llm.client import OllamaClient
    from changelog_scribe.llm.openai_client import OpenAIClient

logger = logging.getLogger(__name__)


class ChangelogSummarizer:
    """Fetches commit details, builds the prompt, and parses the LLM's JSON."""

    def __init__(
        self,
        commit_source: "GitHubCommitSource",
        llm_client: "OpenAIClient | OllamaClient",
    ) -> None:
        self._commit_source = commit_source
        self._llm_client = llm_client

    async def summarize(self, commits: list[CommitSummary]) -> ChangelogDraft:
        """
        Summarize commits into a categorized changelog draft.

        Args:
            commits: Commits in the requested range

        Returns:
            Validated ChangelogDraft

        Raises:
            EmptyCommitRangeError: If commits is empty
            CommitSourceError: If a commit detail fetch fails
            SummarizerError: If the LLM output is empty or malformed
        """
        if not commits:
            raise EmptyCommitRangeError("No commits found in the requested date range")

        details = await self._commit_source.get_commit_details(commits)
        messages = build_messages(details)
        logger.info(
            f"Summarizing {len(details)} commits "
            f"(prompt {len(messages[-1]['content'])} chars)"
        )

        raw = await self._llm_client.generate_json(messages)
        return parse_draft(raw)
