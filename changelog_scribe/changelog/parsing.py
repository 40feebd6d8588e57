# changelog_scribe/changelog/parsing.py
"""Parse LLM output into a validated ChangelogDraft."""

import json
import logging
import re
from typing import Any

from pydantic import ValidationError

from changelog_scribe.errors import SummarizerError
from changelog_scribe.models.changelog import ChangelogDraft

logger = logging.getLogger(__name__)


def extract_json(raw_output: str) -> Any:
    """
    Extract JSON from LLM output, handling common formatting variations.

    Tries multiple extraction strategies:
    1. Direct JSON parse (if output is pure JSON)
    2. Code fence extraction (```json ... ```)
    3. Outermost {...} block

    Raises:
        ValueError: If no valid JSON found
    """
    try:
        return json.loads(raw_output.strip())
    except json.JSONDecodeError:
        pass

    fence_match = re.search(
        r"```(?:json)?\s*\n(.*?)\n```", raw_output, re.DOTALL | re.IGNORECASE
    )
    if fence_match:
        try:
            return json.loads(fence_match.group(1).strip())
        except json.JSONDecodeError:
            pass

    object_match = re.search(r"\{.*\}", raw_output, re.DOTALL)
    if object_match:
        try:
            return json.loads(object_match.group(0))
        except json.JSONDecodeError:
            pass

    preview = raw_output[:200].replace("\n", "\\n")
    raise ValueError(
        f"Could not extract valid JSON from output ({len(raw_output)} chars): {preview}"
    )


def parse_draft(raw_output: str) -> ChangelogDraft:
    """
    Parse and validate the summarizer response.

    Args:
        raw_output: Raw LLM text

    Returns:
        ChangelogDraft

    Raises:
        SummarizerError: If the text is not JSON or doesn't match
            ``{changes: [{category, items: [{description, commitLink}]}]}``
    """
    try:
        data = extract_json(raw_output)
    except ValueError as e:
        raise SummarizerError(str(e)) from e

    try:
        draft = ChangelogDraft.model_validate(data)
    except ValidationError as e:
        raise SummarizerError(
            f"Changelog response has the wrong shape ({e.error_count()} error(s))"
        ) from e

    item_count = sum(len(section.items) for section in draft.changes)
    logger.info(f"Parsed changelog draft: {len(draft.changes)} categories, {item_count} items")
    return draft
