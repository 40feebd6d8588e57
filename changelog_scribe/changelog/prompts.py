# changelog_scribe/changelog/prompts.py
"""
Prompt construction for changelog summarization.

Each commit is rendered as its message, permanent link and a short preview
of every file patch. The instruction block asks for a JSON object shaped
like ChangelogDraft.
"""

from changelog_scribe.models.changelog import CommitDetail, FileChange

PATCH_PREVIEW_LINES = 5
ELLIPSIS = "..."
COMMIT_DELIMITER = "\n---\n"

SYSTEM_PROMPT = (
    "You are a helpful assistant that generates clear, concise changelogs from git commits."
)

INSTRUCTIONS = """Given these detailed git commits, generate a user-friendly changelog.
Group changes into categories like "Features", "Bug Fixes", "Improvements", etc.
Summarize the changes that would be relevant to an end-user in a few (less than 10 TOTAL) bullet points.
Order the changes from first to last in order of importance.

Important guidelines:
- output a maximum of 10 total bullet points
- Focus on changes that affect the user experience directly
- Exclude internal changes like version bumps, refactoring, or test updates
- Use clear, non-technical language
- Highlight new features, improvements, and bug fixes that users will notice
- Mention breaking changes or important updates that require user attention
- Keep descriptions concise but informative, don't just copy and paste the commit message
- Include the relevant commit link with each change

Format the response as JSON with the following structure:
{
    "changes": [
        {
            "category": "string",
            "items": [
                {
                    "description": "string",
                    "commitLink": "string"
                }
            ]
        }
    ]
}"""


def patch_preview(patch: str | None, max_lines: int = PATCH_PREVIEW_LINES) -> str:
    """
    First ``max_lines`` lines of a patch, plus an ellipsis line if truncated.

    Args:
        patch: Unified diff text, or None for binary/rename-only changes
        max_lines: Lines to keep

    Returns:
        Preview text ("" when there is no patch)
    """
    if not patch:
        return ""

    lines = patch.split("\n")
    preview = "\n".join(lines[:max_lines])
    if len(lines) > max_lines:
        preview += "\n" + ELLIPSIS
    return preview


def render_file(file: FileChange) -> str:
    header = f"File: {file.filename}" if file.filename else "File:"
    preview = patch_preview(file.patch)
    if not preview:
        return header
    return f"{header}\nPreview of changes:\n{preview}"


def render_commit(commit: CommitDetail) -> str:
    """Render one commit for the prompt: message, link, file previews."""
    files = "\n\n".join(render_file(f) for f in commit.files)
    return (
        f"Commit Message: {commit.message}\n"
        f"Commit Link: {commit.link}\n"
        f"Stats: +{commit.additions} -{commit.deletions}\n"
        f"Modified Files:\n{files}"
    )


def build_changelog_prompt(commits: list[CommitDetail]) -> str:
    """Instruction block followed by every rendered commit."""
    descriptions = COMMIT_DELIMITER.join(render_commit(c) for c in commits)
    return f"{INSTRUCTIONS}\n\nDetailed Commit Information:\n{descriptions}"


def build_messages(commits: list[CommitDetail]) -> list[dict]:
    """Chat messages for the summarization call."""
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": build_changelog_prompt(commits)},
    ]
