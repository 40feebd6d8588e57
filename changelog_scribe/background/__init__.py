# changelog_scribe/background/__init__.py
"""
Background changelog generation.

Exports:
    - ChangelogOrchestrator: Job submission, status, and background tasks
    - AppLifecycle: Collaborator wiring, startup and shutdown coordination
"""

from changelog_scribe.background.lifecycle import AppLifecycle
from changelog_scribe.background.orchestrator import GENERIC_FAILURE, ChangelogOrchestrator

__all__ = ["ChangelogOrchestrator", "AppLifecycle", "GENERIC_FAILURE"]
