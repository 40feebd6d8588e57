# changelog_scribe/__init__.py
"""
changelog-scribe: AI-written, user-facing changelogs from GitHub commit history.
"""

__version__ = "0.1.0"
