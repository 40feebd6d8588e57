# changelog_scribe/config/__init__.py
"""Configuration system for changelog-scribe."""

from .loader import get_config_path, load_config, resolve_db_path
from .schema import (
    GitHubConfig,
    JobsConfig,
    OllamaConfig,
    OpenAIConfig,
    ScribeConfig,
    ServerConfig,
    StorageConfig,
)

__all__ = [
    "ScribeConfig",
    "GitHubConfig",
    "OpenAIConfig",
    "OllamaConfig",
    "StorageConfig",
    "JobsConfig",
    "ServerConfig",
    "load_config",
    "get_config_path",
    "resolve_db_path",
]
