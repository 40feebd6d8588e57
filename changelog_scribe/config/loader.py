# changelog_scribe/config/loader.py
"""
Configuration loading with auto-creation of defaults.

Uses platformdirs for cross-platform config directory management. Secrets
and deployment-specific values can be supplied through environment
variables, which take precedence over the YAML file.
"""

import logging
import os
from pathlib import Path

import yaml
from platformdirs import user_config_path

from .schema import ScribeConfig

logger = logging.getLogger(__name__)

APP_NAME = "changelog-scribe"

# env var -> (section, field); first match wins for duplicated targets
ENV_OVERRIDES: list[tuple[str, str, str]] = [
    ("MY_GITHUB_TOKEN", "github", "token"),
    ("GITHUB_TOKEN", "github", "token"),
    ("REPO_OWNER", "github", "owner"),
    ("REPO_NAME", "github", "repo"),
    ("OPENAI_API_KEY", "openai", "api_key"),
    ("FRONTEND_URL", "server", "frontend_url"),
    ("PORT", "server", "port"),
]


def get_config_dir() -> Path:
    """Get the config directory, creating it if needed."""
    return user_config_path(APP_NAME, ensure_exists=True)


def get_config_path() -> Path:
    """Get path to config file (CHANGELOG_SCRIBE_CONFIG overrides the default)."""
    explicit = os.environ.get("CHANGELOG_SCRIBE_CONFIG")
    if explicit:
        return Path(explicit)
    return get_config_dir() / "config.yaml"


def apply_env_overrides(data: dict, environ: dict[str, str] | None = None) -> dict:
    """
    Overlay environment variables onto raw config data.

    Args:
        data: Raw config dict (as loaded from YAML)
        environ: Environment mapping (defaults to os.environ)

    Returns:
        The same dict, updated in place
    """
    environ = os.environ if environ is None else environ
    applied: set[tuple[str, str]] = set()

    for env_name, section, field in ENV_OVERRIDES:
        value = environ.get(env_name)
        if not value or (section, field) in applied:
            continue
        # A YAML section with every key commented out loads as None
        section_data = data.get(section) or {}
        section_data[field] = value
        data[section] = section_data
        applied.add((section, field))
        logger.debug(f"Config {section}.{field} overridden by ${env_name}")

    return data


def load_config() -> ScribeConfig:
    """
    Load configuration from YAML file plus environment overrides.

    If config file doesn't exist, creates it with defaults.
    Returns validated Pydantic model.
    """
    config_path = get_config_path()

    if not config_path.exists():
        default_config = ScribeConfig()
        config_dict = default_config.model_dump(mode="json")

        config_path.parent.mkdir(parents=True, exist_ok=True)
        with config_path.open("w") as f:
            yaml.safe_dump(config_dict, f, default_flow_style=False, sort_keys=False)

        logger.info(f"Created default config at {config_path}")
        config_data: dict = {}
    else:
        with config_path.open("r") as f:
            config_data = yaml.safe_load(f) or {}
        # Bare section headers ("github:") load as None; fall back to defaults
        config_data = {key: value for key, value in config_data.items() if value is not None}
        logger.info(f"Loaded config from {config_path}")

    config = ScribeConfig(**apply_env_overrides(config_data))

    if not config.github.owner or not config.github.repo:
        logger.warning("GitHub repository not configured (set REPO_OWNER and REPO_NAME)")

    return config


def resolve_db_path(config: ScribeConfig) -> Path:
    """Return the changelog database path, defaulting to the config dir."""
    if config.storage.db_path:
        return Path(config.storage.db_path)
    return get_config_dir() / "changelogs.db"
