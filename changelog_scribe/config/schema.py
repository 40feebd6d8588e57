# changelog_scribe/config/schema.py
"""
Pydantic configuration models for changelog-scribe.

All models use extra="ignore" to allow unknown YAML keys without crashing.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class GitHubConfig(BaseModel):
    """GitHub repository and API configuration."""

    model_config = ConfigDict(extra="ignore")

    owner: str = Field(default="", description="Repository owner (user or organization)")
    repo: str = Field(default="", description="Repository name")
    token: str | None = Field(
        default=None, description="Personal access token (None = unauthenticated, low rate limit)"
    )
    base_url: str = Field(
        default="https://api.github.com", description="GitHub REST API base URL"
    )
    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")
    max_commits: int = Field(
        default=250,
        ge=1,
        description="Maximum commits fetched for a single changelog generation",
    )
    max_concurrency: int = Field(
        default=5,
        ge=1,
        le=20,
        description="Concurrent commit-detail requests per job",
    )


class OpenAIConfig(BaseModel):
    """OpenAI chat completion configuration."""

    model_config = ConfigDict(extra="ignore")

    api_key: str | None = Field(default=None, description="OpenAI API key")
    model: str = Field(
        default="gpt-4-1106-preview",
        description="Model used to summarize commits (must support JSON mode)",
    )
    base_url: str | None = Field(
        default=None, description="Override for OpenAI-compatible servers (None = api.openai.com)"
    )
    timeout: float = Field(default=120.0, gt=0, description="Request timeout in seconds")


class OllamaConfig(BaseModel):
    """Ollama server configuration."""

    model_config = ConfigDict(extra="ignore")

    base_url: str = Field(
        default="http://localhost:11434", description="Ollama API base URL"
    )
    model: str = Field(default="qwen2.5:14b-instruct", description="Ollama model to use")
    timeout: float = Field(
        default=300.0, gt=0, description="Request timeout in seconds (generous for model loading)"
    )


class StorageConfig(BaseModel):
    """Changelog persistence configuration."""

    model_config = ConfigDict(extra="ignore")

    db_path: str | None = Field(
        default=None,
        description="SQLite database path (None = changelogs.db in the user config dir)",
    )


class JobsConfig(BaseModel):
    """Background job retention and shutdown configuration."""

    model_config = ConfigDict(extra="ignore")

    retention_seconds: int = Field(
        default=3600,
        ge=0,
        description="How long finished jobs stay queryable (0 = keep forever)",
    )
    shutdown_grace_seconds: float = Field(
        default=30.0,
        ge=0,
        description="How long shutdown waits for running jobs before cancelling them",
    )


class ServerConfig(BaseModel):
    """HTTP server configuration."""

    model_config = ConfigDict(extra="ignore")

    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=3001, ge=1, le=65535, description="Listen port")
    frontend_url: str | None = Field(
        default=None, description="Deployed frontend origin allowed by CORS"
    )
    allowed_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        description="Origins allowed by CORS in addition to frontend_url",
    )

    def cors_origins(self) -> list[str]:
        """All origins allowed to call the API with credentials."""
        origins = list(self.allowed_origins)
        if self.frontend_url and self.frontend_url not in origins:
            origins.append(self.frontend_url)
        return origins


class ScribeConfig(BaseModel):
    """Root configuration for changelog-scribe."""

    model_config = ConfigDict(extra="ignore")

    provider: Literal["openai", "ollama"] = Field(
        default="openai", description="LLM provider used to write changelogs"
    )
    github: GitHubConfig = Field(default_factory=GitHubConfig)
    openai: OpenAIConfig = Field(default_factory=OpenAIConfig)
    ollama: OllamaConfig = Field(default_factory=OllamaConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    jobs: JobsConfig = Field(default_factory=JobsConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
