# changelog_scribe/background/lifecycle.py
"""
Application lifecycle management.

Builds the collaborators (store, GitHub client, LLM client, orchestrator)
from config, and coordinates startup and graceful shutdown.
"""

import logging

from changelog_scribe.background.orchestrator import ChangelogOrchestrator
from changelog_scribe.changelog.summarizer import ChangelogSummarizer
from changelog_scribe.config.loader import resolve_db_path
from changelog_scribe.config.schema import ScribeConfig
from changelog_scribe.github.client import GitHubCommitSource
from changelog_scribe.llm.client import OllamaClient
from changelog_scribe.llm.factory import create_llm_client
from changelog_scribe.llm.openai_client import OpenAIClient
from changelog_scribe.models.jobs import InMemoryJobStore
from changelog_scribe.models.memory_store import InMemoryChangelogStore
from changelog_scribe.models.sqlite_store import SQLiteChangelogStore
from changelog_scribe.models.store import ChangelogStore

logger = logging.getLogger(__name__)


class AppLifecycle:
    """
    Application lifecycle coordinator.

    Manages:
        - Changelog store initialization
        - GitHub and LLM client lifetimes
        - Draining running jobs on shutdown
    """

    def __init__(
        self,
        config: ScribeConfig,
        store: ChangelogStore | None = None,
        commit_source: GitHubCommitSource | None = None,
        llm_client: OpenAIClient | OllamaClient | None = None,
    ) -> None:
        """
        Initialize lifecycle manager.

        Args:
            config: Root ScribeConfig
            store: Changelog store override (defaults to SQLite at the configured path)
            commit_source: GitHub client override
            llm_client: LLM client override
        """
        self._config = config
        self._store = store or SQLiteChangelogStore(str(resolve_db_path(config)))
        self._commit_source = commit_source or GitHubCommitSource.from_config(config.github)
        self._llm_client = llm_client or create_llm_client(config)

        self._orchestrator = ChangelogOrchestrator(
            commit_source=self._commit_source,
            summarizer=ChangelogSummarizer(self._commit_source, self._llm_client),
            store=self._store,
            jobs=InMemoryJobStore(retention_seconds=config.jobs.retention_seconds),
        )
        self._started = False
        self._llm_available: bool | None = None
        logger.info(
            f"Created AppLifecycle (repo={config.github.owner}/{config.github.repo}, "
            f"provider={config.provider}, store={type(self._store).__name__})"
        )

    @classmethod
    def in_memory(cls, config: ScribeConfig, **overrides) -> "AppLifecycle":
        """Lifecycle backed by a non-persistent changelog store."""
        return cls(config, store=InMemoryChangelogStore(), **overrides)

    @property
    def config(self) -> ScribeConfig:
        return self._config

    @property
    def store(self) -> ChangelogStore:
        return self._store

    @property
    def commit_source(self) -> GitHubCommitSource:
        return self._commit_source

    @property
    def llm_client(self) -> OpenAIClient | OllamaClient:
        return self._llm_client

    @property
    def orchestrator(self) -> ChangelogOrchestrator:
        return self._orchestrator

    @property
    def llm_available(self) -> bool | None:
        """Result of the startup LLM health check (None before startup)."""
        return self._llm_available

    async def startup(self) -> None:
        """
        Start the application.

        Steps:
            1. Initialize the changelog store
            2. Health-check the LLM client (an unreachable LLM is logged, not fatal)
        """
        if self._started:
            logger.warning("Lifecycle already started")
            return

        logger.info("Starting application lifecycle...")
        await self._store.initialize()

        self._llm_available = await self._llm_client.health_check()
        if not self._llm_available:
            logger.warning(
                f"LLM provider '{self._config.provider}' is not reachable; "
                "changelog jobs will fail until it is"
            )

        self._started = True
        logger.info("Application lifecycle started")

    async def shutdown(self) -> None:
        """
        Shut down gracefully.

        Steps:
            1. Give running jobs the configured grace period, cancel the rest
            2. Close HTTP clients
            3. Close the store (WAL checkpoint)
        """
        logger.info("Shutting down application lifecycle...")

        await self._orchestrator.drain(self._config.jobs.shutdown_grace_seconds)
        await self._commit_source.close()
        await self._llm_client.close()
        await self._store.close()

        self._started = False
        logger.info("Application lifecycle shutdown complete")
