# changelog_scribe/llm/client.py
"""Ollama client for local changelog generation."""

import logging

import httpx
from ollama import AsyncClient

from changelog_scribe.errors import SummarizerError

from .retry import ollama_retry

logger = logging.getLogger(__name__)


class OllamaClient:
    """Async Ollama client using JSON-constrained output."""

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        model: str = "qwen2.5:14b-instruct",
        timeout: float = 300.0,
    ):
        """
        Initialize Ollama client.

        Args:
            base_url: Ollama API base URL (e.g., "http://localhost:11434")
            model: Model name
            timeout: Request timeout in seconds (generous for model loading)
        """
        self.base_url = base_url
        self.model = model
        self.client = AsyncClient(host=base_url, timeout=httpx.Timeout(timeout))

    async def health_check(self) -> bool:
        """
        Check Ollama server health.

        Returns:
            True if the server answers a model listing, False otherwise.
            Missing models are pulled on demand, so they don't fail the check.
        """
        try:
            await self.client.list()
            return True
        except Exception as e:
            logger.error(f"Ollama health check failed: {e}")
            return False

    @ollama_retry
    async def generate_json(self, messages: list[dict]) -> str:
        """
        Generate a JSON response (non-streaming, ``format="json"``).

        Args:
            messages: Chat messages

        Returns:
            Raw response text

        Raises:
            ResponseError: On API errors (retry decorator handles transient errors)
            SummarizerError: If the response has no content
        """
        logger.info(f"Ollama.generate_json: model={self.model}, messages={len(messages)}")

        response = await self.client.chat(
            model=self.model, messages=messages, format="json", stream=False
        )
        content = response.message.content if response.message else None
        if not content:
            raise SummarizerError("Ollama returned an empty response")

        logger.info(f"Ollama.generate_json: {len(content)} chars")
        return content

    async def close(self) -> None:
        """Nothing to release; the ollama client manages its own connections."""
