# changelog_scribe/llm/openai_client.py
"""OpenAI chat-completions client used in JSON mode."""

import logging
from typing import TYPE_CHECKING

from changelog_scribe.errors import SummarizerError

if TYPE_CHECKING:
    import openai

logger = logging.getLogger(__name__)


class OpenAIClient:
    """
    Async OpenAI client that asks for a single JSON object per call.

    The SDK client is created lazily so a missing API key fails the job that
    needs it, not application startup.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gpt-4-1106-preview",
        base_url: str | None = None,
        timeout: float = 120.0,
    ):
        """
        Initialize OpenAI client.

        Args:
            api_key: OpenAI API key (None = SDK reads OPENAI_API_KEY)
            model: Chat model with JSON-mode support
            base_url: Optional OpenAI-compatible endpoint
            timeout: Request timeout in seconds
        """
        self.model = model
        self._api_key = api_key
        self._base_url = base_url
        self._timeout = timeout
        self._client: "openai.AsyncOpenAI | None" = None

    @property
    def client(self) -> "openai.AsyncOpenAI":
        """Lazy-loaded AsyncOpenAI client."""
        if self._client is None:
            from openai import AsyncOpenAI

            self._client = AsyncOpenAI(
                api_key=self._api_key, base_url=self._base_url, timeout=self._timeout
            )
        return self._client

    async def health_check(self) -> bool:
        """
        Check that the API is reachable and the model exists.

        Returns:
            True if the model can be retrieved, False otherwise.
        """
        try:
            await self.client.models.retrieve(self.model)
            return True
        except Exception as e:
            logger.error(f"OpenAI health check failed: {e}")
            return False

    async def generate_json(self, messages: list[dict]) -> str:
        """
        Run one chat completion in JSON mode.

        Args:
            messages: Chat messages in format [{"role": "user", "content": "..."}]

        Returns:
            Raw response text (expected to be a JSON object)

        Raises:
            SummarizerError: If the completion has no content
        """
        logger.info(f"OpenAI.generate_json: model={self.model}, messages={len(messages)}")

        response = await self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            response_format={"type": "json_object"},
        )

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise SummarizerError("OpenAI returned an empty completion")

        logger.info(f"OpenAI.generate_json: {len(content)} chars")
        return content

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
