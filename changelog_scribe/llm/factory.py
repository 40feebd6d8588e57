# changelog_scribe/llm/factory.py
"""Factory for creating the configured LLM client."""

from changelog_scribe.config.schema import ScribeConfig

from .client import OllamaClient
from .openai_client import OpenAIClient


def create_llm_client(config: ScribeConfig) -> OpenAIClient | OllamaClient:
    """
    Create the appropriate LLM client based on config.provider.

    Args:
        config: Root ScribeConfig

    Returns:
        OpenAIClient for provider="openai", OllamaClient for provider="ollama"
    """
    if config.provider == "ollama":
        return OllamaClient(
            base_url=config.ollama.base_url,
            model=config.ollama.model,
            timeout=config.ollama.timeout,
        )
    return OpenAIClient(
        api_key=config.openai.api_key,
        model=config.openai.model,
        base_url=config.openai.base_url,
        timeout=config.openai.timeout,
    )
