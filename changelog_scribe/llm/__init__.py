# changelog_scribe/llm/__init__.py
"""LLM integration: OpenAI and Ollama clients behind a common generate_json() call."""

from .client import OllamaClient
from .factory import create_llm_client
from .openai_client import OpenAIClient
from .retry import ollama_retry

__all__ = [
    "OpenAIClient",
    "OllamaClient",
    "create_llm_client",
    "ollama_retry",
]
