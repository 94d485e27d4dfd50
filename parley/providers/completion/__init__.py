"""Completion providers for text generation.

The primary interface is CompletionProvider.complete(history), which
returns the next assistant reply or raises CompletionError with a reason.

Providers:
- openai -> OpenAICompletionProvider (chat completions API)
- mock -> MockCompletionProvider (tests and local development)
"""

from parley.config.models.providers import CompletionProviderConfig
from parley.observability import Reporter
from parley.observability.logging import get_logger
from parley.providers.completion.base import (
    CompletionProvider,
    CompletionResult,
    TokenUsage,
)
from parley.providers.completion.mock import MockCompletionProvider
from parley.providers.completion.openai import OpenAICompletionProvider

logger = get_logger(__name__)


def create_completion_provider(
    config: CompletionProviderConfig,
    reporter: Reporter | None = None,
) -> CompletionProvider:
    """Build the completion provider described by configuration.

    Args:
        config: Completion provider section of the settings
        reporter: Observability reporter handed to the provider

    Raises:
        ValueError: If the OpenAI provider is selected without an API key
    """
    if config.provider == "mock":
        logger.info("completion_provider_initialized", provider="mock")
        return MockCompletionProvider(reporter=reporter)

    provider = OpenAICompletionProvider(
        api_key=config.resolved_api_key(),
        model=config.model,
        base_url=config.base_url,
        max_tokens=config.max_tokens,
        temperature=config.temperature,
        timeout=config.timeout,
        reporter=reporter,
    )
    logger.info(
        "completion_provider_initialized",
        provider="openai",
        model=config.model,
    )
    return provider


__all__ = [
    "CompletionProvider",
    "CompletionResult",
    "MockCompletionProvider",
    "OpenAICompletionProvider",
    "TokenUsage",
    "create_completion_provider",
]
