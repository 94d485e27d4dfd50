"""OpenAI chat completion provider."""

import os

from openai import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AsyncOpenAI,
    AuthenticationError,
    RateLimitError,
)

from parley.conversation.models import Message
from parley.errors import CompletionError, CompletionFailureReason
from parley.observability import Reporter
from parley.observability.logging import get_logger
from parley.observability.metrics import LLM_TOKENS
from parley.providers.completion.base import (
    CompletionProvider,
    CompletionResult,
    TokenUsage,
)

logger = get_logger(__name__)


class OpenAICompletionProvider(CompletionProvider):
    """Completion provider using the OpenAI chat completions API.

    The client is created with retries disabled so each turn makes exactly
    one request.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gpt-4",
        base_url: str | None = None,
        max_tokens: int = 500,
        temperature: float = 0.7,
        timeout: float = 60.0,
        client: AsyncOpenAI | None = None,
        reporter: Reporter | None = None,
    ):
        """Initialize OpenAI completion provider.

        Args:
            api_key: OpenAI API key (defaults to OPENAI_API_KEY env var)
            model: Chat model identifier
            base_url: Custom API base URL (OpenAI-compatible gateways)
            max_tokens: Maximum tokens per reply
            temperature: Sampling temperature
            timeout: HTTP request timeout in seconds
            client: Pre-built client (tests, shared connection pools)
            reporter: Observability reporter
        """
        super().__init__(reporter)
        self._model = model
        self._max_tokens = max_tokens
        self._temperature = temperature

        if client is not None:
            self._client = client
        else:
            api_key = api_key or os.environ.get("OPENAI_API_KEY")
            if not api_key:
                raise ValueError("OPENAI_API_KEY environment variable not set")
            self._client = AsyncOpenAI(
                api_key=api_key,
                base_url=base_url,
                timeout=timeout,
                max_retries=0,
            )

    @property
    def provider_name(self) -> str:
        return "openai"

    @property
    def model(self) -> str:
        return self._model

    async def close(self) -> None:
        await self._client.close()

    async def _generate(self, history: list[Message]) -> CompletionResult:
        logger.debug(
            "openai_completion_request",
            model=self._model,
            message_count=len(history),
        )

        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": m.role.value, "content": m.content} for m in history
                ],
                max_tokens=self._max_tokens,
                temperature=self._temperature,
            )
        except APITimeoutError as e:
            raise CompletionError(
                f"OpenAI request timed out: {e}", CompletionFailureReason.TIMEOUT
            ) from e
        except RateLimitError as e:
            raise CompletionError(
                f"OpenAI rate limit or quota exceeded: {e}",
                CompletionFailureReason.RATE_LIMITED,
            ) from e
        except AuthenticationError as e:
            raise CompletionError(
                f"OpenAI rejected credentials: {e}",
                CompletionFailureReason.AUTHENTICATION,
            ) from e
        except APIConnectionError as e:
            raise CompletionError(
                f"OpenAI unreachable: {e}", CompletionFailureReason.UNAVAILABLE
            ) from e
        except APIStatusError as e:
            raise CompletionError(
                f"OpenAI returned status {e.status_code}: {e}",
                CompletionFailureReason.UNAVAILABLE,
            ) from e

        if not response.choices:
            raise CompletionError(
                "OpenAI response contained no choices",
                CompletionFailureReason.MALFORMED_RESPONSE,
            )

        choice = response.choices[0]
        usage = None
        if response.usage is not None:
            usage = TokenUsage(
                prompt_tokens=response.usage.prompt_tokens,
                completion_tokens=response.usage.completion_tokens,
                total_tokens=response.usage.total_tokens,
            )
            LLM_TOKENS.labels(
                provider="openai", model=self._model, direction="prompt"
            ).inc(usage.prompt_tokens)
            LLM_TOKENS.labels(
                provider="openai", model=self._model, direction="completion"
            ).inc(usage.completion_tokens)

        return CompletionResult(
            content=choice.message.content or "",
            model=response.model or self._model,
            finish_reason=choice.finish_reason,
            usage=usage,
            metadata={"response_id": response.id},
        )
