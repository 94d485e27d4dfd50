"""Completion provider interface and data models.

A completion provider sends an ordered, role-tagged history to a
text-generation backend and returns the generated reply. Concrete
providers implement ``_generate``; ``complete`` adds structural checks,
the optional timeout, failure classification and reporting around it.
"""

import asyncio
import time
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, Field

from parley.conversation.models import Message, Role
from parley.errors import CompletionError, CompletionFailureReason
from parley.observability import NullReporter, Reporter
from parley.observability.metrics import COMPLETION_FAILURES, COMPLETION_LATENCY


class TokenUsage(BaseModel):
    """Token usage statistics."""

    prompt_tokens: int = Field(..., description="Tokens in prompt")
    completion_tokens: int = Field(..., description="Tokens in completion")
    total_tokens: int = Field(..., description="Total tokens used")


class CompletionResult(BaseModel):
    """Raw result of a single backend call."""

    content: str = Field(..., description="Generated text")
    model: str = Field(..., description="Model used")
    finish_reason: str | None = Field(
        default=None, description="Why generation stopped"
    )
    usage: TokenUsage | None = Field(default=None, description="Token usage stats")
    metadata: dict[str, Any] = Field(
        default_factory=dict, description="Provider-specific metadata"
    )


class CompletionProvider(ABC):
    """Single-call adapter to a text-generation backend.

    No caching, batching or retries: one backend call per ``complete``.
    """

    def __init__(self, reporter: Reporter | None = None) -> None:
        self._reporter = reporter or NullReporter()

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name."""
        pass

    @property
    @abstractmethod
    def model(self) -> str:
        """Return the model used for completions."""
        pass

    async def complete(
        self,
        history: Sequence[Message],
        *,
        timeout: float | None = None,
    ) -> str:
        """Generate the next assistant reply for a history.

        Args:
            history: Ordered messages, preamble first
            timeout: Upper bound on the backend call in seconds

        Returns:
            Generated reply text, stripped of surrounding whitespace

        Raises:
            CompletionError: On invalid history, backend failure, timeout
                or empty content
        """
        self._check_history(history)

        with self._reporter.operation(
            "completion",
            provider=self.provider_name,
            model=self.model,
            message_count=len(history),
        ) as op:
            start = time.perf_counter()
            try:
                result = await asyncio.wait_for(
                    self._generate(list(history)), timeout=timeout
                )
            except TimeoutError as e:
                raise self._failure(
                    f"Completion timed out after {timeout}s",
                    CompletionFailureReason.TIMEOUT,
                ) from e
            except CompletionError as e:
                COMPLETION_FAILURES.labels(
                    provider=self.provider_name, reason=e.reason.value
                ).inc()
                raise
            except Exception as e:
                raise self._failure(
                    f"Completion provider failed: {e}",
                    CompletionFailureReason.UNAVAILABLE,
                ) from e
            finally:
                COMPLETION_LATENCY.labels(
                    provider=self.provider_name, model=self.model
                ).observe(time.perf_counter() - start)

            content = result.content.strip()
            if not content:
                raise self._failure(
                    "Completion provider returned empty content",
                    CompletionFailureReason.EMPTY_CONTENT,
                )

            op.annotate(
                finish_reason=result.finish_reason,
                reply_length=len(content),
            )
            if result.usage is not None:
                op.annotate(
                    prompt_tokens=result.usage.prompt_tokens,
                    completion_tokens=result.usage.completion_tokens,
                )
            return content

    async def close(self) -> None:
        """Release client resources. No-op unless the provider holds any."""
        return None

    @abstractmethod
    async def _generate(self, history: list[Message]) -> CompletionResult:
        """Perform the backend call.

        Implementations raise CompletionError with the matching reason for
        failures they can classify.
        """
        pass

    def _failure(self, message: str, reason: CompletionFailureReason) -> CompletionError:
        COMPLETION_FAILURES.labels(provider=self.provider_name, reason=reason.value).inc()
        return CompletionError(message, reason)

    def _check_history(self, history: Sequence[Message]) -> None:
        # Structural checks only; role alternation is not enforced
        if not history:
            raise self._failure(
                "History is empty", CompletionFailureReason.INVALID_HISTORY
            )
        if not any(m.role == Role.USER for m in history):
            raise self._failure(
                "History contains no user message",
                CompletionFailureReason.INVALID_HISTORY,
            )
