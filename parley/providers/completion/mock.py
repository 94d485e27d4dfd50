"""Mock completion provider for testing."""

import asyncio

from parley.conversation.models import Message, Role
from parley.observability import Reporter
from parley.providers.completion.base import (
    CompletionProvider,
    CompletionResult,
    TokenUsage,
)


class MockCompletionProvider(CompletionProvider):
    """Mock completion provider for testing.

    Returns configurable responses without making actual API calls, and
    can be told to fail or to take a while.
    """

    def __init__(
        self,
        default_response: str = "Mock response",
        default_model: str = "mock-model",
        responses: dict[str, str] | None = None,
        delay: float = 0.0,
        reporter: Reporter | None = None,
    ):
        """Initialize mock provider.

        Args:
            default_response: Response to return when no match found
            default_model: Model name to report
            responses: Dict mapping last user message content to responses
            delay: Seconds to sleep before answering
            reporter: Observability reporter
        """
        super().__init__(reporter)
        self._default_response = default_response
        self._default_model = default_model
        self._responses = responses or {}
        self._delay = delay
        self._injected_failure: Exception | None = None
        self._call_history: list[list[Message]] = []

    @property
    def provider_name(self) -> str:
        return "mock"

    @property
    def model(self) -> str:
        return self._default_model

    @property
    def call_history(self) -> list[list[Message]]:
        """Histories passed to each call, as they were at call time."""
        return self._call_history

    def clear_history(self) -> None:
        self._call_history.clear()

    def set_response(self, trigger: str, response: str) -> None:
        """Set a response for a specific user message content."""
        self._responses[trigger] = response

    def fail_with(self, error: Exception | None) -> None:
        """Raise ``error`` from every following call; None restores success."""
        self._injected_failure = error

    async def _generate(self, history: list[Message]) -> CompletionResult:
        self._call_history.append(list(history))

        if self._delay:
            await asyncio.sleep(self._delay)

        if self._injected_failure is not None:
            raise self._injected_failure

        content = self._default_response
        last_user = next(
            (m.content for m in reversed(history) if m.role == Role.USER), None
        )
        if last_user is not None and last_user in self._responses:
            content = self._responses[last_user]

        prompt_tokens = sum(len(m.content) // 4 for m in history)
        completion_tokens = len(content) // 4
        return CompletionResult(
            content=content,
            model=self._default_model,
            finish_reason="stop",
            usage=TokenUsage(
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                total_tokens=prompt_tokens + completion_tokens,
            ),
        )
