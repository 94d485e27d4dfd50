"""Unit tests for the completion provider base class and mock provider."""

import pytest

from parley.conversation.models import Message, Role
from parley.errors import CompletionError, CompletionFailureReason
from parley.providers.completion.base import CompletionProvider, CompletionResult
from parley.providers.completion.mock import MockCompletionProvider


@pytest.fixture
def history() -> list[Message]:
    return [
        Message(role=Role.SYSTEM, content="Be helpful."),
        Message(role=Role.USER, content="Hi"),
    ]


class StaticProvider(CompletionProvider):
    """Provider returning a fixed result, for exercising the base class."""

    def __init__(self, content: str) -> None:
        super().__init__()
        self._content = content

    @property
    def provider_name(self) -> str:
        return "static"

    @property
    def model(self) -> str:
        return "static-model"

    async def _generate(self, history: list[Message]) -> CompletionResult:
        return CompletionResult(content=self._content, model=self.model)


class TestHistoryChecks:
    async def test_empty_history_rejected(self) -> None:
        with pytest.raises(CompletionError) as exc_info:
            await MockCompletionProvider().complete([])
        assert exc_info.value.reason == CompletionFailureReason.INVALID_HISTORY

    async def test_history_without_user_message_rejected(self) -> None:
        provider = MockCompletionProvider()
        with pytest.raises(CompletionError) as exc_info:
            await provider.complete([Message(role=Role.SYSTEM, content="p")])

        assert exc_info.value.reason == CompletionFailureReason.INVALID_HISTORY
        assert provider.call_history == []

    async def test_alternation_not_enforced(self) -> None:
        provider = MockCompletionProvider()
        history = [
            Message(role=Role.SYSTEM, content="p"),
            Message(role=Role.USER, content="one"),
            Message(role=Role.USER, content="two"),
        ]
        assert await provider.complete(history) == "Mock response"


class TestContent:
    async def test_reply_is_stripped(self, history: list[Message]) -> None:
        assert await StaticProvider("  Hello!\n").complete(history) == "Hello!"

    @pytest.mark.parametrize("content", ["", "   \n"])
    async def test_empty_content_is_failure(
        self, history: list[Message], content: str
    ) -> None:
        with pytest.raises(CompletionError) as exc_info:
            await StaticProvider(content).complete(history)
        assert exc_info.value.reason == CompletionFailureReason.EMPTY_CONTENT


class TestFailures:
    async def test_timeout(self, history: list[Message]) -> None:
        provider = MockCompletionProvider(delay=0.5)
        with pytest.raises(CompletionError) as exc_info:
            await provider.complete(history, timeout=0.01)
        assert exc_info.value.reason == CompletionFailureReason.TIMEOUT

    async def test_unclassified_error_is_unavailable(self, history: list[Message]) -> None:
        provider = MockCompletionProvider()
        provider.fail_with(ConnectionError("reset"))

        with pytest.raises(CompletionError) as exc_info:
            await provider.complete(history)

        assert exc_info.value.reason == CompletionFailureReason.UNAVAILABLE
        assert isinstance(exc_info.value.__cause__, ConnectionError)

    async def test_classified_error_passes_through(self, history: list[Message]) -> None:
        provider = MockCompletionProvider()
        error = CompletionError("quota", CompletionFailureReason.RATE_LIMITED)
        provider.fail_with(error)

        with pytest.raises(CompletionError) as exc_info:
            await provider.complete(history)
        assert exc_info.value is error

    def test_error_string_includes_reason(self) -> None:
        error = CompletionError("took too long", CompletionFailureReason.TIMEOUT)
        assert str(error) == "[timeout] took too long"
        assert error.status_code == 500


class TestMockProvider:
    async def test_default_response(self, history: list[Message]) -> None:
        assert await MockCompletionProvider().complete(history) == "Mock response"

    async def test_trigger_matches_last_user_message(self) -> None:
        provider = MockCompletionProvider(responses={"Hi": "Hello there"})
        history = [
            Message(role=Role.SYSTEM, content="p"),
            Message(role=Role.USER, content="Hi"),
            Message(role=Role.ASSISTANT, content="Hello there"),
            Message(role=Role.USER, content="Bye"),
        ]
        assert await provider.complete(history) == "Mock response"

        provider.set_response("Bye", "Goodbye")
        assert await provider.complete(history) == "Goodbye"

    async def test_call_history_snapshots(self, history: list[Message]) -> None:
        provider = MockCompletionProvider()
        await provider.complete(history)
        history.append(Message(role=Role.ASSISTANT, content="later"))

        assert len(provider.call_history) == 1
        assert len(provider.call_history[0]) == 2

        provider.clear_history()
        assert provider.call_history == []

    def test_identity(self) -> None:
        provider = MockCompletionProvider(default_model="tiny")
        assert provider.provider_name == "mock"
        assert provider.model == "tiny"
