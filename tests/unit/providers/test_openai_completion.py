"""Unit tests for OpenAICompletionProvider with a stubbed client."""

from unittest.mock import AsyncMock, MagicMock

import httpx
import openai
import pytest

from parley.conversation.models import Message, Role
from parley.errors import CompletionError, CompletionFailureReason
from parley.providers.completion.openai import OpenAICompletionProvider

_REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def _response(content: str | None = "Hello!", with_choice: bool = True) -> MagicMock:
    response = MagicMock()
    response.id = "chatcmpl-1"
    response.model = "gpt-4-0613"
    response.choices = (
        [MagicMock(message=MagicMock(content=content), finish_reason="stop")]
        if with_choice
        else []
    )
    response.usage = MagicMock(prompt_tokens=12, completion_tokens=3, total_tokens=15)
    return response


@pytest.fixture
def client() -> MagicMock:
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=_response())
    client.close = AsyncMock()
    return client


@pytest.fixture
def provider(client: MagicMock) -> OpenAICompletionProvider:
    return OpenAICompletionProvider(
        model="gpt-4", max_tokens=200, temperature=0.2, client=client
    )


@pytest.fixture
def history() -> list[Message]:
    return [
        Message(role=Role.SYSTEM, content="Be helpful."),
        Message(role=Role.USER, content="Hi"),
    ]


class TestConstruction:
    def test_requires_api_key(self, monkeypatch) -> None:
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        with pytest.raises(ValueError):
            OpenAICompletionProvider()

    def test_client_disables_retries(self) -> None:
        provider = OpenAICompletionProvider(api_key="sk-test", timeout=5.0)
        assert provider._client.max_retries == 0
        assert provider.provider_name == "openai"


class TestComplete:
    async def test_sends_history_and_parameters(
        self,
        provider: OpenAICompletionProvider,
        client: MagicMock,
        history: list[Message],
    ) -> None:
        reply = await provider.complete(history)

        assert reply == "Hello!"
        client.chat.completions.create.assert_awaited_once_with(
            model="gpt-4",
            messages=[
                {"role": "system", "content": "Be helpful."},
                {"role": "user", "content": "Hi"},
            ],
            max_tokens=200,
            temperature=0.2,
        )

    async def test_no_choices_is_malformed(
        self,
        provider: OpenAICompletionProvider,
        client: MagicMock,
        history: list[Message],
    ) -> None:
        client.chat.completions.create.return_value = _response(with_choice=False)

        with pytest.raises(CompletionError) as exc_info:
            await provider.complete(history)
        assert exc_info.value.reason == CompletionFailureReason.MALFORMED_RESPONSE

    async def test_null_content_is_empty(
        self,
        provider: OpenAICompletionProvider,
        client: MagicMock,
        history: list[Message],
    ) -> None:
        client.chat.completions.create.return_value = _response(content=None)

        with pytest.raises(CompletionError) as exc_info:
            await provider.complete(history)
        assert exc_info.value.reason == CompletionFailureReason.EMPTY_CONTENT

    async def test_close_closes_client(
        self, provider: OpenAICompletionProvider, client: MagicMock
    ) -> None:
        await provider.close()
        client.close.assert_awaited_once()


class TestErrorMapping:
    @pytest.mark.parametrize(
        ("error", "reason"),
        [
            (openai.APITimeoutError(request=_REQUEST), CompletionFailureReason.TIMEOUT),
            (
                openai.RateLimitError(
                    "quota",
                    response=httpx.Response(429, request=_REQUEST),
                    body=None,
                ),
                CompletionFailureReason.RATE_LIMITED,
            ),
            (
                openai.AuthenticationError(
                    "bad key",
                    response=httpx.Response(401, request=_REQUEST),
                    body=None,
                ),
                CompletionFailureReason.AUTHENTICATION,
            ),
            (
                openai.APIConnectionError(request=_REQUEST),
                CompletionFailureReason.UNAVAILABLE,
            ),
            (
                openai.InternalServerError(
                    "oops",
                    response=httpx.Response(503, request=_REQUEST),
                    body=None,
                ),
                CompletionFailureReason.UNAVAILABLE,
            ),
        ],
    )
    async def test_sdk_errors_map_to_reasons(
        self,
        provider: OpenAICompletionProvider,
        client: MagicMock,
        history: list[Message],
        error: Exception,
        reason: CompletionFailureReason,
    ) -> None:
        client.chat.completions.create.side_effect = error

        with pytest.raises(CompletionError) as exc_info:
            await provider.complete(history)

        assert exc_info.value.reason == reason
        assert exc_info.value.__cause__ is error
