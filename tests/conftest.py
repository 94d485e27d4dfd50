"""Shared test fixtures for the Parley test suite."""

import os
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from parley.api.app import create_app
from parley.api.dependencies import get_session_manager, get_settings, reset_dependencies
from parley.api.middleware.auth import issue_token
from parley.config.models import (
    AuthConfig,
    CompletionProviderConfig,
    ObservabilityConfig,
    ProvidersConfig,
    TracingConfig,
)
from parley.config.settings import Settings
from parley.conversation.manager import SessionManager
from parley.conversation.stores.inmemory import InMemoryConversationStore
from parley.providers.completion.mock import MockCompletionProvider

SYSTEM_PROMPT = "You are a test assistant."
TEST_JWT_SECRET = "test-secret"


@pytest.fixture
def test_config_dir(tmp_path: Path) -> Path:
    """Create a temporary config directory for testing."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def mock_toml_files(test_config_dir: Path) -> Callable[[dict[str, str]], None]:
    """Factory fixture to create TOML files in the test config directory.

    Usage:
        def test_something(mock_toml_files):
            mock_toml_files({
                "default.toml": "app_name = 'test'",
                "development.toml": "debug = true",
            })
    """

    def _create_toml_files(files: dict[str, str]) -> None:
        for filename, content in files.items():
            (test_config_dir / filename).write_text(content)

    return _create_toml_files


class EnvOverrideContext:
    """Context manager for temporarily setting environment variables."""

    def __init__(self, overrides: dict[str, str]) -> None:
        self.overrides = overrides
        self.original_env: dict[str, str | None] = {}

    def __enter__(self) -> None:
        for key, value in self.overrides.items():
            self.original_env[key] = os.environ.get(key)
            os.environ[key] = value

    def __exit__(self, *args: Any) -> None:
        for key in self.overrides:
            original = self.original_env[key]
            if original is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = original


@pytest.fixture
def env_override() -> Callable[[dict[str, str]], EnvOverrideContext]:
    """Context manager for temporarily setting environment variables.

    Usage:
        def test_something(env_override):
            with env_override({"PARLEY_DEBUG": "true"}):
                # test code here
    """

    def _env_override(overrides: dict[str, str]) -> EnvOverrideContext:
        return EnvOverrideContext(overrides)

    return _env_override


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Clear the settings cache before and after each test."""
    from parley.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def system_prompt() -> str:
    return SYSTEM_PROMPT


@pytest.fixture
def store() -> InMemoryConversationStore:
    """In-memory conversation store."""
    return InMemoryConversationStore()


@pytest.fixture
def mock_provider() -> MockCompletionProvider:
    """Mock completion provider answering "Mock response"."""
    return MockCompletionProvider()


@pytest.fixture
def manager(
    store: InMemoryConversationStore,
    mock_provider: MockCompletionProvider,
    system_prompt: str,
) -> SessionManager:
    """Session manager wired to the in-memory store and mock provider."""
    return SessionManager(store, mock_provider, system_prompt=system_prompt)


@pytest.fixture
def test_settings() -> Settings:
    """Settings with a known signing secret, the mock provider and no tracing."""
    return Settings(
        auth=AuthConfig(jwt_secret=TEST_JWT_SECRET),
        providers=ProvidersConfig(completion=CompletionProviderConfig(provider="mock")),
        observability=ObservabilityConfig(tracing=TracingConfig(enabled=False)),
    )


@pytest.fixture
def auth_headers(test_settings: Settings) -> dict[str, str]:
    """Authorization header carrying a valid token."""
    token = issue_token("user-1", "tester", test_settings.auth)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def app(test_settings: Settings, manager: SessionManager) -> FastAPI:
    """Application wired to the test settings and session manager."""
    await reset_dependencies()

    app = create_app(test_settings)
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_session_manager] = lambda: manager

    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Test client."""
    return TestClient(app)


@pytest.fixture
def jwt_secret() -> str:
    """Secret the test settings sign and verify tokens with."""
    return TEST_JWT_SECRET
