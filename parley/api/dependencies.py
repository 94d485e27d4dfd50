"""Dependency injection for API routes.

Provides FastAPI dependencies for the conversation store, completion
provider, reporter and session manager. Instances are created once and
reused; every dependency can be overridden for testing.
"""

from typing import Annotated

from fastapi import Depends

from parley.config import get_settings as load_settings
from parley.config.settings import Settings
from parley.conversation.manager import SessionManager
from parley.conversation.store import ConversationStore
from parley.conversation.stores.inmemory import InMemoryConversationStore
from parley.observability import Reporter, TelemetryReporter
from parley.observability.logging import get_logger
from parley.providers.completion import CompletionProvider, create_completion_provider

logger = get_logger(__name__)

_reporter: Reporter | None = None
_conversation_store: ConversationStore | None = None
_completion_provider: CompletionProvider | None = None
_session_manager: SessionManager | None = None


def get_settings() -> Settings:
    """Get application settings (cached by parley.config)."""
    return load_settings()


def get_reporter() -> Reporter:
    """Get the Reporter shared by the session core."""
    global _reporter
    if _reporter is None:
        _reporter = TelemetryReporter()
    return _reporter


def get_conversation_store() -> ConversationStore:
    """Get the ConversationStore instance."""
    global _conversation_store
    if _conversation_store is None:
        _conversation_store = InMemoryConversationStore()
        logger.info("conversation_store_initialized", store_type="inmemory")
    return _conversation_store


def get_completion_provider(
    settings: Annotated[Settings, Depends(get_settings)],
    reporter: Annotated[Reporter, Depends(get_reporter)],
) -> CompletionProvider:
    """Get the CompletionProvider configured in settings.providers.completion."""
    global _completion_provider
    if _completion_provider is None:
        _completion_provider = create_completion_provider(
            settings.providers.completion, reporter
        )
    return _completion_provider


def get_session_manager(
    settings: Annotated[Settings, Depends(get_settings)],
    store: Annotated[ConversationStore, Depends(get_conversation_store)],
    provider: Annotated[CompletionProvider, Depends(get_completion_provider)],
    reporter: Annotated[Reporter, Depends(get_reporter)],
) -> SessionManager:
    """Get the SessionManager wired to the shared store and provider."""
    global _session_manager
    if _session_manager is None:
        _session_manager = SessionManager.from_config(
            settings.session, store, provider, reporter
        )
        logger.info(
            "session_manager_initialized",
            serialize_turns=settings.session.serialize_turns,
            unknown_conversation_policy=settings.session.unknown_conversation_policy,
        )
    return _session_manager


SettingsDep = Annotated[Settings, Depends(get_settings)]
ConversationStoreDep = Annotated[ConversationStore, Depends(get_conversation_store)]
CompletionProviderDep = Annotated[CompletionProvider, Depends(get_completion_provider)]
SessionManagerDep = Annotated[SessionManager, Depends(get_session_manager)]


async def reset_dependencies() -> None:
    """Reset all cached dependencies.

    Used for testing and shutdown. Closes the provider client first.
    """
    global _reporter, _conversation_store, _completion_provider, _session_manager

    if _completion_provider is not None:
        await _completion_provider.close()

    _reporter = None
    _conversation_store = None
    _completion_provider = None
    _session_manager = None
    load_settings.cache_clear()
