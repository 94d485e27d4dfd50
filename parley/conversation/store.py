"""ConversationStore abstract interface."""

from abc import ABC, abstractmethod

from parley.conversation.models import Conversation


class ConversationStore(ABC):
    """Abstract interface for conversation storage.

    A passive keyed container: it performs no validation of message
    content and no mutation beyond what callers hand it. Durable
    implementations must raise StoreError for persistence failures.
    """

    @abstractmethod
    async def get(self, conversation_id: str) -> Conversation | None:
        """Get a conversation by ID, or None if unknown."""
        pass

    @abstractmethod
    async def create(self, system_prompt: str) -> Conversation:
        """Create and register a conversation under a fresh identifier."""
        pass

    @abstractmethod
    async def save(self, conversation: Conversation) -> str:
        """Upsert a conversation keyed by its ID, returning the ID."""
        pass
