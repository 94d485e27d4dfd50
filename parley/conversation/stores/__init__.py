"""Conversation stores."""

from parley.conversation.store import ConversationStore
from parley.conversation.stores.inmemory import InMemoryConversationStore

__all__ = [
    "ConversationStore",
    "InMemoryConversationStore",
]
