"""Conversation domain: models, storage and per-conversation locking.

The SessionManager that orchestrates turns lives in
``parley.conversation.manager``.
"""

from parley.conversation.locks import ConversationLocks
from parley.conversation.models import Conversation, Message, Role
from parley.conversation.store import ConversationStore

__all__ = [
    "Conversation",
    "ConversationLocks",
    "ConversationStore",
    "Message",
    "Role",
]
