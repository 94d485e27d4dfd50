"""In-memory implementation of ConversationStore."""

from parley.conversation.models import Conversation
from parley.conversation.store import ConversationStore


class InMemoryConversationStore(ConversationStore):
    """In-memory implementation of ConversationStore.

    Holds conversations by reference in a dict; suitable for a single
    process. Nothing is ever evicted.
    """

    def __init__(self) -> None:
        """Initialize empty storage."""
        self._conversations: dict[str, Conversation] = {}

    async def get(self, conversation_id: str) -> Conversation | None:
        """Get a conversation by ID."""
        return self._conversations.get(conversation_id)

    async def create(self, system_prompt: str) -> Conversation:
        """Create and register a conversation under a fresh identifier."""
        conversation = Conversation.start(system_prompt)
        while conversation.id in self._conversations:
            conversation = Conversation.start(system_prompt)
        self._conversations[conversation.id] = conversation
        return conversation

    async def save(self, conversation: Conversation) -> str:
        """Upsert a conversation keyed by its ID."""
        self._conversations[conversation.id] = conversation
        return conversation.id
