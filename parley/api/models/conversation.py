"""Conversation read models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from parley.conversation.models import Conversation, Role


class MessageView(BaseModel):
    """A message as exposed over HTTP."""

    role: Role
    content: str


class ConversationResponse(BaseModel):
    """Response body for GET /conversations/{conversationId}."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    conversation_id: str
    messages: list[MessageView]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_conversation(cls, conversation: Conversation) -> "ConversationResponse":
        return cls(
            conversation_id=conversation.id,
            messages=[
                MessageView(role=m.role, content=m.content)
                for m in conversation.messages
            ],
            created_at=conversation.created_at,
            updated_at=conversation.updated_at,
        )
