"""Conversation domain models."""

from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


def new_conversation_id() -> str:
    """Generate an opaque conversation identifier."""
    return str(uuid4())


class Role(str, Enum):
    """Author of a message."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    """A single role-tagged entry in a conversation history."""

    model_config = ConfigDict(frozen=True)

    role: Role = Field(..., description="Message author")
    content: str = Field(..., description="Text payload")


class Conversation(BaseModel):
    """Ordered message history between a caller and the completion provider.

    The first message is always the system preamble. Messages are only ever
    appended; insertion order is chronological order.
    """

    model_config = ConfigDict(frozen=False, validate_assignment=True)

    id: str = Field(default_factory=new_conversation_id, description="Opaque identifier")
    messages: list[Message] = Field(default_factory=list, description="Chronological history")
    created_at: datetime = Field(default_factory=utc_now, description="Creation time")
    updated_at: datetime = Field(default_factory=utc_now, description="Last append time")

    @classmethod
    def start(cls, system_prompt: str, conversation_id: str | None = None) -> "Conversation":
        """Create a conversation seeded with the system preamble."""
        now = utc_now()
        return cls(
            id=conversation_id or new_conversation_id(),
            messages=[Message(role=Role.SYSTEM, content=system_prompt)],
            created_at=now,
            updated_at=now,
        )

    def append(self, role: Role, content: str) -> Message:
        """Append a user or assistant message and refresh updated_at.

        Raises:
            ValueError: If role is SYSTEM (the preamble is fixed at creation)
        """
        if role == Role.SYSTEM:
            raise ValueError("system messages can only be inserted at creation")
        message = Message(role=role, content=content)
        self.messages.append(message)
        self.updated_at = utc_now()
        return message

    @property
    def message_count(self) -> int:
        """Number of messages, including the preamble."""
        return len(self.messages)
