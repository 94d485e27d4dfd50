"""Session manager configuration model."""

from typing import Literal

from pydantic import BaseModel, Field

DEFAULT_SYSTEM_PROMPT = (
    "You are an intelligent assistant for a retail store, helping customers with "
    "product information, inventory checks, and general inquiries. Be friendly, "
    "helpful, and concise. If you don't know the answer to a question, say so "
    "instead of making up information."
)

UnknownConversationPolicy = Literal["create", "reject"]


class SessionConfig(BaseModel):
    """Turn handling behaviour."""

    system_prompt: str = Field(
        default=DEFAULT_SYSTEM_PROMPT,
        min_length=1,
        description="Preamble inserted as the first message of every conversation",
    )
    provider_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Upper bound on a single completion call, in seconds",
    )
    serialize_turns: bool = Field(
        default=True,
        description="Process turns on the same conversation one at a time",
    )
    unknown_conversation_policy: UnknownConversationPolicy = Field(
        default="create",
        description="What to do when a caller supplies an unknown conversation id",
    )
    max_message_length: int = Field(
        default=10000,
        gt=0,
        description="Longest accepted user message, in characters",
    )
