"""Chat request and response models."""

from pydantic import BaseModel, ConfigDict, Field


class ChatRequest(BaseModel):
    """Request body for POST /chat."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "message": "Do you have the blue jacket in medium?",
                "conversationId": "2f1c0d1e-6d5b-4f0a-9a43-3f1f6a1e7c55",
            }
        },
    )

    message: str
    """The caller's message text. Emptiness is checked by the session manager."""

    conversation_id: str | None = Field(default=None, alias="conversationId")
    """Conversation to continue. A new one is started if omitted."""


class ChatResponse(BaseModel):
    """Response body for POST /chat."""

    model_config = ConfigDict(populate_by_name=True)

    response: str
    """The assistant's reply."""

    conversation_id: str = Field(alias="conversationId")
    """Conversation identifier to send with the next message."""
