"""Conversation read endpoint."""

from fastapi import APIRouter

from parley.api.dependencies import SessionManagerDep
from parley.api.middleware.auth import CallerIdentityDep
from parley.api.models.conversation import ConversationResponse
from parley.api.models.errors import ErrorResponse
from parley.errors import ConversationNotFoundError
from parley.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get(
    "/conversations/{conversation_id}",
    response_model=ConversationResponse,
    responses={404: {"model": ErrorResponse, "description": "Unknown conversation"}},
)
async def get_conversation(
    conversation_id: str,
    caller: CallerIdentityDep,
    manager: SessionManagerDep,
) -> ConversationResponse:
    """Return the stored history of a conversation."""
    conversation = await manager.get_conversation(conversation_id)
    if conversation is None:
        raise ConversationNotFoundError(conversation_id)

    logger.debug(
        "conversation_read",
        user_id=caller.user_id,
        conversation_id=conversation_id,
        message_count=conversation.message_count,
    )
    return ConversationResponse.from_conversation(conversation)
