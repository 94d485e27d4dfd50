"""Chat endpoint."""

from fastapi import APIRouter

from parley.api.dependencies import SessionManagerDep
from parley.api.middleware.auth import CallerIdentityDep
from parley.api.models.chat import ChatRequest, ChatResponse
from parley.api.models.errors import ErrorResponse
from parley.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Message missing or empty"},
        401: {"model": ErrorResponse, "description": "Missing credentials"},
        403: {"model": ErrorResponse, "description": "Invalid credentials"},
        500: {"model": ErrorResponse, "description": "Provider or internal failure"},
    },
)
async def chat(
    body: ChatRequest,
    caller: CallerIdentityDep,
    manager: SessionManagerDep,
) -> ChatResponse:
    """Send a message and receive the assistant's reply.

    Omit conversationId to start a new conversation; send the returned
    conversationId with the next message to continue it.
    """
    logger.info(
        "chat_request_received",
        user_id=caller.user_id,
        conversation_id=body.conversation_id or "new",
        message_length=len(body.message),
    )

    result = await manager.handle(body.message, body.conversation_id)

    return ChatResponse(response=result.reply, conversation_id=result.conversation_id)
