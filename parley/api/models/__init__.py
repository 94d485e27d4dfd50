"""API request and response models."""

from parley.api.models.chat import ChatRequest, ChatResponse
from parley.api.models.context import CallerIdentity, RequestContext
from parley.api.models.conversation import ConversationResponse, MessageView
from parley.api.models.errors import ErrorDetail, ErrorResponse
from parley.api.models.health import ComponentHealth, HealthResponse

__all__ = [
    "CallerIdentity",
    "ChatRequest",
    "ChatResponse",
    "ComponentHealth",
    "ConversationResponse",
    "ErrorDetail",
    "ErrorResponse",
    "HealthResponse",
    "MessageView",
    "RequestContext",
]
