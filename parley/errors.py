"""Error taxonomy for turn processing.

All errors raised by the session core inherit from ParleyError, which
carries the status_code and error_code the HTTP layer uses to build a
consistent error response.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Machine-readable error codes returned alongside the error message."""

    INVALID_REQUEST = "INVALID_REQUEST"
    CONVERSATION_NOT_FOUND = "CONVERSATION_NOT_FOUND"
    NOT_FOUND = "NOT_FOUND"
    COMPLETION_FAILED = "COMPLETION_FAILED"
    STORE_ERROR = "STORE_ERROR"
    UNAUTHENTICATED = "UNAUTHENTICATED"
    FORBIDDEN = "FORBIDDEN"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class CompletionFailureReason(str, Enum):
    """Why a completion call produced no usable reply."""

    TIMEOUT = "timeout"
    RATE_LIMITED = "rate_limited"
    AUTHENTICATION = "authentication"
    UNAVAILABLE = "unavailable"
    MALFORMED_RESPONSE = "malformed_response"
    EMPTY_CONTENT = "empty_content"
    INVALID_HISTORY = "invalid_history"


class ParleyError(Exception):
    """Base exception for all turn-processing errors."""

    status_code: int = 500
    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(ParleyError):
    """Raised when caller input is malformed; nothing has been mutated."""

    status_code = 400
    error_code = ErrorCode.INVALID_REQUEST


class ConversationNotFoundError(ParleyError):
    """Raised when a conversation id is unknown and creation is not allowed."""

    status_code = 404
    error_code = ErrorCode.CONVERSATION_NOT_FOUND

    def __init__(self, conversation_id: str) -> None:
        super().__init__(f"Conversation {conversation_id} not found")
        self.conversation_id = conversation_id


class CompletionError(ParleyError):
    """Raised when the completion provider fails or returns unusable content."""

    status_code = 500
    error_code = ErrorCode.COMPLETION_FAILED

    def __init__(self, message: str, reason: CompletionFailureReason) -> None:
        super().__init__(message)
        self.reason = reason

    def __str__(self) -> str:
        return f"[{self.reason.value}] {self.message}"


class StoreError(ParleyError):
    """Raised by durable conversation stores when persistence fails."""

    status_code = 500
    error_code = ErrorCode.STORE_ERROR
