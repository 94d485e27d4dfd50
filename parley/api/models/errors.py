"""Error response models for consistent API error handling."""

from pydantic import BaseModel

from parley.errors import ErrorCode


class ErrorDetail(BaseModel):
    """Field-level error information for request validation failures."""

    field: str | None = None
    """The field that caused the error, if applicable."""

    message: str
    """Human-readable error description."""


class ErrorResponse(BaseModel):
    """Standard error response format for all API errors.

    Example:
        {"error": "Message is required", "code": "INVALID_REQUEST"}
    """

    error: str
    """Human-readable error message."""

    code: ErrorCode
    """Machine-readable error code."""

    details: list[ErrorDetail] | None = None
    """Additional error details for validation failures."""
