"""
Error response models.

Standardized error responses for the API.
"""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format."""

    error: str


INVALID_PAYLOAD = ErrorResponse(error="Invalid request payload.")
