"""API models package."""

from .errors import INVALID_PAYLOAD, ErrorResponse

__all__ = ["ErrorResponse", "INVALID_PAYLOAD"]
