"""
Safety module exceptions.
"""

from shared.exceptions import TribunalError

from .models import SafetyDecision, SafetyReason


class SafetyError(TribunalError):
    """Base exception for safety-related errors."""

    pass


class SafetyRejectionError(SafetyError):
    """Raised when an inbound question fails the input safety check."""

    def __init__(self, reason: SafetyReason, message: str):
        super().__init__(
            message,
            code=reason.value,
            details={"reason": reason.value},
        )
        self.reason = reason

    @classmethod
    def from_decision(cls, decision: SafetyDecision) -> "SafetyRejectionError":
        """Build the error from a rejecting decision."""
        return cls(decision.reason, decision.message or "Request was rejected.")

    @property
    def status_code(self) -> int:
        """HTTP status for this rejection: 503 when the check itself was unavailable."""
        if self.reason == SafetyReason.MODERATION_UNAVAILABLE:
            return 503
        return 403
