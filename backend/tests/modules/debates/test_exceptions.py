"""Tests for debates and safety module exceptions."""

from modules.debates.exceptions import (
    DebateError,
    DebateNotConfiguredError,
    RateLimitExceededError,
    WorkerFailureError,
)
from modules.safety.exceptions import SafetyError, SafetyRejectionError
from modules.safety.models import SafetyDecision, SafetyReason
from shared.exceptions import ConfigurationError, TribunalError


class TestDebateError:
    def test_debate_error_to_dict(self):
        """Should convert to dict for API responses."""
        error = DebateError("Test error", code="TEST", details={"key": "value"})
        result = error.to_dict()
        assert result["error"] == "TEST"
        assert result["message"] == "Test error"
        assert result["details"]["key"] == "value"

    def test_inherits_base(self):
        assert isinstance(DebateError("x"), TribunalError)


class TestWorkerFailureError:
    def test_message_names_worker(self):
        error = WorkerFailureError("critique_b", "invalid output: missing field")
        assert str(error) == "Worker critique_b failed: invalid output: missing field"
        assert error.label == "critique_b"
        assert error.code == "WORKER_FAILURE"
        assert error.details == {"worker": "critique_b"}
        assert isinstance(error, DebateError)


class TestAdmissionErrors:
    def test_not_configured(self):
        error = DebateNotConfiguredError()
        assert error.message == "Server is not configured."
        assert error.code == "NOT_CONFIGURED"
        assert isinstance(error, ConfigurationError)
        assert isinstance(error, DebateError)

    def test_rate_limited_carries_headers(self):
        error = RateLimitExceededError({"X-RateLimit-Remaining": "0"})
        assert error.message == "Rate limit exceeded."
        assert error.headers == {"X-RateLimit-Remaining": "0"}


class TestSafetyRejectionError:
    def test_from_decision(self):
        decision = SafetyDecision(
            allowed=False,
            reason=SafetyReason.UNSAFE_CONTENT,
            message="Request contains unsafe content and cannot be processed.",
        )

        error = SafetyRejectionError.from_decision(decision)

        assert isinstance(error, SafetyError)
        assert error.reason == SafetyReason.UNSAFE_CONTENT
        assert error.code == "unsafe_content"
        assert error.message == decision.message
        assert error.status_code == 403

    def test_unavailable_maps_to_503(self):
        error = SafetyRejectionError(SafetyReason.MODERATION_UNAVAILABLE, "Try again")
        assert error.status_code == 503
