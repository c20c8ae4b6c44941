"""
Debates module interface.

The API layer depends on IDebateService for all debate operations.
"""

from typing import AsyncIterator, Protocol, runtime_checkable

from shared.rate_limit import RateLimitResult

from .models import DebateEvent, DebateRequest


@runtime_checkable
class IDebateService(Protocol):
    """
    Interface for running debates.

    Admission checks run in order (configuration, rate limit, input
    safety) before any worker is invoked.
    """

    def ensure_configured(self) -> None:
        """
        Check that the server can reach the LLM provider.

        Raises:
            DebateNotConfiguredError: If no OpenAI key is configured
        """
        ...

    def admit(self, client_key: str) -> RateLimitResult:
        """
        Count a debate request against the client's rate limit.

        Args:
            client_key: Client identity (usually the client IP)

        Returns:
            RateLimitResult for response headers

        Raises:
            RateLimitExceededError: If the client's window is used up
        """
        ...

    async def screen_question(self, query: str) -> None:
        """
        Run the input safety check.

        Raises:
            SafetyRejectionError: If the question is rejected
        """
        ...

    def stream_debate(self, request: DebateRequest) -> AsyncIterator[DebateEvent]:
        """
        Run a debate and yield sanitized events.

        Args:
            request: Validated debate request

        Yields:
            DebateEvent objects after output screening
        """
        ...
