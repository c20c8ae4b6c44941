"""
Debates module exceptions.
"""

from shared.exceptions import ConfigurationError, TribunalError


class DebateError(TribunalError):
    """Base exception for debate-related errors."""

    pass


class WorkerFailureError(DebateError):
    """Raised when a worker call fails or returns output that does not validate."""

    def __init__(self, label: str, message: str):
        super().__init__(
            f"Worker {label} failed: {message}",
            code="WORKER_FAILURE",
            details={"worker": label},
        )
        self.label = label


class DebateNotConfiguredError(DebateError, ConfigurationError):
    """Raised when a debate is requested but no OpenAI key is configured."""

    def __init__(self):
        super().__init__("Server is not configured.", code="NOT_CONFIGURED")


class RateLimitExceededError(DebateError):
    """Raised when a client has used up its request window."""

    def __init__(self, headers: dict[str, str]):
        super().__init__("Rate limit exceeded.", code="RATE_LIMITED")
        self.headers = headers
