"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations.
"""

from typing import TYPE_CHECKING

from shared.config import get_settings

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.debates.interfaces import IDebateService
    from modules.safety.guardrails import SafetyGuardrails
    from shared.rate_limit import RateLimiter


class ServiceContainer:
    """
    Container for all service instances.

    Services are created lazily on first access and cached as singletons
    within the container. Use reset() to clear them for testing.
    """

    def __init__(self) -> None:
        self._guardrails: "SafetyGuardrails | None" = None
        self._rate_limiter: "RateLimiter | None" = None
        self._debate_service: "IDebateService | None" = None

    @property
    def guardrails(self) -> "SafetyGuardrails":
        """Get the safety guardrails instance."""
        if self._guardrails is None:
            from modules.safety.guardrails import get_safety_guardrails
            self._guardrails = get_safety_guardrails()
        return self._guardrails

    @property
    def rate_limiter(self) -> "RateLimiter":
        """Get the process-wide rate limiter."""
        if self._rate_limiter is None:
            from shared.rate_limit import RateLimiter
            settings = get_settings()
            self._rate_limiter = RateLimiter(
                max_requests=settings.rate_limit_requests,
                window_seconds=settings.rate_limit_window,
            )
        return self._rate_limiter

    @property
    def debates(self) -> "IDebateService":
        """Get the debate service instance."""
        if self._debate_service is None:
            from modules.debates.service import DebateService
            self._debate_service = DebateService(
                settings=get_settings(),
                rate_limiter=self.rate_limiter,
                guardrails=self.guardrails,
            )
        return self._debate_service

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._guardrails = None
        self._rate_limiter = None
        self._debate_service = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    This clears the cached container, so the next call to get_container()
    will create a fresh container with new service instances.

    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_debate_service() -> "IDebateService":
    """FastAPI dependency for debate service."""
    return get_container().debates
