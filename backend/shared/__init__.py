"""
Shared infrastructure for Tribunal backend.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- exceptions: Base exception classes
- logging: Root logging setup and request id propagation
- rate_limit: Per-client admission control

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, PricingOverride, get_settings
from .exceptions import (
    TribunalError,
    ValidationError,
    ConfigurationError,
)
from .logging import configure_logging, truncate
from .rate_limit import RateLimiter, RateLimitResult, get_client_ip

__all__ = [
    "Settings",
    "PricingOverride",
    "get_settings",
    "TribunalError",
    "ValidationError",
    "ConfigurationError",
    "configure_logging",
    "truncate",
    "RateLimiter",
    "RateLimitResult",
    "get_client_ip",
]
