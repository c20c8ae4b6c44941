"""
In-memory fixed-window rate limiter.

Admission control for debate runs, keyed by client identity. The counter
is process-wide; each worker process keeps its own windows.
"""

import time
from dataclasses import dataclass
from typing import Callable, Optional

from starlette.requests import Request


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of a rate limit check."""

    allowed: bool
    remaining: int
    reset: int  # epoch milliseconds when the window resets
    limit: int

    def headers(self) -> dict[str, str]:
        """Standard X-RateLimit-* response headers."""
        return {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(self.reset),
        }


@dataclass
class _Window:
    count: int
    reset: int


class RateLimiter:
    """
    Fixed-window request counter.

    Args:
        max_requests: Requests allowed per window
        window_seconds: Window length
        clock: Returns current time in epoch milliseconds (injectable for tests)
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: int,
        clock: Optional[Callable[[], int]] = None,
    ):
        self.max_requests = max_requests
        self.window_ms = window_seconds * 1000
        self._clock = clock or (lambda: int(time.time() * 1000))
        self._windows: dict[str, _Window] = {}
        self._next_sweep = 0

    def check(self, key: str) -> RateLimitResult:
        """Count a request for key and report whether it is allowed."""
        now = self._clock()
        if now > self._next_sweep:
            self._sweep(now)
        window = self._windows.get(key)

        if window is None or now > window.reset:
            window = _Window(count=1, reset=now + self.window_ms)
            self._windows[key] = window
            return RateLimitResult(
                allowed=True,
                remaining=self.max_requests - 1,
                reset=window.reset,
                limit=self.max_requests,
            )

        if window.count >= self.max_requests:
            return RateLimitResult(
                allowed=False,
                remaining=0,
                reset=window.reset,
                limit=self.max_requests,
            )

        window.count += 1
        return RateLimitResult(
            allowed=True,
            remaining=max(self.max_requests - window.count, 0),
            reset=window.reset,
            limit=self.max_requests,
        )

    def _sweep(self, now: int) -> None:
        """Drop expired windows; runs at most once per window length."""
        self._windows = {k: w for k, w in self._windows.items() if now <= w.reset}
        self._next_sweep = now + self.window_ms

    def reset(self) -> None:
        """Forget all windows."""
        self._windows.clear()


def get_client_ip(request: Request) -> str:
    """
    Resolve the client identity used as the rate limit key.

    Prefers the first X-Forwarded-For hop, then X-Real-IP, then the peer.
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip
    if request.client and request.client.host:
        return request.client.host
    return "unknown"
