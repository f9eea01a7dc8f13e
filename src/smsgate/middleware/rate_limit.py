"""Per-API-key rate limiting middleware.

A fixed-window, in-memory limiter. Each API key carries its own budget
(``CallerContext.rate_limit``) for the configured window; requests
beyond it get 429 until the window rolls over.
"""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from smsgate.errors import TooManyRequests
from smsgate.gateway.context import current_caller
from smsgate.http.request import Request
from smsgate.http.response import Response
from smsgate.middleware.protocol import Next


@dataclass(frozen=True, slots=True)
class RateLimitConfig:
    """Configuration for per-key rate limiting."""

    window_seconds: int = 3600


def _window_label(seconds: int) -> str:
    if seconds == 3600:
        return "hour"
    if seconds == 60:
        return "minute"
    return f"{seconds} seconds"


class ApiKeyRateLimitMiddleware:
    """In-memory limiter keyed by API key id.

    Requests without a caller pass through untouched; authentication
    is ``ApiKeyMiddleware``'s job and the gateway rejects anonymous
    calls to protected routes itself.
    """

    __slots__ = ("_clock", "_config", "_lock", "_state")

    def __init__(
        self,
        config: RateLimitConfig | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._config = config or RateLimitConfig()
        self._clock = clock
        self._lock = threading.Lock()
        # api_key_id -> (count, window_start)
        self._state: dict[str, tuple[int, float]] = {}

    def _check_and_update(self, key: str, limit: int, now: float) -> tuple[bool, int, int]:
        """Count one request for *key*. Returns (allowed, remaining, reset_seconds)."""
        window = self._config.window_seconds
        with self._lock:
            count, window_start = self._state.get(key, (0, now))
            if now - window_start >= window:
                count = 0
                window_start = now

            reset = max(1, int(window_start + window - now))
            if count >= limit:
                return False, 0, reset

            count += 1
            self._state[key] = (count, window_start)
            return True, limit - count, reset

    async def __call__(self, request: Request, next: Next) -> Response:
        caller = current_caller()
        if caller is None:
            return await next(request)

        limit = caller.rate_limit
        allowed, remaining, reset = self._check_and_update(caller.api_key_id, limit, self._clock())
        if not allowed:
            label = _window_label(self._config.window_seconds)
            raise TooManyRequests(
                f"Rate limit exceeded. Maximum {limit} requests per {label} allowed.",
                retry_after=reset,
            )

        response = await next(request)
        return response.with_headers(
            {
                "X-Rate-Limit-Limit": str(limit),
                "RateLimit-Limit": str(limit),
                "RateLimit-Remaining": str(remaining),
                "RateLimit-Reset": str(reset),
            }
        )
