"""In-memory sliding window rate limiter keyed by client IP.

Runs as middleware, so it sees every request before routing and before any
credential is checked. State is per process.
"""

import logging
import math
import time
from collections import defaultdict, deque
from collections.abc import Callable

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from app.api.errors import error_response
from app.core.config import Settings
from app.core.errors import RateLimitError

logger = logging.getLogger(__name__)

EXEMPT_PATHS = frozenset({"/health"})


class SlidingWindowLimiter:
    """Allow at most max_requests per key within any window_seconds span."""

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, deque[float]] = defaultdict(deque)
        self._next_sweep = float("-inf")

    def hit(self, key: str) -> tuple[bool, int, int]:
        """
        Record a request for key if it fits the budget.

        Returns (allowed, remaining, retry_after_seconds).
        """
        now = self._clock()
        cutoff = now - self.window_seconds
        self._sweep(cutoff)

        window = self._windows[key]
        while window and window[0] <= cutoff:
            window.popleft()

        if len(window) >= self.max_requests:
            retry_after = max(1, math.ceil(window[0] - cutoff))
            return False, 0, retry_after

        window.append(now)
        return True, self.max_requests - len(window), 0

    def _sweep(self, cutoff: float) -> None:
        """Drop keys whose newest hit has left the window, at most once per window."""
        if cutoff < self._next_sweep:
            return
        self._next_sweep = cutoff + self.window_seconds
        idle = [key for key, window in self._windows.items() if not window or window[-1] <= cutoff]
        for key in idle:
            del self._windows[key]

    def __len__(self) -> int:
        return len(self._windows)


def client_ip(request: Request, trust_proxy: bool) -> str:
    if trust_proxy:
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()
        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            return real_ip.strip()
    if request.client is not None:
        return request.client.host
    return "unknown"


class RateLimiterMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app: ASGIApp,
        settings: Settings,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(app)
        self._enabled = settings.RATE_LIMIT_ENABLED
        self._trust_proxy = settings.RATE_LIMIT_TRUST_PROXY
        self.limiter = SlidingWindowLimiter(
            settings.RATE_LIMIT_MAX_REQUESTS,
            settings.RATE_LIMIT_WINDOW_SECONDS,
            clock,
        )

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not self._enabled or request.url.path in EXEMPT_PATHS:
            return await call_next(request)

        key = client_ip(request, self._trust_proxy)
        allowed, remaining, retry_after = self.limiter.hit(key)
        limit_headers = {
            "RateLimit-Limit": str(self.limiter.max_requests),
            "RateLimit-Remaining": str(remaining),
        }
        if not allowed:
            logger.warning("Rate limit exceeded for client=%s path=%s", key, request.url.path)
            err = RateLimitError()
            return error_response(
                err.status_code,
                err.code,
                err.message,
                headers={"Retry-After": str(retry_after), **limit_headers},
            )

        response = await call_next(request)
        response.headers.update(limit_headers)
        return response
