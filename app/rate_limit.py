"""
Per-client rate limiting on top of `limits` and the middleware that applies it.

Windows:
  - short:  3 requests per second
  - medium: 20 requests per 10 seconds
  - long:   100 requests per minute

A request is admitted only if every window has room; only admitted requests
are counted.
"""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence, Tuple

from fastapi import Request, Response
from limits import RateLimitItem, parse
from limits.storage import MemoryStorage, Storage
from limits.strategies import FixedWindowRateLimiter
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from app.config import settings
from app.errors import TooManyRequests
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="rate_limit")

EXEMPT_PATHS = ("/health",)
NAMESPACE = "weather_gateway"


@dataclass(frozen=True)
class RateLimitWindow:
    name: str
    item: RateLimitItem

    @property
    def limit(self) -> int:
        return self.item.amount


DEFAULT_WINDOWS: Tuple[RateLimitWindow, ...] = (
    RateLimitWindow("short", parse("3/second")),
    RateLimitWindow("medium", parse("20/10 seconds")),
    RateLimitWindow("long", parse("100/minute")),
)


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of a rate-limit check."""
    allowed: bool
    window: Optional[str] = None
    retry_after: int = 0
    remaining: Optional[Dict[str, int]] = None


class RateLimiter:
    """Fixed-window limiter over several windows sharing one `limits` storage."""

    def __init__(self, windows: Sequence[RateLimitWindow] = DEFAULT_WINDOWS,
                 storage: Storage | None = None) -> None:
        self.windows = tuple(windows)
        self.storage = storage or MemoryStorage()
        self._strategy = FixedWindowRateLimiter(self.storage)
        # test() then hit() across windows must not interleave between requests
        self._lock = threading.Lock()

    def _retry_after(self, window: RateLimitWindow, client_id: str) -> int:
        stats = self._strategy.get_window_stats(window.item, NAMESPACE, client_id)
        return max(1, math.ceil(stats.reset_time - time.time()))

    def check(self, client_id: str) -> RateLimitDecision:
        """Count the request against every window, or report the first window that is full."""
        with self._lock:
            for window in self.windows:
                if not self._strategy.test(window.item, NAMESPACE, client_id):
                    return RateLimitDecision(
                        allowed=False,
                        window=window.name,
                        retry_after=self._retry_after(window, client_id),
                    )

            remaining = {}
            for window in self.windows:
                self._strategy.hit(window.item, NAMESPACE, client_id)
                stats = self._strategy.get_window_stats(window.item, NAMESPACE, client_id)
                remaining[window.name] = stats.remaining
            return RateLimitDecision(allowed=True, remaining=remaining)

    def allow(self, client_id: str) -> bool:
        """Return True if the request is admitted."""
        return self.check(client_id).allowed

    def enforce(self, client_id: str) -> RateLimitDecision:
        """Like check(), but raise TooManyRequests on rejection."""
        decision = self.check(client_id)
        if not decision.allowed:
            raise TooManyRequests(decision.window, decision.retry_after)
        return decision

    def reset(self) -> None:
        """Forget every counter (dev/testing)."""
        with self._lock:
            self.storage.reset()


limiter = RateLimiter()


def get_client_id(request: Request) -> str:
    """Identify the caller by peer address, or the first forwarded hop when trusted."""
    if settings.trust_forwarded_for:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Reject requests over any window with 429 before they reach a route."""

    def __init__(self, app, rate_limiter: RateLimiter | None = None):
        super().__init__(app)
        self.rate_limiter = rate_limiter or limiter

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if not settings.rate_limit_enabled or request.url.path in EXEMPT_PATHS:
            return await call_next(request)

        client_id = get_client_id(request)
        try:
            decision = self.rate_limiter.enforce(client_id)
        except TooManyRequests as exc:
            logger.warning(f"Rate limit exceeded for {client_id} ({exc.window} window)")
            return JSONResponse(
                status_code=exc.status_code,
                content={"detail": "Too Many Requests", "window": exc.window, "retry_after": exc.retry_after},
                headers={"Retry-After": str(exc.retry_after)},
            )

        response = await call_next(request)
        for window in self.rate_limiter.windows:
            response.headers[f"X-RateLimit-Limit-{window.name}"] = str(window.limit)
            response.headers[f"X-RateLimit-Remaining-{window.name}"] = str(decision.remaining[window.name])
        return response
