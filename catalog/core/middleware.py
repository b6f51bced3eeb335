"""Per-IP fixed-window rate limiting and security response headers."""

from __future__ import annotations

import logging
import math
import threading
import time
from typing import Callable, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, PositiveInt
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from catalog.core.config import Settings

logger = logging.getLogger(__name__)

TimeFn = Callable[[], float]


class RateLimitPolicy(BaseModel):
    name: str = Field(..., description="Unique policy name")
    limit: PositiveInt = Field(..., description="Requests allowed per window")
    window_sec: PositiveInt = Field(..., description="Window length in seconds")
    path_prefix: str = Field("/", description="Policy applies to paths starting with this prefix")
    message: str = "Too many requests from this IP, please try again later."

    def matches(self, path: str) -> bool:
        return path.startswith(self.path_prefix)


class RateLimitDecision(BaseModel):
    allowed: bool
    remaining: int
    retry_after: Optional[int] = None


class FixedWindowCounter:
    """Thread-safe in-memory request counters, one window per (policy, key).

    Single-process only; counters are lost on restart. Expired windows are
    dropped at most once every ``sweep_interval`` seconds.
    """

    def __init__(self, now: Optional[TimeFn] = None, sweep_interval: float = 60.0):
        self._now = now or time.monotonic
        self._windows: Dict[Tuple[str, str], Tuple[float, int, int]] = {}
        self._lock = threading.Lock()
        self._sweep_interval = sweep_interval
        self._last_sweep = self._now()

    def __len__(self) -> int:
        with self._lock:
            return len(self._windows)

    def _sweep(self, now: float) -> None:
        expired = [
            bucket
            for bucket, (started, _, window_sec) in self._windows.items()
            if now - started >= window_sec
        ]
        for bucket in expired:
            del self._windows[bucket]
        self._last_sweep = now
        if expired:
            logger.debug("Rate limiter dropped %d expired windows", len(expired))

    def hit(self, key: str, policy: RateLimitPolicy) -> RateLimitDecision:
        now = self._now()
        bucket = (policy.name, key)
        with self._lock:
            if now - self._last_sweep >= self._sweep_interval:
                self._sweep(now)
            started, count, _ = self._windows.get(bucket, (now, 0, policy.window_sec))
            if now - started >= policy.window_sec:
                started, count = now, 0
            if count >= policy.limit:
                retry_after = math.ceil(policy.window_sec - (now - started))
                return RateLimitDecision(allowed=False, remaining=0, retry_after=max(1, retry_after))
            count += 1
            self._windows[bucket] = (started, count, policy.window_sec)
            return RateLimitDecision(allowed=True, remaining=policy.limit - count)

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Applies every matching policy to each request, keyed by client IP."""

    def __init__(
        self,
        app,
        policies: List[RateLimitPolicy],
        counter: Optional[FixedWindowCounter] = None,
    ):
        super().__init__(app)
        self.policies = policies
        self.counter = counter or FixedWindowCounter()

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        client = request.client.host if request.client else "unknown"

        remaining: Optional[int] = None
        limit: Optional[int] = None
        for policy in self.policies:
            if not policy.matches(path):
                continue
            decision = self.counter.hit(client, policy)
            if not decision.allowed:
                logger.warning("Rate limit exceeded: policy=%s ip=%s path=%s", policy.name, client, path)
                return JSONResponse(
                    status_code=429,
                    content={"error": True, "mensaje": policy.message},
                    headers={
                        "Retry-After": str(decision.retry_after),
                        "RateLimit-Limit": str(policy.limit),
                        "RateLimit-Remaining": "0",
                    },
                )
            if remaining is None or decision.remaining < remaining:
                remaining, limit = decision.remaining, policy.limit

        response = await call_next(request)
        if limit is not None:
            response.headers["RateLimit-Limit"] = str(limit)
            response.headers["RateLimit-Remaining"] = str(remaining)
        return response


def build_rate_limit_policies(settings: Settings) -> List[RateLimitPolicy]:
    """General per-IP limit for all traffic plus a stricter one for the auth endpoints."""
    return [
        RateLimitPolicy(
            name="general",
            limit=settings.RATE_LIMIT_MAX_REQUESTS,
            window_sec=settings.RATE_LIMIT_WINDOW_SEC,
        ),
        RateLimitPolicy(
            name="auth",
            limit=settings.AUTH_RATE_LIMIT_MAX_REQUESTS,
            window_sec=settings.RATE_LIMIT_WINDOW_SEC,
            path_prefix=f"{settings.API_PREFIX}/auth/",
            message="Too many authentication attempts, please try again later.",
        ),
    ]


SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Opener-Policy": "same-origin",
    "X-DNS-Prefetch-Control": "off",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds standard hardening headers to every response (HSTS only when hsts=True)."""

    def __init__(self, app, hsts: bool = False):
        super().__init__(app)
        self.hsts = hsts

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        if self.hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=15552000; includeSubDomains")
        return response
