"""
In-memory sliding-window rate limiting per client address.

State lives in one `SlidingWindowLimiter` per process (created in
`main.create_app`); it is not shared between workers and is lost on restart.
"""

from __future__ import annotations

import logging
import math
import time
from collections import deque
from typing import Callable

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

RATE_LIMITED_MESSAGE = "Trop de requêtes, veuillez réessayer plus tard."
logger = logging.getLogger(__name__)


class SlidingWindowLimiter:
    def __init__(
        self,
        *,
        max_requests: int,
        window_s: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_requests < 1:
            raise ValueError("max_requests must be >= 1.")
        if window_s <= 0:
            raise ValueError("window_s must be > 0.")
        self.max_requests = max_requests
        self.window_s = window_s
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}
        self._last_sweep = clock()

    def _prune(self, key: str, now: float) -> deque[float]:
        hits = self._hits.get(key)
        if hits is None:
            return deque()
        cutoff = now - self.window_s
        while hits and hits[0] <= cutoff:
            hits.popleft()
        if not hits:
            # Idle clients are forgotten once their window is empty.
            del self._hits[key]
        return hits

    def sweep(self, now: float | None = None) -> None:
        """
        Drop every client whose window has fully elapsed.
        """
        now = self._clock() if now is None else now
        for key in list(self._hits):
            self._prune(key, now)
        self._last_sweep = now

    def hit(self, key: str) -> float | None:
        """
        Record one request for `key`.

        Returns None when allowed, else the seconds until a slot frees up.
        """
        now = self._clock()
        # At most one full sweep per window.
        if now - self._last_sweep >= self.window_s:
            self.sweep(now)
        hits = self._prune(key, now)
        if len(hits) >= self.max_requests:
            return max(hits[0] + self.window_s - now, 0.0)
        hits.append(now)
        self._hits[key] = hits
        return None

    def remaining(self, key: str) -> int:
        hits = self._prune(key, self._clock())
        return max(self.max_requests - len(hits), 0)

    def __len__(self) -> int:
        return len(self._hits)

    def reset(self) -> None:
        self._hits.clear()


def client_key(request: Request) -> str:
    if request.client is None:
        return "unknown"
    return request.client.host


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, *, limiter: SlidingWindowLimiter) -> None:
        super().__init__(app)
        self.limiter = limiter

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        key = client_key(request)
        retry_after = self.limiter.hit(key)
        if retry_after is not None:
            logger.warning("rate_limited client=%s path=%s", key, request.url.path)
            return JSONResponse(
                status_code=429,
                content={"error": RATE_LIMITED_MESSAGE},
                headers={"Retry-After": str(max(math.ceil(retry_after), 1))},
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(self.limiter.max_requests)
        response.headers["X-RateLimit-Remaining"] = str(self.limiter.remaining(key))
        return response
