"""Per-client fixed-window rate limiting."""
from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from msga.core.config import get_settings
from msga.core.exceptions import RateLimitError, error_response

logger = logging.getLogger(__name__)

AUTH_LIMIT_MESSAGE = "Too many attempts, please try again later."
GENERAL_LIMIT_MESSAGE = RateLimitError.default_message


class FixedWindowCounter:
    """Count hits per key within consecutive windows of ``window_seconds``."""

    def __init__(self, limit: int, window_seconds: float, clock: Callable[[], float] = time.monotonic) -> None:
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, tuple[float, int]] = {}
        self._last_sweep = clock()

    def __len__(self) -> int:
        return len(self._windows)

    def hit(self, key: str) -> bool:
        """Record one hit for ``key``; return False once the limit is exceeded."""

        now = self._clock()
        if now - self._last_sweep >= self.window_seconds:
            self._sweep(now)
        started, count = self._windows.get(key, (now, 0))
        if now - started >= self.window_seconds:
            started, count = now, 0
        count += 1
        self._windows[key] = (started, count)
        return count <= self.limit

    def _sweep(self, now: float) -> None:
        """Forget keys whose window has already ended."""

        expired = [key for key, (started, _) in self._windows.items() if now - started >= self.window_seconds]
        for key in expired:
            del self._windows[key]
        self._last_sweep = now


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Throttle authentication paths and all other paths with separate budgets."""

    def __init__(self, app, auth_paths: Iterable[str] = ("/login", "/register")):
        super().__init__(app)
        settings = get_settings()
        self.auth_paths = frozenset(auth_paths)
        self.auth_counter = FixedWindowCounter(settings.auth_rate_limit, settings.rate_limit_window_seconds)
        self.general_counter = FixedWindowCounter(settings.general_rate_limit, settings.rate_limit_window_seconds)

    async def dispatch(self, request: Request, call_next):
        client_ip = request.client.host if request.client else "unknown"
        if request.url.path in self.auth_paths:
            counter, message = self.auth_counter, AUTH_LIMIT_MESSAGE
        else:
            counter, message = self.general_counter, GENERAL_LIMIT_MESSAGE

        if not counter.hit(client_ip):
            logger.warning("Rate limit exceeded for %s on %s", client_ip, request.url.path)
            exc = RateLimitError(message)
            return error_response(exc.status_code, exc.message)
        return await call_next(request)
