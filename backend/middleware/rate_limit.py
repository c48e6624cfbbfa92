"""
In-memory rate limiting for endpoints that sign and submit transactions.

Every write endpoint spends controller gas, so requests are throttled with a
sliding-window counter per (client IP, route path).
For multi-worker deployments, replace with a shared (e.g. Redis) limiter.
"""
import time
import logging
from collections import defaultdict

from fastapi import HTTPException, Request

from config import settings

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Simple in-memory sliding-window rate limiter.

    Tracks request timestamps per key.
    """

    def __init__(self):
        self._requests: dict[str, list[float]] = defaultdict(list)

    def _cleanup(self, key: str, window_seconds: int):
        cutoff = time.time() - window_seconds
        self._requests[key] = [ts for ts in self._requests[key] if ts > cutoff]

    def check(self, key: str, max_requests: int, window_seconds: int) -> bool:
        """
        Record a request and report whether it is within the limit.

        Returns:
            True if allowed, False if rate-limited
        """
        self._cleanup(key, window_seconds)
        if len(self._requests[key]) >= max_requests:
            return False
        self._requests[key].append(time.time())
        return True

    def remaining(self, key: str, max_requests: int, window_seconds: int) -> int:
        """Get the number of remaining requests in the current window."""
        self._cleanup(key, window_seconds)
        return max(0, max_requests - len(self._requests[key]))

    def reset(self):
        self._requests.clear()


# Global rate limiter instance
_limiter = RateLimiter()


def rate_limit(max_requests: int | None = None, window_seconds: int | None = None):
    """
    FastAPI dependency factory for rate limiting.

    Limits default to WRITE_RATE_LIMIT / WRITE_RATE_WINDOW_SECONDS.

    Usage:
        @router.put("/{up_address}/config")
        async def save(..., _rate=Depends(rate_limit())):
            ...
    """
    async def _check_rate_limit(request: Request):
        limit = max_requests or settings.write_rate_limit
        window = window_seconds or settings.write_rate_window_seconds
        client_ip = request.client.host if request.client else "unknown"
        route_path = request.url.path
        key = f"{client_ip}:{route_path}"

        if not _limiter.check(key, limit, window):
            logger.warning(f"Rate limit exceeded: {client_ip} on {route_path} ({limit}/{window}s)")
            raise HTTPException(
                status_code=429,
                detail=f"Rate limit exceeded. Maximum {limit} requests "
                       f"per {window} seconds. Try again later.",
                headers={
                    "Retry-After": str(window),
                    "X-RateLimit-Limit": str(limit),
                    "X-RateLimit-Remaining": "0",
                },
            )

    return _check_rate_limit
