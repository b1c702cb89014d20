"""
Rate Limiter
Sliding-window admission control keyed by client address

Two interchangeable backends:
- InMemoryRateLimiter: exact sliding window, state lives in this process only
- UpstashRateLimiter: upstash_ratelimit sliding window shared by all instances

With the in-memory backend every instance counts on its own, so the
effective global limit grows with the number of warm instances.
"""

import threading
import time
from collections import deque
from typing import Callable, Deque, Dict, Mapping

RATE_LIMIT = 10  # requests per window
RATE_WINDOW_SECONDS = 60

UNKNOWN_CLIENT = "unknown"


def get_client_ip(headers: Mapping[str, str]) -> str:
    """
    Extract client IP from headers.

    Clients whose address can't be determined all share the "unknown" bucket.
    """
    # X-Forwarded-For may contain multiple IPs; take the first one
    forwarded = headers.get("X-Forwarded-For", "")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    for header in ("Client-IP", "X-Real-IP"):
        value = (headers.get(header) or "").strip()
        if value:
            return value
    return UNKNOWN_CLIENT


class RateLimiter:
    """Interface: admit(client_key) -> True when the request may proceed."""

    limit = RATE_LIMIT
    window = RATE_WINDOW_SECONDS

    def admit(self, client_key: str) -> bool:
        raise NotImplementedError


class InMemoryRateLimiter(RateLimiter):
    def __init__(
        self,
        limit: int = RATE_LIMIT,
        window: float = RATE_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.limit = limit
        self.window = window
        self._clock = clock
        self._windows: Dict[str, Deque[float]] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, client_key: str) -> threading.Lock:
        lock = self._locks.get(client_key)
        if lock is None:
            with self._locks_guard:
                lock = self._locks.setdefault(client_key, threading.Lock())
        return lock

    def admit(self, client_key: str) -> bool:
        client_key = client_key or UNKNOWN_CLIENT
        with self._lock_for(client_key):
            now = self._clock()
            timestamps = self._windows.setdefault(client_key, deque())

            # Drop attempts that fell out of the trailing window
            while timestamps and now - timestamps[0] >= self.window:
                timestamps.popleft()

            if len(timestamps) >= self.limit:
                return False

            timestamps.append(now)
            return True


class UpstashRateLimiter(RateLimiter):
    def __init__(self, redis, limit: int = RATE_LIMIT, window: int = RATE_WINDOW_SECONDS,
                 prefix: str = "ratelimit:example"):
        from upstash_ratelimit import Ratelimit, SlidingWindow

        self.limit = limit
        self.window = window
        self._ratelimit = Ratelimit(
            redis=redis,
            limiter=SlidingWindow(max_requests=limit, window=window),
            prefix=prefix,
        )

    def admit(self, client_key: str) -> bool:
        client_key = client_key or UNKNOWN_CLIENT
        try:
            result = self._ratelimit.limit(client_key)
            return result.allowed
        except Exception as e:
            # If rate limiting fails, allow the request (fail open)
            print(f"[RATELIMIT] Upstash check failed, admitting {client_key}: {e}")
            return True
