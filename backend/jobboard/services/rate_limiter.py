"""Rate limiter — token bucket per client key."""

import threading
import time
from collections import defaultdict
from typing import Optional

from jobboard.config import get_settings


class TokenBucketRateLimiter:
    """In-memory token bucket rate limiter.

    Buckets hold up to `burst` tokens and refill at `requests_per_minute`.
    A bucket idle long enough to be full again is dropped on the next sweep,
    since a fresh bucket is identical to it.
    For production with multiple instances, swap to a shared backend.
    """

    def __init__(
        self,
        requests_per_minute: Optional[int] = None,
        burst: Optional[int] = None,
    ):
        settings = get_settings()
        self.requests_per_minute = requests_per_minute or settings.RATE_LIMIT_REQUESTS_PER_MINUTE
        self.max_tokens = burst or settings.RATE_LIMIT_BURST
        self._rate = self.requests_per_minute / 60.0
        self._idle_seconds = self.max_tokens / self._rate
        self._sweep_interval = max(self._idle_seconds, 60.0)
        self._last_sweep = time.monotonic()
        self._lock = threading.Lock()
        self._buckets: dict = defaultdict(
            lambda: {"tokens": float(self.max_tokens), "last_refill": time.monotonic()}
        )

    def _refill(self, bucket: dict, now: float) -> None:
        elapsed = now - bucket["last_refill"]
        bucket["tokens"] = min(self.max_tokens, bucket["tokens"] + elapsed * self._rate)
        bucket["last_refill"] = now

    def _sweep(self, now: float) -> None:
        if now - self._last_sweep < self._sweep_interval:
            return
        idle = [key for key, bucket in self._buckets.items() if now - bucket["last_refill"] >= self._idle_seconds]
        for key in idle:
            del self._buckets[key]
        self._last_sweep = now

    def __len__(self) -> int:
        """Number of client keys currently tracked."""
        with self._lock:
            return len(self._buckets)

    def allow_request(self, key: str = "global") -> bool:
        """Check if a request is allowed and consume a token.

        Args:
            key: Rate limit key (e.g., client IP or "global")

        Returns:
            True if request is allowed, False if rate limited
        """
        with self._lock:
            now = time.monotonic()
            self._sweep(now)
            bucket = self._buckets[key]
            self._refill(bucket, now)
            if bucket["tokens"] >= 1:
                bucket["tokens"] -= 1
                return True
            return False

    def remaining_tokens(self, key: str = "global") -> int:
        """Get remaining tokens for a key without consuming."""
        with self._lock:
            bucket = self._buckets.get(key)
            if bucket is None:
                return self.max_tokens
            self._refill(bucket, time.monotonic())
            return int(bucket["tokens"])

    def reset_time(self, key: str = "global") -> float:
        """Seconds until the next token is available."""
        with self._lock:
            bucket = self._buckets.get(key)
            if bucket is None:
                return 0
            self._refill(bucket, time.monotonic())
            missing = 1 - bucket["tokens"]
            return max(0.0, missing / self._rate)
