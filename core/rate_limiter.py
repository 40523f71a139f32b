"""
Per-identifier request rate limiting.

``FixedWindowRateLimiter`` counts requests in a fixed window that starts at an
identifier's first request. Bursts straddling a window boundary can let up to
twice the ceiling through in a short span; swap in another ``RateLimiter``
implementation if that matters.
"""
import logging
import math
import threading
import time
from abc import ABC, abstractmethod
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateDecision:
    allowed: bool
    retry_after_seconds: Optional[int] = None


@dataclass
class RateBucket:
    count: int
    window_start: float


class RateLimiter(ABC):
    @abstractmethod
    def check(self, identifier: str) -> RateDecision:
        """Record one request for ``identifier`` and decide whether it may proceed"""


class FixedWindowRateLimiter(RateLimiter):
    """
    Fixed-window counter with a bounded, LRU-ordered bucket table.

    Args:
        max_requests: Requests allowed per window
        window_seconds: Window length
        max_buckets: Upper bound on tracked identifiers
        clock: Monotonic time source in seconds
    """

    def __init__(self, max_requests: int = 20, window_seconds: float = 60.0,
                 max_buckets: int = 10000, clock: Callable[[], float] = time.monotonic):
        if max_requests < 1 or window_seconds <= 0 or max_buckets < 1:
            raise ValueError("max_requests, window_seconds and max_buckets must be positive")
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.max_buckets = max_buckets
        self._clock = clock
        self._buckets: "OrderedDict[str, RateBucket]" = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self):
        with self._lock:
            return len(self._buckets)

    def check(self, identifier: str) -> RateDecision:
        with self._lock:
            # Read under the lock so window starts never run ahead of now
            now = self._clock()
            bucket = self._buckets.get(identifier)
            if bucket is None:
                self._make_room(now)
                bucket = RateBucket(count=0, window_start=now)
                self._buckets[identifier] = bucket
            else:
                self._buckets.move_to_end(identifier)

            elapsed = now - bucket.window_start
            if elapsed > self.window_seconds:
                bucket.count = 0
                bucket.window_start = now
                elapsed = 0.0

            bucket.count += 1
            count = bucket.count

        if count > self.max_requests:
            retry_after = max(1, math.ceil(self.window_seconds - elapsed))
            logger.warning(f"Rate limit exceeded for {identifier}: {count}/{self.max_requests}, "
                           f"retry in {retry_after}s")
            return RateDecision(allowed=False, retry_after_seconds=retry_after)

        return RateDecision(allowed=True)

    def prune(self) -> int:
        """Drop buckets whose window has expired. Returns the number removed."""
        with self._lock:
            return self._prune_expired(self._clock())

    def reset(self):
        with self._lock:
            self._buckets.clear()

    def _prune_expired(self, now: float) -> int:
        expired = [
            key for key, bucket in self._buckets.items()
            if now - bucket.window_start > self.window_seconds
        ]
        for key in expired:
            del self._buckets[key]
        return len(expired)

    def _make_room(self, now: float):
        # Caller holds the lock.
        if len(self._buckets) < self.max_buckets:
            return
        self._prune_expired(now)
        while len(self._buckets) >= self.max_buckets:
            evicted, _ = self._buckets.popitem(last=False)
            logger.debug(f"Evicted rate bucket for {evicted}")
