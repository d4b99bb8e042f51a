"""In-memory sliding-window rate limiter.

Notes:
- Per-process only: running multiple workers or instances multiplies the
  effective limit.
- Thread-safe: each check is a single read-modify-write under a lock, with no
  await point inside, so it is also atomic for coroutines sharing a loop.
"""

from __future__ import annotations

import logging
import math
import random
import threading
import time
from collections import deque
from typing import Callable

from demo_router.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult

logger = logging.getLogger(__name__)


class InMemorySlidingWindowRateLimiter(AbstractRateLimiter):
    """Rate limiter counting admissions in the trailing ``window_ms`` interval.

    Each identifier maps to the ordered timestamps of its admitted requests.
    On every check, timestamps at or before ``now - window`` are dropped; the
    request is admitted only if fewer than ``limit`` remain, and only admitted
    requests are recorded.

    Idle identifiers are reclaimed by an occasional sweep over the whole table,
    triggered on a random fraction of admitted calls, so memory stays bounded by
    the number of recently active clients.
    """

    def __init__(
        self,
        *,
        limit: int,
        window_ms: int,
        clock: Callable[[], float] = time.time,
        cleanup_probability: float = 0.01,
        rng: Callable[[], float] = random.random,
    ) -> None:
        """Initialize the limiter.

        Args:
            limit: Maximum number of admitted requests per window.
            window_ms: Window length in milliseconds.
            clock: Time source returning UNIX time in seconds.
            cleanup_probability: Chance in [0, 1] that an admitted call sweeps the table.
            rng: Random source returning floats in [0, 1).

        Raises:
            ValueError: If any argument is out of range.
        """
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if window_ms < 1:
            raise ValueError("window_ms must be >= 1")
        if not 0.0 <= cleanup_probability <= 1.0:
            raise ValueError("cleanup_probability must be within [0, 1]")

        self._limit = limit
        self._window_ms = window_ms
        self._window_seconds = window_ms / 1000.0
        self._clock = clock
        self._cleanup_probability = cleanup_probability
        self._rng = rng
        self._lock = threading.RLock()
        self._timestamps_by_key: dict[str, deque[float]] = {}

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def window_ms(self) -> int:
        return self._window_ms

    def __len__(self) -> int:
        """Number of identifiers currently tracked."""
        with self._lock:
            return len(self._timestamps_by_key)

    def _prune(self, timestamps: deque[float], window_start: float) -> None:
        while timestamps and timestamps[0] <= window_start:
            timestamps.popleft()

    def _reset_at(self, timestamps: deque[float], now: float) -> float:
        if not timestamps:
            return now
        return timestamps[0] + self._window_seconds

    def consume(self, identifier: str) -> RateLimitResult:
        """Check ``identifier`` against its trailing window and record the request if admitted.

        Raises:
            ValueError: If identifier is empty.
        """
        if not identifier:
            raise ValueError("identifier must be a non-empty string")

        with self._lock:
            now = self._clock()
            window_start = now - self._window_seconds

            timestamps = self._timestamps_by_key.get(identifier)
            if timestamps is not None:
                self._prune(timestamps, window_start)

            if timestamps and len(timestamps) >= self._limit:
                reset_at = self._reset_at(timestamps, now)
                return RateLimitResult(
                    allowed=False,
                    limit=self._limit,
                    remaining=0,
                    reset_at=int(math.ceil(reset_at)),
                    retry_after_seconds=max(1, int(math.ceil(reset_at - now))),
                )

            if timestamps is None:
                timestamps = deque()
                self._timestamps_by_key[identifier] = timestamps
            timestamps.append(now)

            result = RateLimitResult(
                allowed=True,
                limit=self._limit,
                remaining=self._limit - len(timestamps),
                reset_at=int(math.ceil(self._reset_at(timestamps, now))),
                retry_after_seconds=None,
            )

            if self._rng() < self._cleanup_probability:
                self._sweep(now)

            return result

    def _sweep(self, now: float) -> None:
        """Prune every sequence to the window and drop identifiers left empty.

        Caller must hold the lock.
        """
        window_start = now - self._window_seconds
        before = len(self._timestamps_by_key)
        for key in list(self._timestamps_by_key):
            timestamps = self._timestamps_by_key[key]
            self._prune(timestamps, window_start)
            if not timestamps:
                del self._timestamps_by_key[key]

        logger.debug(
            "rate_limit.sweep",
            extra={
                "tracked_before": before,
                "tracked_after": len(self._timestamps_by_key),
            },
        )

    def cleanup(self) -> None:
        """Run a full sweep immediately."""
        with self._lock:
            self._sweep(self._clock())
