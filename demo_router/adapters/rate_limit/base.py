"""Rate limiter interfaces.

The dispatcher depends on this abstraction (not the concrete implementation)
so the storage backend can be swapped later with minimal changes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitResult:
    """Result of a rate limit check/consume operation.

    Attributes:
        allowed: Whether the request is allowed to proceed.
        limit: Max requests per window.
        remaining: Requests still admissible in the trailing window (0 when blocked).
        reset_at: UNIX epoch seconds when the oldest counted request leaves the window.
        retry_after_seconds: Suggested wait time in seconds when blocked.
    """

    allowed: bool
    limit: int
    remaining: int
    reset_at: int
    retry_after_seconds: int | None


class AbstractRateLimiter(ABC):
    """Interface for rate limiters."""

    @abstractmethod
    def consume(self, identifier: str) -> RateLimitResult:
        """Evaluate one request for ``identifier`` and record it when admitted.

        Args:
            identifier: Partition key, typically the client network address.

        Returns:
            RateLimitResult describing whether it was allowed.
        """
        raise NotImplementedError

    def is_allowed(self, identifier: str) -> bool:
        """Shorthand for ``consume(identifier).allowed``."""
        return self.consume(identifier).allowed
