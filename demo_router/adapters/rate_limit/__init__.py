"""Rate limiting adapters.

The router only talks to ``AbstractRateLimiter``. The in-memory sliding window
implementation is per-process; a shared external counter can be dropped in
behind the same interface for multi-instance deployments.
"""

from demo_router.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from demo_router.adapters.rate_limit.in_memory import InMemorySlidingWindowRateLimiter

__all__ = [
    "AbstractRateLimiter",
    "InMemorySlidingWindowRateLimiter",
    "RateLimitResult",
]
