"""Unit tests for the in-memory sliding-window rate limiter."""

import threading
from unittest.mock import Mock

import pytest

from demo_router.adapters.rate_limit.in_memory import InMemorySlidingWindowRateLimiter


def _limiter(clock: Mock, **kwargs) -> InMemorySlidingWindowRateLimiter:
    kwargs.setdefault("cleanup_probability", 0.0)
    return InMemorySlidingWindowRateLimiter(clock=clock, **kwargs)


def test_allows_up_to_limit_within_window() -> None:
    clock = Mock(return_value=1000.0)
    limiter = _limiter(clock, limit=3, window_ms=1000)

    assert limiter.is_allowed("k") is True
    assert limiter.is_allowed("k") is True
    result = limiter.consume("k")
    assert result.allowed is True
    assert result.remaining == 0


def test_fourth_request_rejected_then_allowed_after_window() -> None:
    clock = Mock(return_value=1000.0)
    limiter = _limiter(clock, limit=3, window_ms=1000)

    for _ in range(3):
        assert limiter.is_allowed("k") is True
    assert limiter.is_allowed("k") is False

    clock.return_value = 1001.0
    assert limiter.is_allowed("k") is True


def test_window_slides_instead_of_resetting_on_boundaries() -> None:
    clock = Mock(return_value=1000.0)
    limiter = _limiter(clock, limit=2, window_ms=1000)

    assert limiter.is_allowed("k") is True
    clock.return_value = 1000.6
    assert limiter.is_allowed("k") is True

    # Only the first request has left the trailing window.
    clock.return_value = 1001.2
    assert limiter.is_allowed("k") is True
    assert limiter.is_allowed("k") is False

    clock.return_value = 1001.7
    assert limiter.is_allowed("k") is True


def test_rejected_attempts_are_not_recorded() -> None:
    clock = Mock(return_value=1000.0)
    limiter = _limiter(clock, limit=1, window_ms=1000)

    assert limiter.is_allowed("k") is True
    clock.return_value = 1000.5
    assert limiter.is_allowed("k") is False
    assert limiter.is_allowed("k") is False

    # Had the rejections been recorded, the key would still be blocked here.
    clock.return_value = 1001.0
    assert limiter.is_allowed("k") is True


def test_blocked_result_carries_retry_guidance() -> None:
    clock = Mock(return_value=1000.0)
    limiter = _limiter(clock, limit=2, window_ms=60_000)

    limiter.consume("k")
    limiter.consume("k")

    clock.return_value = 1010.0
    blocked = limiter.consume("k")
    assert blocked.allowed is False
    assert blocked.limit == 2
    assert blocked.remaining == 0
    assert blocked.reset_at == 1060
    assert blocked.retry_after_seconds == 50


def test_isolated_by_identifier() -> None:
    clock = Mock(return_value=1000.0)
    limiter = _limiter(clock, limit=1, window_ms=60_000)

    assert limiter.is_allowed("k1") is True
    assert limiter.is_allowed("k1") is False

    for n in range(2, 20):
        assert limiter.is_allowed(f"k{n}") is True


def test_cleanup_drops_idle_identifiers() -> None:
    clock = Mock(return_value=1000.0)
    limiter = _limiter(clock, limit=5, window_ms=1000)

    limiter.consume("a")
    limiter.consume("b")
    assert len(limiter) == 2

    clock.return_value = 1000.5
    limiter.consume("b")

    clock.return_value = 1001.2
    limiter.cleanup()
    assert len(limiter) == 1


def test_random_sweep_runs_on_admitted_calls() -> None:
    clock = Mock(return_value=1000.0)
    rng = Mock(return_value=0.5)
    limiter = InMemorySlidingWindowRateLimiter(
        limit=5, window_ms=1000, clock=clock, cleanup_probability=0.01, rng=rng
    )

    limiter.consume("idle")
    clock.return_value = 1005.0
    limiter.consume("active")
    assert len(limiter) == 2

    rng.return_value = 0.001
    limiter.consume("active")
    assert len(limiter) == 1


def test_concurrent_consumers_never_exceed_limit() -> None:
    limiter = InMemorySlidingWindowRateLimiter(limit=50, window_ms=60_000, cleanup_probability=0.5)
    admitted: list[bool] = []
    lock = threading.Lock()

    def worker() -> None:
        for _ in range(20):
            allowed = limiter.is_allowed("shared")
            with lock:
                admitted.append(allowed)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sum(admitted) == 50


def test_limit_and_window_are_read_only() -> None:
    limiter = InMemorySlidingWindowRateLimiter(limit=3, window_ms=1000)

    assert limiter.limit == 3
    assert limiter.window_ms == 1000
    with pytest.raises(AttributeError):
        limiter.limit = 10  # type: ignore[misc]


@pytest.mark.parametrize(
    "kwargs",
    [
        {"limit": 0, "window_ms": 1000},
        {"limit": 1, "window_ms": 0},
        {"limit": 1, "window_ms": 1000, "cleanup_probability": 1.5},
    ],
)
def test_invalid_constructor_args(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        InMemorySlidingWindowRateLimiter(**kwargs)


def test_empty_identifier_rejected() -> None:
    limiter = InMemorySlidingWindowRateLimiter(limit=1, window_ms=1000)

    with pytest.raises(ValueError):
        limiter.consume("")
