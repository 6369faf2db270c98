"""Tests for call pacing."""

import pytest

from src.classification.rate_limit import FixedIntervalLimiter, RateLimiter


class FakeClock:
    """Monotonic clock advanced by hand and by sleep()."""

    def __init__(self):
        self.now = 100.0
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


class TestFixedIntervalLimiter:
    def test_is_rate_limiter(self):
        assert isinstance(FixedIntervalLimiter(0.1), RateLimiter)

    def test_first_call_does_not_wait(self, clock):
        limiter = FixedIntervalLimiter(0.2, sleep=clock.sleep, clock=clock)

        with limiter.acquire():
            pass

        assert clock.sleeps == []

    def test_second_call_waits_full_interval(self, clock):
        limiter = FixedIntervalLimiter(0.2, sleep=clock.sleep, clock=clock)

        with limiter.acquire():
            pass
        with limiter.acquire():
            pass

        assert clock.sleeps == [pytest.approx(0.2)]

    def test_interval_measured_from_end_of_call(self, clock):
        """Time spent inside the call does not count toward the pause."""
        limiter = FixedIntervalLimiter(0.2, sleep=clock.sleep, clock=clock)

        with limiter.acquire():
            clock.now += 5.0
        clock.now += 0.05
        with limiter.acquire():
            pass

        assert clock.sleeps == [pytest.approx(0.15)]

    def test_no_wait_when_interval_already_elapsed(self, clock):
        limiter = FixedIntervalLimiter(0.1, sleep=clock.sleep, clock=clock)

        with limiter.acquire():
            pass
        clock.now += 1.0
        with limiter.acquire():
            pass

        assert clock.sleeps == []

    def test_failed_call_still_paces_next(self, clock):
        limiter = FixedIntervalLimiter(0.1, sleep=clock.sleep, clock=clock)

        with pytest.raises(RuntimeError):
            with limiter.acquire():
                raise RuntimeError("service down")
        with limiter.acquire():
            pass

        assert clock.sleeps == [pytest.approx(0.1)]

    def test_zero_interval_never_sleeps(self, clock):
        limiter = FixedIntervalLimiter(0, sleep=clock.sleep, clock=clock)

        for _ in range(3):
            with limiter.acquire():
                pass

        assert clock.sleeps == []

    def test_negative_interval_rejected(self):
        with pytest.raises(ValueError):
            FixedIntervalLimiter(-1)
