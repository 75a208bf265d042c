import pytest

from lecture_transcriber.rate_limiter import RateLimiter


class FakeClock:
    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


def test_calls_within_limit_do_not_wait():
    clock = FakeClock()
    limiter = RateLimiter(3, 60.0, clock=clock, sleep=clock.sleep)

    assert [limiter.acquire() for _ in range(3)] == [0.0, 0.0, 0.0]
    assert clock.sleeps == []


def test_call_over_limit_waits_for_the_oldest_to_expire():
    clock = FakeClock()
    limiter = RateLimiter(2, 60.0, clock=clock, sleep=clock.sleep)

    limiter.acquire()
    clock.now = 10.0
    limiter.acquire()
    clock.now = 20.0

    assert limiter.acquire() == pytest.approx(40.0)
    assert clock.now == pytest.approx(60.0)


def test_window_slides():
    clock = FakeClock()
    limiter = RateLimiter(1, 5.0, clock=clock, sleep=clock.sleep)

    limiter.acquire()
    clock.now = 5.0

    assert limiter.acquire() == 0.0


def test_rejects_non_positive_limit():
    with pytest.raises(ValueError):
        RateLimiter(0, 1.0)
