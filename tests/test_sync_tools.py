import threading
from collections import Counter as Tally

import pytest

from fieldnotes.concurrency.sync_tools import Counter, TokenBucket, timed_operation


class FakeClock:
    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


def bucket(clock, rate=2, burst=2):
    return TokenBucket(rate, burst, clock=clock, sleep=clock.sleep)


def test_counter_is_safe_under_concurrency():
    counter = Counter()
    keys = ["task", "task", "email", "task", "email", "db"]

    def bump(key):
        for _ in range(1000):
            counter.inc(key)

    threads = [threading.Thread(target=bump, args=(k,)) for k in keys]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    expected = {key: n * 1000 for key, n in Tally(keys).items()}
    assert counter.snapshot() == expected


def test_snapshot_is_a_copy():
    counter = Counter()
    counter.inc("a")
    snap = counter.snapshot()
    snap["a"] = 100
    counter.inc("a")
    assert counter.snapshot()["a"] == 2


def test_allow_spends_burst_then_refills():
    clock = FakeClock()
    limiter = bucket(clock)
    assert [limiter.allow() for _ in range(3)] == [True, True, False]
    clock.now += 0.5
    assert limiter.allow() is True


def test_wait_spaces_requests_after_burst():
    clock = FakeClock()
    limiter = bucket(clock)
    waits = [limiter.wait() for _ in range(4)]
    assert waits[:2] == [0.0, 0.0]
    assert waits[2] == pytest.approx(1 / limiter.rate)
    assert waits[3] == pytest.approx(waits[2])
    assert clock.sleeps == waits[2:]


def test_wait_timeout_raises_without_taking_token():
    clock = FakeClock()
    limiter = bucket(clock)
    limiter.wait()
    limiter.wait()
    with pytest.raises(TimeoutError):
        limiter.wait(timeout=0.1)
    clock.now += 0.5
    assert limiter.allow() is True


@pytest.mark.parametrize("rate, burst", [(0, 1), (-1, 1), (1, 0)])
def test_invalid_limits_rejected(rate, burst):
    with pytest.raises(ValueError):
        TokenBucket(rate, burst)


def test_timed_operation_finishes_before_deadline():
    spent = timed_operation(0.5, 0.02)
    assert 0.02 <= spent < 0.5


def test_timed_operation_hits_deadline():
    with pytest.raises(TimeoutError):
        timed_operation(0.01, 0.5)