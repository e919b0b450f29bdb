from __future__ import annotations

import pytest

from src.edumark.edumark.core.exceptions import RateLimitedError, UpstreamError
from src.edumark.edumark.imports.retry.exponential_backoff import ExponentialBackoff
from src.edumark.edumark.imports.retry.no_retry import NoRetry


class Flaky:
    def __init__(self, failures: int, exc=RateLimitedError):
        self.failures = failures
        self.calls = 0
        self.exc = exc

    def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.exc("busy")
        return "ok"


def test_backoff_doubles_delay():
    policy = ExponentialBackoff(base_delay=3.0, sleep=lambda _: None)

    assert [policy.delay_for(n) for n in (1, 2, 3, 4)] == [3.0, 6.0, 12.0, 24.0]


def test_backoff_gives_up_after_max_attempts():
    waits = []
    policy = ExponentialBackoff(max_attempts=3, base_delay=1.0, sleep=waits.append)
    op = Flaky(failures=10)

    with pytest.raises(RateLimitedError):
        policy.run(op, label="S1")

    assert op.calls == 3
    assert waits == [1.0, 2.0]


def test_backoff_does_not_retry_other_errors():
    waits = []
    policy = ExponentialBackoff(sleep=waits.append)
    op = Flaky(failures=1, exc=UpstreamError)

    with pytest.raises(UpstreamError):
        policy.run(op)

    assert op.calls == 1
    assert waits == []


def test_backoff_rejects_zero_attempts():
    with pytest.raises(ValueError):
        ExponentialBackoff(max_attempts=0)


def test_no_retry_calls_once():
    op = Flaky(failures=1)

    with pytest.raises(RateLimitedError):
        NoRetry().run(op)
    assert op.calls == 1
