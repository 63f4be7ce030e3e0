import pytest

from vrboot.errors import CommandError, MalformedBootstrapError, NotReadyError, ReadinessTimeout
from vrboot.utils.readiness import wait_until


class FakeClock:
    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


def _flaky(failures, exc=None):
    calls = {"n": 0}

    def predicate():
        calls["n"] += 1
        if calls["n"] <= failures:
            if exc:
                raise exc
            return False
        return True

    return predicate, calls


def test_succeeds_on_poll_after_k_failures():
    clock = FakeClock()
    predicate, calls = _flaky(3)
    polls = wait_until(predicate, timeout=10, interval=1, description="x", clock=clock, sleep=clock.sleep)
    assert polls == 4
    assert calls["n"] == 4
    assert clock.now == 3


def test_immediate_success_does_not_sleep():
    clock = FakeClock()
    assert wait_until(lambda: True, timeout=1, interval=1, description="x", clock=clock, sleep=clock.sleep) == 1
    assert clock.sleeps == []


def test_never_ready_aborts_exactly_at_timeout():
    clock = FakeClock()
    predicate, calls = _flaky(10_000)
    with pytest.raises(ReadinessTimeout) as ei:
        wait_until(predicate, timeout=5, interval=1, description="iptables", clock=clock, sleep=clock.sleep)
    assert clock.now == 5
    assert calls["n"] == 6
    assert "iptables" in str(ei.value)
    assert ei.value.timeout == 5


def test_last_sleep_is_clipped_to_the_deadline():
    clock = FakeClock()
    with pytest.raises(ReadinessTimeout):
        wait_until(lambda: False, timeout=2.5, interval=1, description="x", clock=clock, sleep=clock.sleep)
    assert clock.sleeps == [1, 1, 0.5]
    assert clock.now == 2.5


@pytest.mark.parametrize("exc", [NotReadyError("not yet"), CommandError(["iptables-save"], 1), OSError("gone")])
def test_transient_errors_count_as_not_ready(exc):
    clock = FakeClock()
    predicate, calls = _flaky(2, exc=exc)
    assert wait_until(predicate, timeout=10, interval=0.5, description="x", clock=clock, sleep=clock.sleep) == 3
    assert clock.now == 1.0


def test_malformed_input_is_not_retried():
    clock = FakeClock()
    predicate, calls = _flaky(5, exc=MalformedBootstrapError("garbage"))
    with pytest.raises(MalformedBootstrapError):
        wait_until(predicate, timeout=10, interval=1, description="x", clock=clock, sleep=clock.sleep)
    assert calls["n"] == 1
    assert clock.sleeps == []
