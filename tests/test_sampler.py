"""Tests for the sampling loop and session lifecycle."""

import threading

import pytest

from conftest import FakeSampler, ManualTicker, make_snapshot
from procsnitch.consts.SessionState import SessionState
from procsnitch.exceptions import MetricParseError, SamplerStateError


def start_sampling(sampler, ticker, pid=1234):
    thread = threading.Thread(target=sampler.sample, args=(pid, ticker), daemon=True)
    thread.start()
    return thread


def wait_for(predicate, timeout=2.0):
    done = threading.Event()
    for _ in range(int(timeout / 0.01)):
        if predicate():
            return True
        done.wait(0.01)
    return predicate()


def test_one_snapshot_per_tick():
    sampler = FakeSampler()
    ticker = ManualTicker()
    thread = start_sampling(sampler, ticker)

    for expected in (1, 2, 3):
        ticker.fire()
        assert wait_for(lambda: len(sampler.get_data()) == expected)

    sampler.stop()
    thread.join(timeout=2.0)
    assert not thread.is_alive()
    assert sampler.state == SessionState.STOPPED
    assert sampler.get_data().get("CPU").values == [1.0, 2.0, 3.0]


def test_skipped_tick_appends_nothing():
    sampler = FakeSampler(script=lambda n: None if n == 2 else make_snapshot(float(n)))
    ticker = ManualTicker()
    thread = start_sampling(sampler, ticker)

    for expected_probes in (1, 2, 3):
        ticker.fire()
        assert wait_for(lambda: sampler.probes == expected_probes)

    sampler.stop()
    thread.join(timeout=2.0)
    store = sampler.get_data()
    assert [len(s) for s in store] == [2, 2, 2, 2, 2]
    assert store.get("MEM").values == [1.0, 3.0]


def test_stop_wakes_idle_loop():
    sampler = FakeSampler()
    ticker = ManualTicker()
    thread = start_sampling(sampler, ticker)
    assert wait_for(lambda: sampler.state == SessionState.ACTIVE)

    sampler.stop()
    thread.join(timeout=2.0)
    assert not thread.is_alive()
    assert len(sampler.get_data()) == 0


def test_stop_wins_over_pending_tick():
    """A tick that arrives together with stop is never consumed."""
    gate = threading.Event()
    in_probe = threading.Event()

    def script(n):
        if n == 1:
            in_probe.set()
            gate.wait(2.0)
        return make_snapshot(float(n))

    sampler = FakeSampler(script=script)
    ticker = ManualTicker()
    thread = start_sampling(sampler, ticker)

    ticker.fire()
    assert in_probe.wait(2.0)
    # Second tick is pending while stop is asserted
    ticker.fire()
    sampler.stop()
    gate.set()
    thread.join(timeout=2.0)

    assert not thread.is_alive()
    assert sampler.probes == 1
    assert len(sampler.get_data()) == 1


def test_stop_before_sample_returns_immediately():
    sampler = FakeSampler()
    ticker = ManualTicker()
    sampler.stop()
    ticker.fire()
    sampler.sample(1234, ticker)
    assert sampler.probes == 0
    assert sampler.state == SessionState.STOPPED


def test_second_stop_does_not_append():
    sampler = FakeSampler()
    ticker = ManualTicker()
    thread = start_sampling(sampler, ticker)
    ticker.fire()
    assert wait_for(lambda: len(sampler.get_data()) == 1)

    sampler.stop()
    thread.join(timeout=2.0)
    sampler.stop()
    assert len(sampler.get_data()) == 1
    assert sampler.state == SessionState.STOPPED


def test_sample_is_not_reentrant():
    sampler = FakeSampler()
    ticker = ManualTicker()
    sampler.stop()
    sampler.sample(1234, ticker)
    with pytest.raises(SamplerStateError):
        sampler.sample(1234, ticker)


def test_probe_error_ends_session():
    def script(n):
        raise MetricParseError("bad cpu")

    sampler = FakeSampler(script=script)
    ticker = ManualTicker()
    ticker.fire()
    with pytest.raises(MetricParseError):
        sampler.sample(1234, ticker)
    assert sampler.state == SessionState.STOPPED
    assert len(sampler.get_data()) == 0
