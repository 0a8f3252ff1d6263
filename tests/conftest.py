"""Shared fixtures for the panel tests: a manual clock and polling helpers."""
import pytest


class FakeClock:
    """Manually advanced clock, in seconds."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms / 1000.0


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_sim(clock):
    """
    Factory for simulators driven by the shared fake clock.

    Usage:
        def test_something(make_sim):
            sim = make_sim(["6+/6A", "6B/6-"])
    """
    from minivac.panel import MinivacSimulator

    def _make(circuit, **kwargs):
        return MinivacSimulator(circuit, clock=clock, **kwargs)

    return _make


@pytest.fixture
def poll(clock):
    """
    Returns poll(sim, done, timeout_ms=10000, step_ms=10).

    Advances the clock by step_ms between get_state() calls, the way a UI
    polls, until done(state) holds. Returns (state, trace) where trace holds
    every polled state; state is None on timeout.
    """
    def _poll(sim, done, timeout_ms=10000, step_ms=10):
        trace = []
        elapsed = 0
        while elapsed <= timeout_ms:
            state = sim.get_state()
            trace.append(state)
            if done(state):
                return state, trace
            clock.advance(step_ms)
            elapsed += step_ms
        return None, trace

    return _poll
