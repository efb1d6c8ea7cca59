"""
Pytest configuration and shared fixtures for the pdeflow test suite.

This module provides the markers, small model equations, and recording
observers/mixers used across the unit and integration tests.
"""

from __future__ import annotations

import numpy as np
import pytest
import scipy.sparse as sp

from pdeflow.core.equation import EquationBase
from pdeflow.core.mixer import MixerBase
from pdeflow.observers.base import ObserverBase

# =============================================================================
# Test Configuration
# =============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests (slower, cross-component)")
    config.addinivalue_line("markers", "slow: Slow tests (may take >10 seconds)")


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers based on test paths."""
    for item in items:
        test_path = str(item.fspath)

        if "/unit/" in test_path:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)

        if "large" in item.name or "slow" in item.name:
            item.add_marker(pytest.mark.slow)


# =============================================================================
# Model Equations
# =============================================================================


class DecayEquation(EquationBase):
    """du/dt = -rate * u + uf, counting every step it is asked to take."""

    def __init__(self, rate=1.0, advice=None, events=None):
        super().__init__()
        self.rate = rate
        self.advice = advice
        self.events = events
        self.step_sizes: list[float] = []
        self.step_times: list[float] = []

    @property
    def supports_dt_advice(self):
        return self.advice is not None

    @property
    def nsteps(self):
        return len(self.step_sizes)

    def dt(self, t, u):
        return self.advice(t, u) if callable(self.advice) else self.advice

    def dudt(self, t, u, uf=None):
        rhs = -self.rate * u
        if uf is not None:
            rhs = rhs + uf
        return rhs

    def step(self, t, u, dt, uf=None):
        if self.events is not None:
            self.events.append(("step", t, dt))
        self.step_sizes.append(dt)
        self.step_times.append(t)
        super().step(t, u, dt, uf)


class RecordingObserver(ObserverBase):
    """Observer keeping every (t, dt) it acts on."""

    def __init__(self, traits=None, events=None, tag="observe"):
        super().__init__(traits)
        self.events = events
        self.tag = tag
        self.calls: list[tuple[float, float]] = []
        self.init_calls = 0

    def init(self, info):
        super().init(info)
        self.init_calls += 1

    def _observe_impl(self, t, dt, u, uf):
        self.calls.append((t, dt))
        if self.events is not None:
            self.events.append((self.tag, t, dt))


class RecordingMixer(MixerBase):
    def __init__(self, events=None):
        self.events = events
        self.times: list[float] = []

    def mix(self, t, u, uf):
        self.times.append(t)
        if self.events is not None:
            self.events.append(("mix", t, None))


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def decay_equation():
    """Decay equation with an explicit RK2 stepper attached."""
    eq = DecayEquation(rate=1.0)
    eq.set_stepper("exrk2")
    return eq


@pytest.fixture
def bare_decay():
    """Decay equation without a stepper."""
    return DecayEquation(rate=1.0)


@pytest.fixture
def make_decay():
    """Factory for decay equations with a chosen stepper and advice."""

    def _make(rate=1.0, advice=None, stepper="euler", events=None, **kwargs):
        eq = DecayEquation(rate=rate, advice=advice, events=events)
        eq.set_stepper(stepper, **kwargs)
        return eq

    return _make


@pytest.fixture
def recording_observer():
    return RecordingObserver()


@pytest.fixture
def make_observer():
    return RecordingObserver


@pytest.fixture
def make_mixer():
    return RecordingMixer


@pytest.fixture
def state():
    """Small state vector owned by the test."""
    return np.ones(4)


@pytest.fixture
def spd_matrix():
    """1D stiffness matrix tridiag(-1, 2, -1), symmetric positive definite."""
    n = 20
    return sp.diags([-np.ones(n - 1), 2.0 * np.ones(n), -np.ones(n - 1)], [-1, 0, 1], format="csr")
