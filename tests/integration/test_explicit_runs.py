"""
End-to-end explicit integration runs.

Periodic linear advection with a CFL-limited step size, temporal
convergence orders on the decay equation, and a YAML-configured run.
"""

from __future__ import annotations

import numpy as np
import pytest

from pdeflow import EquationBase, HistoryObserver, Integrator, IntegratorTraits
from pdeflow.config import load_run_config
from pdeflow.factory import create_integrator
from pdeflow.types import StateInfo


class UpwindAdvection(EquationBase):
    """Periodic first-order upwind discretization of u_t + a u_x = 0, a > 0."""

    supports_dt_advice = True

    def __init__(self, n: int, speed: float = 1.0):
        super().__init__()
        self.n = n
        self.h = 1.0 / n
        self.speed = speed
        self.x = (np.arange(n) + 0.5) * self.h

    def dt(self, t, u):
        return self.h / abs(self.speed)

    def dudt(self, t, u, uf=None):
        return -self.speed * (u - np.roll(u, 1)) / self.h


class Decay(EquationBase):
    def dudt(self, t, u, uf=None):
        return -u


@pytest.fixture
def advection():
    eq = UpwindAdvection(50)
    eq.set_stepper("exrk2")
    return eq


def test_advection_lands_on_end_time(advection):
    u = np.exp(-100.0 * (advection.x - 0.3) ** 2)
    mass0 = u.sum() * advection.h
    lo, hi = u.min(), u.max()

    history = HistoryObserver()
    traits = IntegratorTraits(integ_type="time", dt=1.0, courant=0.8, time_end=0.37)
    integ = Integrator(advection, observers=[history], traits=traits)
    integ.init_observers(StateInfo.from_state(u))

    t = integ.time_integrate(0.0, None, u)

    assert t == 0.37
    assert integ.cycle == 24
    assert history.times[-1] == 0.37

    steps = history.steps[:-1]
    assert np.all(steps <= 0.8 * advection.h * (1 + 1e-12))
    assert steps[-1] < 0.8 * advection.h
    np.testing.assert_allclose(steps.sum(), 0.37, rtol=1e-12)

    assert u.sum() * advection.h == pytest.approx(mass0, rel=1e-12)
    assert u.min() >= lo - 1e-12
    assert u.max() <= hi + 1e-12


def test_advection_peak_moves_downstream(advection):
    u = np.exp(-100.0 * (advection.x - 0.3) ** 2)
    traits = IntegratorTraits(integ_type="time", dt=1.0, courant=0.5, time_end=0.2)

    Integrator(advection, traits=traits).time_integrate(0.0, None, u)

    peak = advection.x[np.argmax(u)]
    assert peak == pytest.approx(0.5, abs=2 * advection.h)


def _decay_error(stepper: str, dt: float, **kwargs) -> float:
    eq = Decay()
    eq.set_stepper(stepper, **kwargs)
    u = np.ones(1)
    traits = IntegratorTraits(integ_type="time", dt=dt, time_end=1.0)
    Integrator(eq, traits=traits).time_integrate(0.0, None, u)
    return abs(u[0] - np.exp(-1.0))


@pytest.mark.parametrize(("stepper", "order"), [("euler", 1), ("exrk2", 2), ("exrk4", 4)])
def test_one_step_convergence_order(stepper, order):
    coarse = _decay_error(stepper, 0.1)
    fine = _decay_error(stepper, 0.05)

    observed = np.log2(coarse / fine)
    assert observed == pytest.approx(order, abs=0.3)


def test_adams_bashforth_second_order():
    coarse = _decay_error("ab", 0.02, order=2)
    fine = _decay_error("ab", 0.01, order=2)

    assert np.log2(coarse / fine) > 1.7


def test_yaml_configured_checkpoint_run(tmp_path):
    path = tmp_path / "decay.yaml"
    path.write_text(
        "integrator:\n"
        "  integ_type: list\n"
        "  times: [0.0, 0.25, 1.0]\n"
        "  dt_max: 0.1\n"
        "stepper:\n"
        "  name: exrk4\n"
        "observers:\n"
        "  - kind: history\n"
    )
    config = load_run_config(path, overrides=["integrator.dt_max=0.05"])

    u = np.ones(3)
    integ = create_integrator(config, Decay(), configure_logger=False)
    t = integ.time_integrate(0.0, None, u)
    history = integ.observers[0]

    assert t == 1.0
    assert integ.cycle == 20
    assert len(history.snapshots) == 22
    assert list(history.times).count(0.25) == 2
    np.testing.assert_allclose(u, np.exp(-1.0), rtol=1e-6)
