"""
Implicit diffusion driven by the integrator, with every step solved by CG.

The heat equation u_t = u_xx on (0, 1) with homogeneous Dirichlet ends is
discretized by second-order finite differences and advanced by backward
Euler. The sine mode is an eigenvector of the discrete operator, so each
step damps it by exactly 1 / (1 + dt * lambda).
"""

from __future__ import annotations

import numpy as np
import scipy.sparse as sp

from pdeflow import (
    ConjugateGradientSolver,
    EquationBase,
    Integrator,
    IntegratorTraits,
    LinSolverTraits,
    PoissonSolver,
    SolveStatus,
)
from pdeflow.core.mixer import CallbackMixer


def stiffness(n: int, h: float) -> sp.csr_matrix:
    return sp.diags([-np.ones(n - 1), 2.0 * np.ones(n), -np.ones(n - 1)], [-1, 0, 1], format="csr") / h**2


class BackwardEulerHeat(EquationBase):
    """Solve (I + dt K) u_new = u_old + dt * uf at every step."""

    def __init__(self, n: int, traits: LinSolverTraits):
        super().__init__()
        self.h = 1.0 / (n + 1)
        self.x = self.h * np.arange(1, n + 1)
        self.K = stiffness(n, self.h)
        self.identity = sp.identity(n, format="csr")
        self.solver = ConjugateGradientSolver(traits)
        self.statuses: list[SolveStatus] = []

    def dudt(self, t, u, uf=None):
        rhs = -(self.K @ u)
        return rhs if uf is None else rhs + uf

    def step(self, t, u, dt, uf=None):
        b = u.copy() if uf is None else u + dt * uf
        self.statuses.append(self.solver.solve(self.identity + dt * self.K, b, u))


class SegmentGrid:
    def __init__(self, n: int):
        self.n = n

    def volume_weights(self):
        w = np.full(self.n, 1.0 / (self.n - 1))
        w[[0, -1]] *= 0.5
        return w

    def boundary_indices(self):
        return np.array([0, self.n - 1])


def test_sine_mode_decays_at_discrete_rate():
    eq = BackwardEulerHeat(31, LinSolverTraits(tol=1e-12, normtype="euc"))
    u = np.sin(np.pi * eq.x)
    u0 = u.copy()
    lam = (2.0 - 2.0 * np.cos(np.pi * eq.h)) / eq.h**2

    traits = IntegratorTraits(integ_type="time", dt=0.01, time_end=0.1)
    t = Integrator(eq, traits=traits).time_integrate(0.0, None, u)

    assert t == 0.1
    assert len(eq.statuses) == 10
    assert all(status == SolveStatus.CONVERGED for status in eq.statuses)
    np.testing.assert_allclose(u, u0 / (1.0 + 0.01 * lam) ** 10, rtol=1e-7, atol=1e-12)


def test_large_steps_stay_stable():
    eq = BackwardEulerHeat(31, LinSolverTraits(tol=1e-10))
    rng = np.random.default_rng(7)
    u = rng.standard_normal(31)

    traits = IntegratorTraits(integ_type="cycle", dt=1.0, cycle_end=5)
    Integrator(eq, traits=traits).time_integrate(0.0, None, u)

    assert all(status.converged for status in eq.statuses)
    assert np.max(np.abs(u)) < 1e-3


def test_forcing_drives_toward_steady_state():
    n = 31
    eq = BackwardEulerHeat(n, LinSolverTraits(tol=1e-12, normtype="l2"))
    f = np.full(n, 2.0)
    u = np.zeros(n)
    updates = []
    mixer = CallbackMixer(lambda t, u, uf: updates.append(t))

    traits = IntegratorTraits(integ_type="time", dt=0.5, time_end=20.0)
    Integrator(eq, mixer=mixer, traits=traits).time_integrate(0.0, f, u)

    # -u'' = 2 with u(0) = u(1) = 0, reproduced exactly by the 3-point stencil
    np.testing.assert_allclose(u, eq.x * (1.0 - eq.x), rtol=1e-6)
    assert len(updates) == 40
    assert mixer.calls == 40


def test_dirichlet_lifting_gives_linear_profile():
    n = 21
    h = 1.0 / (n - 1)
    grid = SegmentGrid(n)
    poisson = PoissonSolver(LinSolverTraits(bbdycond=True, tol=1e-12, normtype="l2"), stiffness(n, h), grid=grid)

    xb = np.zeros(n)
    xb[-1] = 1.0
    x = np.zeros(n)

    status = poisson.solve(np.zeros(n), xb, x)

    assert status == 0
    np.testing.assert_allclose(x, np.linspace(0.0, 1.0, n), atol=1e-10)
    assert poisson.iteration_count <= 2 * n
    assert poisson.resid_min == poisson.residuals[-1]
