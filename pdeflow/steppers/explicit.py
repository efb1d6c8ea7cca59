"""
Explicit single-step Runge-Kutta schemes.

- EulerStepper: forward Euler, order 1
- RK2Stepper: Heun's method (the two-stage SSP scheme), order 2
- RK4Stepper: classical four-stage Runge-Kutta, order 4
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .base import StepperBase

if TYPE_CHECKING:
    from numpy.typing import NDArray


class EulerStepper(StepperBase):
    """Forward Euler: u_out = u + dt f(t, u)."""

    name = "euler"

    @property
    def order(self) -> int:
        return 1

    def _step_impl(self, t: float, u_in: NDArray, dt: float, u_out: NDArray, uf: NDArray | None) -> None:
        k1 = self._rhs(t, u_in, uf)
        u_out[...] = u_in + dt * k1


class RK2Stepper(StepperBase):
    """
    Two-stage strong-stability-preserving Runge-Kutta (Heun).

        u1    = u + dt k1,          k1 = f(t, u)
        u_out = u + dt/2 (k1 + k2), k2 = f(t + dt, u1)
    """

    name = "exrk2"

    @property
    def order(self) -> int:
        return 2

    def _step_impl(self, t: float, u_in: NDArray, dt: float, u_out: NDArray, uf: NDArray | None) -> None:
        k1 = self._rhs(t, u_in, uf)
        k2 = self._rhs(t + dt, u_in + dt * k1, uf)
        u_out[...] = u_in + 0.5 * dt * (k1 + k2)


class RK4Stepper(StepperBase):
    """Classical fourth-order Runge-Kutta."""

    name = "exrk4"

    @property
    def order(self) -> int:
        return 4

    def _step_impl(self, t: float, u_in: NDArray, dt: float, u_out: NDArray, uf: NDArray | None) -> None:
        half = 0.5 * dt
        k1 = self._rhs(t, u_in, uf)
        k2 = self._rhs(t + half, u_in + half * k1, uf)
        k3 = self._rhs(t + half, u_in + half * k2, uf)
        k4 = self._rhs(t + dt, u_in + dt * k3, uf)
        u_out[...] = u_in + (dt / 6.0) * (k1 + 2.0 * k2 + 2.0 * k3 + k4)
