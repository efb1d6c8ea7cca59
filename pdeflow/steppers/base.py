"""
Base class for time stepping schemes.

A stepper is bound to one equation and turns its time derivative into a state
advance of exactly ``dt``. It never adjusts or refuses the step size.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from pdeflow.core.equation import EquationBase


class StepperBase(ABC):
    """
    Abstract time stepper.

    Subclasses implement ``_step_impl(t, u_in, dt, u_out, uf)``, which must
    read every stage it needs from ``u_in`` before writing ``u_out``, so that
    ``u_out`` may alias ``u_in``.
    """

    name: str = "base"

    def __init__(self, equation: EquationBase):
        self.equation = equation

    @property
    @abstractmethod
    def order(self) -> int:
        """Formal order of accuracy."""

    @abstractmethod
    def _step_impl(self, t: float, u_in: NDArray, dt: float, u_out: NDArray, uf: NDArray | None) -> None:
        """Write the state at t + dt into u_out."""

    def step(self, t: float, u: NDArray, dt: float, uf: NDArray | None = None) -> None:
        """Advance u in place by exactly dt."""
        u_out = np.empty_like(u)
        self._step_impl(t, u, dt, u_out, uf)
        u[...] = u_out

    def step_to(self, t: float, u_in: NDArray, dt: float, u_out: NDArray, uf: NDArray | None = None) -> None:
        """Write the state advanced by exactly dt into u_out; u_in is not modified."""
        self._step_impl(t, u_in, dt, u_out, uf)

    def _rhs(self, t: float, u: NDArray, uf: NDArray | None) -> NDArray:
        return np.asarray(self.equation.dudt(t, u, uf))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(order={self.order})"
