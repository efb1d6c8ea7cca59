"""
Linear solver contract.

Every solver exposes one ``solve`` entry point accepting three call forms:

1. ``solve(b, x)``: solve against the solver's own operator
2. ``solve(A, b, x)``: solve against an explicitly supplied operator
3. ``solve(A, b, xb, x)``: as (2), with a separately tracked boundary
   contribution ``xb`` (only valid when ``traits.bbdycond`` is set)

``x`` is updated in place. The returned ``SolveStatus`` is 0 on convergence
and non-zero otherwise; non-convergence is never raised.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

import numpy as np

from pdeflow.config.core import LinSolverTraits
from pdeflow.types.protocols import IdentityConnectivity
from pdeflow.types.schemes import NormType, SolveStatus
from pdeflow.utils.exceptions import ConfigurationError, MissingComponentError

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from pdeflow.types.protocols import ConnectivityOp, Grid


def residual_norm(r: NDArray, normtype: NormType, weights: NDArray | None = None) -> float:
    """
    Norm of a residual vector.

    Args:
        r: Residual, any shape
        normtype: INF, EUC, L2 or L1. NONE falls back to EUC, so the
            residual history stays meaningful when no stopping test is used.
        weights: Quadrature weights for L2 and L1, same size as r.
            Uniform weights when omitted.
    """
    r = np.ravel(r)
    if r.size == 0:
        return 0.0

    if normtype is NormType.INF:
        return float(np.max(np.abs(r)))
    if normtype in (NormType.EUC, NormType.NONE):
        return float(np.sqrt(np.dot(r, r)))

    w = np.ones_like(r) if weights is None else np.ravel(weights)
    wsum = float(np.sum(w))
    if normtype is NormType.L2:
        return float(np.sqrt(np.sum(w * r * r) / wsum))
    return float(np.sum(w * np.abs(r)) / wsum)


class LinSolverBase(ABC):
    """
    Base class for linear solvers.

    Args:
        traits: Solver configuration, ``LinSolverTraits()`` when omitted
        grid: Optional grid providing ``volume_weights()`` (L1/L2 norms) and
            ``boundary_indices()`` (boundary form)
        connectivity: ConnectivityOp reconciling shared degrees of freedom
            after each operator application, identity when omitted
        operator: Built-in operator used by ``solve(b, x)``
    """

    def __init__(
        self,
        traits: LinSolverTraits | None = None,
        grid: Grid | None = None,
        connectivity: ConnectivityOp | None = None,
        operator: Any = None,
    ):
        self.traits = traits if traits is not None else LinSolverTraits()
        self.grid = grid
        self.connectivity = connectivity if connectivity is not None else IdentityConnectivity()
        self.operator = operator

        self.residual_history: list[float] = []
        self.iteration_count = 0
        self.status: SolveStatus | None = None

    def solve(self, *args: Any) -> SolveStatus:
        """
        Solve A x = b in place for x.

        Call forms: ``solve(b, x)``, ``solve(A, b, x)``, ``solve(A, b, xb, x)``.

        Raises:
            TypeError: For any other number of arguments
            MissingComponentError: ``solve(b, x)`` without a built-in operator
            ConfigurationError: ``solve(A, b, xb, x)`` with ``bbdycond`` unset
        """
        if len(args) == 2:
            b, x = args
            if self.operator is None:
                raise MissingComponentError(
                    "operator", owner=type(self).__name__, hint="Construct the solver with an operator or use solve(A, b, x)"
                )
            A, xb = self.operator, None
        elif len(args) == 3:
            A, b, x = args
            xb = None
        elif len(args) == 4:
            A, b, xb, x = args
            if not self.traits.bbdycond:
                raise ConfigurationError(
                    parameter_name="bbdycond",
                    provided_value=False,
                    reason="solve(A, b, xb, x) requires a boundary condition",
                    component=type(self).__name__,
                )
        else:
            raise TypeError(f"solve() takes 2, 3 or 4 arguments ({len(args)} given)")

        self.status = self._solve_impl(A, b, xb, x)
        return self.status

    @abstractmethod
    def _solve_impl(self, A: Any, b: NDArray, xb: NDArray | None, x: NDArray) -> SolveStatus:
        """Solve for x in place; xb is None for the forms without boundary part."""

    def norm(self, r: NDArray) -> float:
        """Residual norm under ``traits.normtype`` with the grid's weights."""
        weights = None
        if self.traits.normtype in (NormType.L1, NormType.L2):
            weights = self._weights(np.size(r))
        return residual_norm(r, self.traits.normtype, weights)

    def _weights(self, n: int) -> NDArray | None:
        if self.grid is None or not hasattr(self.grid, "volume_weights"):
            return None
        w = np.ravel(np.asarray(self.grid.volume_weights(), dtype=float))
        if w.size != n:
            raise ValueError(f"grid volume_weights has {w.size} entries, residual has {n}")
        return w

    def _boundary_indices(self) -> NDArray:
        if self.grid is None or not hasattr(self.grid, "boundary_indices"):
            return np.empty(0, dtype=np.intp)
        return np.asarray(self.grid.boundary_indices(), dtype=np.intp).ravel()

    @property
    def converged(self) -> bool:
        return self.status is SolveStatus.CONVERGED

    @property
    def residuals(self) -> NDArray:
        """Residual norm at every iteration of the last solve."""
        return np.asarray(self.residual_history, dtype=float)

    @property
    def resid_max(self) -> float:
        return float(np.max(self.residuals)) if self.residual_history else 0.0

    @property
    def resid_min(self) -> float:
        return float(np.min(self.residuals)) if self.residual_history else 0.0

    @property
    def final_residual(self) -> float | None:
        return self.residual_history[-1] if self.residual_history else None
