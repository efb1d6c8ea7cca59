"""
Poisson-type solver: conjugate gradient around a fixed operator.

The operator is fixed at construction (typically a symmetric positive
definite stiffness matrix, i.e. the negative Laplacian), so callers pass only
right-hand sides:

    poisson = PoissonSolver(traits, L)
    poisson.solve(b, x)        # L x = b
    poisson.solve(b, xb, x)    # L x = b with boundary values xb
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .cg import ConjugateGradientSolver

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from pdeflow.config.core import LinSolverTraits
    from pdeflow.types.protocols import ConnectivityOp, Grid
    from pdeflow.types.schemes import SolveStatus


class PoissonSolver:
    """Solve L x = b for a fixed operator L with conjugate gradients."""

    def __init__(
        self,
        traits: LinSolverTraits | None,
        laplacian: Any,
        preconditioner: Any = None,
        grid: Grid | None = None,
        connectivity: ConnectivityOp | None = None,
    ):
        self.laplacian = laplacian
        self.cg = ConjugateGradientSolver(
            traits, operator=laplacian, preconditioner=preconditioner, grid=grid, connectivity=connectivity
        )

    @property
    def traits(self) -> LinSolverTraits:
        return self.cg.traits

    def solve(self, *args: NDArray) -> SolveStatus:
        """
        ``solve(b, x)`` or ``solve(b, xb, x)``; x is updated in place.

        Raises:
            TypeError: For any other number of arguments
            ConfigurationError: ``solve(b, xb, x)`` with ``bbdycond`` unset
        """
        if len(args) == 2:
            b, x = args
            return self.cg.solve(b, x)
        if len(args) == 3:
            b, xb, x = args
            return self.cg.solve(self.laplacian, b, xb, x)
        raise TypeError(f"solve() takes 2 or 3 arguments ({len(args)} given)")

    @property
    def residuals(self) -> NDArray:
        return self.cg.residuals

    @property
    def resid_max(self) -> float:
        return self.cg.resid_max

    @property
    def resid_min(self) -> float:
        return self.cg.resid_min

    @property
    def iteration_count(self) -> int:
        return self.cg.iteration_count
