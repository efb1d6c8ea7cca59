"""
Iterative linear solvers.

- LinSolverBase: three-form ``solve`` contract returning a SolveStatus
- ConjugateGradientSolver: preconditioned CG with boundary lifting
- PoissonSolver: CG around a fixed Laplacian-type operator
"""

from .base import LinSolverBase, residual_norm
from .cg import ConjugateGradientSolver, as_operator
from .poisson import PoissonSolver

__all__ = [
    "ConjugateGradientSolver",
    "LinSolverBase",
    "PoissonSolver",
    "as_operator",
    "residual_norm",
]
