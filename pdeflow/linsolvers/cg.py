"""
Preconditioned conjugate gradient solver.

Solves A x = b for symmetric positive definite A. Operators may be dense
arrays, scipy sparse matrices, ``LinearOperator`` instances, or anything
``scipy.sparse.linalg.aslinearoperator`` accepts.

Convergence test: ``norm(r) <= tol * norm(b)`` under the configured norm, or
``norm(r) <= tol`` when b is zero. Every pass of the loop tests the residual
before updating, so ``iteration_count`` counts passes: a zero right-hand side
with a zero guess converges in one pass.

Boundary form ``solve(A, b, xb, x)``: the boundary contribution is lifted out,

    A x_h = b - A xb,   x_h = 0 on boundary degrees of freedom,
    x     = x_h + xb    on return,

where the boundary degrees of freedom come from ``grid.boundary_indices()``.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

import numpy as np
from scipy.sparse.linalg import LinearOperator, aslinearoperator

from pdeflow.types.schemes import NormType, SolveStatus
from pdeflow.utils.flow_logging import get_logger, log_solver_completion

from .base import LinSolverBase

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from pdeflow.config.core import LinSolverTraits
    from pdeflow.types.protocols import ConnectivityOp, Grid

logger = get_logger(__name__)


def as_operator(op: Any, n: int | None = None) -> LinearOperator:
    """Wrap an operator (array, sparse matrix, LinearOperator or callable) as a LinearOperator."""
    if callable(op) and not isinstance(op, LinearOperator) and not hasattr(op, "shape"):
        if n is None:
            raise ValueError("a callable operator needs the problem size")
        return LinearOperator((n, n), matvec=op, dtype=float)
    return aslinearoperator(op)


class ConjugateGradientSolver(LinSolverBase):
    """
    Conjugate gradient with optional preconditioning.

    Args:
        traits: Solver configuration (tolerance, iteration cap, norm)
        operator: Built-in operator for ``solve(b, x)``
        preconditioner: Action of M^{-1}, in any form ``as_operator`` accepts
        grid: Grid providing weights and boundary indices
        connectivity: ConnectivityOp applied after every operator application

    Example:
        >>> A = scipy.sparse.diags([-1, 2, -1], [-1, 0, 1], shape=(n, n))
        >>> cg = ConjugateGradientSolver(LinSolverTraits(tol=1e-10), operator=A)
        >>> status = cg.solve(b, x)
        >>> status == 0
        True
    """

    def __init__(
        self,
        traits: LinSolverTraits | None = None,
        operator: Any = None,
        preconditioner: Any = None,
        grid: Grid | None = None,
        connectivity: ConnectivityOp | None = None,
    ):
        super().__init__(traits=traits, grid=grid, connectivity=connectivity, operator=operator)
        self.preconditioner = preconditioner

    def _apply(self, A_op: LinearOperator, v: NDArray) -> NDArray:
        w = np.asarray(A_op.matvec(v), dtype=float).ravel()
        self.connectivity.reconcile(w)
        return w

    def _solve_impl(self, A: Any, b: NDArray, xb: NDArray | None, x: NDArray) -> SolveStatus:
        traits = self.traits
        n = np.size(b)
        A_op = as_operator(A, n)
        if A_op.shape != (n, n):
            raise ValueError(f"operator shape {A_op.shape} does not match right-hand side of size {n}")

        M_op = as_operator(self.preconditioner, n) if self.preconditioner is not None else None
        bdy = self._boundary_indices() if xb is not None else np.empty(0, dtype=np.intp)

        rhs = np.asarray(b, dtype=float).ravel().copy()
        xh = np.asarray(x, dtype=float).ravel().copy()
        xb_flat = None
        if xb is not None:
            xb_flat = np.asarray(xb, dtype=float).ravel()
            rhs -= self._apply(A_op, xb_flat)
            rhs[bdy] = 0.0
            xh[bdy] = 0.0

        self.residual_history = []
        self.iteration_count = 0
        start = time.perf_counter()

        r = rhs - self._apply(A_op, xh)
        r[bdy] = 0.0
        z = self._precondition(M_op, r, bdy)
        p = z.copy()
        rz = float(np.dot(r, z))

        bnorm = self.norm(rhs)
        threshold = traits.tol * (bnorm if bnorm > 0.0 else 1.0)
        check = traits.normtype is not NormType.NONE

        status = SolveStatus.NOT_CONVERGED
        for it in range(1, traits.maxit + 1):
            rnorm = self.norm(r)
            self.residual_history.append(rnorm)
            self.iteration_count = it

            if check and rnorm <= threshold:
                status = SolveStatus.CONVERGED
                break

            if not np.any(r):
                # exact solution; only reachable without a stopping test
                continue

            Ap = self._apply(A_op, p)
            Ap[bdy] = 0.0
            pAp = float(np.dot(p, Ap))
            if pAp <= 0.0 or rz == 0.0:
                status = SolveStatus.BREAKDOWN
                break

            alpha = rz / pAp
            xh += alpha * p
            r -= alpha * Ap

            z = self._precondition(M_op, r, bdy)
            rz_new = float(np.dot(r, z))
            p = z + (rz_new / rz) * p
            rz = rz_new

        if not check and status is not SolveStatus.BREAKDOWN:
            status = SolveStatus.CONVERGED

        if xb_flat is not None:
            xh += xb_flat
        x[...] = xh.reshape(np.shape(x))

        log_solver_completion(
            logger,
            type(self).__name__,
            self.iteration_count,
            self.final_residual or 0.0,
            time.perf_counter() - start,
            status.name,
        )
        return status

    @staticmethod
    def _precondition(M_op: LinearOperator | None, r: NDArray, bdy: NDArray) -> NDArray:
        if M_op is None:
            return r.copy()
        z = np.asarray(M_op.matvec(r), dtype=float).ravel()
        z[bdy] = 0.0
        return z
