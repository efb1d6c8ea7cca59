"""
Core Type Protocols for pdeflow

These protocols define the narrow interfaces the integrator and the linear
solvers rely on. They use duck typing: any object that implements these
methods will work, regardless of inheritance.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from numpy.typing import NDArray

if TYPE_CHECKING:
    from .state import StateInfo


@runtime_checkable
class Equation(Protocol):
    """
    Protocol for a semi-discrete system of equations.

    ``dt`` is only called when ``supports_dt_advice`` is true.
    """

    supports_dt_advice: bool

    def dt(self, t: float, u: NDArray) -> float:
        """Upper bound on a stable step size at state u."""
        ...

    def step(self, t: float, u: NDArray, dt: float, uf: NDArray | None = None) -> None:
        """Advance u in place by exactly dt."""
        ...


@runtime_checkable
class Stepper(Protocol):
    """Protocol for a time stepping scheme bound to an equation."""

    @property
    def order(self) -> int:
        """Order of accuracy of the scheme."""
        ...

    def step(self, t: float, u: NDArray, dt: float, uf: NDArray | None = None) -> None:
        """Advance u in place from t to t + dt."""
        ...

    def step_to(self, t: float, u_in: NDArray, dt: float, u_out: NDArray, uf: NDArray | None = None) -> None:
        """Write the state at t + dt into u_out, leaving u_in untouched."""
        ...


@runtime_checkable
class Mixer(Protocol):
    """Protocol for post-step forcing updates."""

    def mix(self, t: float, u: NDArray, uf: NDArray | None) -> None:
        """Update the forcing uf given the newly advanced state u."""
        ...


@runtime_checkable
class Observer(Protocol):
    """Protocol for read-only step observers."""

    def init(self, info: StateInfo) -> None:
        """Receive state metadata once before integration."""
        ...

    def observe(self, t: float, dt: float, u: NDArray, uf: NDArray | None) -> None:
        """Inspect (never modify) the state."""
        ...


@runtime_checkable
class LinearSolver(Protocol):
    """Protocol for linear solvers: solve(b, x), solve(A, b, x), solve(A, b, xb, x)."""

    def solve(self, *args: Any) -> int:
        """Solve in place for x; return 0 on convergence."""
        ...


@runtime_checkable
class ConnectivityOp(Protocol):
    """
    Protocol for the degree-of-freedom reconciliation service.

    ``reconcile`` sums shared degrees of freedom across element or partition
    boundaries in place, so that v is globally consistent afterwards.
    """

    def reconcile(self, v: NDArray) -> None: ...


@runtime_checkable
class Grid(Protocol):
    """
    Protocol for the spatial grid.

    Both methods are optional; collaborators check with ``hasattr`` before
    calling them.
    """

    def volume_weights(self) -> NDArray:
        """Quadrature weight of each degree of freedom."""
        ...

    def boundary_indices(self) -> NDArray:
        """Flat indices of Dirichlet boundary degrees of freedom."""
        ...


class IdentityConnectivity:
    """ConnectivityOp for a single partition with no shared nodes."""

    def reconcile(self, v: NDArray) -> None:
        return None

    def __repr__(self) -> str:
        return "IdentityConnectivity()"


# Type aliases
State = NDArray
Derivative = NDArray
