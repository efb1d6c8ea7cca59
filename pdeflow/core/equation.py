"""
Base class for semi-discrete systems of equations.

An equation knows its time derivative ``dudt`` and, optionally, a stable
step size bound. Advancing the state is delegated to an attached stepper,
so the same equation can be integrated with any time stepping scheme.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from pdeflow.utils.exceptions import MissingComponentError

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from pdeflow.steppers.base import StepperBase


class EquationBase(ABC):
    """
    Abstract semi-discrete equation du/dt = f(t, u, uf).

    Subclasses implement ``dudt``. Equations that can bound the stable step
    size set ``supports_dt_advice = True`` and override ``dt``.

    Example:
        class Decay(EquationBase):
            def __init__(self, rate):
                super().__init__()
                self.rate = rate

            def dudt(self, t, u, uf=None):
                return -self.rate * u

        eq = Decay(2.0)
        eq.set_stepper("exrk4")
    """

    supports_dt_advice: bool = False

    def __init__(self, stepper: StepperBase | None = None) -> None:
        self.stepper = stepper

    @abstractmethod
    def dudt(self, t: float, u: NDArray, uf: NDArray | None = None) -> NDArray:
        """
        Evaluate the time derivative.

        Args:
            t: Current time
            u: Current state (must not be modified)
            uf: Forcing term, or None

        Returns:
            Array of the same shape as u
        """

    def dt(self, t: float, u: NDArray) -> float:
        """Stable step size bound at (t, u). Only called when supports_dt_advice is True."""
        raise NotImplementedError(f"{type(self).__name__} does not provide step size advice")

    def set_stepper(self, stepper: StepperBase | str, **kwargs) -> StepperBase:
        """
        Attach a time stepping scheme.

        Args:
            stepper: Stepper instance, or a scheme name understood by
                ``create_stepper`` (``euler``, ``exrk2``, ``exrk4``, ``ab``)
            **kwargs: Passed to ``create_stepper`` when a name is given

        Returns:
            The attached stepper
        """
        if isinstance(stepper, str):
            from pdeflow.steppers import create_stepper

            stepper = create_stepper(stepper, self, **kwargs)
        self.stepper = stepper
        return stepper

    def _require_stepper(self) -> StepperBase:
        if self.stepper is None:
            raise MissingComponentError(
                "stepper",
                owner=type(self).__name__,
                hint="Attach a scheme with equation.set_stepper('exrk2') before stepping",
            )
        return self.stepper

    def step(self, t: float, u: NDArray, dt: float, uf: NDArray | None = None) -> None:
        """Advance u in place by exactly dt."""
        self._require_stepper().step(t, u, dt, uf)

    def step_to(self, t: float, u_in: NDArray, dt: float, u_out: NDArray, uf: NDArray | None = None) -> None:
        """Write the state advanced by exactly dt into u_out."""
        self._require_stepper().step_to(t, u_in, dt, u_out, uf)
