"""
Variable step Adams-Bashforth schemes of order 1 to 3.

The coefficients are recomputed every step from the step size history, so
the scheme stays consistent when the integrator changes dt (CFL advice, the
final clamped step of a time-bounded run).
"""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING

import numpy as np

from pdeflow.utils.exceptions import ConfigurationError

from .base import StepperBase

if TYPE_CHECKING:
    from collections.abc import Sequence

    from numpy.typing import NDArray

    from pdeflow.core.equation import EquationBase

MAX_AB_ORDER = 3


def ab_coefficients(order: int, dt_history: Sequence[float]) -> np.ndarray:
    """
    Adams-Bashforth weights for a variable step history.

    Args:
        order: Scheme order, 1 to 3
        dt_history: Step sizes, newest first: ``[h0, h1, h2]`` where h0 is the
            step being taken and h1, h2 the previous ones. At least ``order``
            entries are required.

    Returns:
        Weights c such that ``u_out = u + h0 * sum(c[i] * f[n - i])``

    Raises:
        ConfigurationError: If the order is outside 1..3
        ValueError: If the history is too short or holds a non-positive step

    For constant steps the weights reduce to the textbook values
    (1), (3/2, -1/2) and (23/12, -16/12, 5/12).
    """
    if not 1 <= order <= MAX_AB_ORDER:
        raise ConfigurationError(
            parameter_name="order",
            provided_value=order,
            reason=f"Adams-Bashforth order must lie in 1..{MAX_AB_ORDER}",
            component="ab_coefficients",
            valid_values=list(range(1, MAX_AB_ORDER + 1)),
        )

    if len(dt_history) < order:
        raise ValueError(f"order {order} needs {order} step sizes, got {len(dt_history)}")

    h = [float(x) for x in dt_history[:order]]
    if any(x <= 0 for x in h):
        raise ValueError(f"step sizes must be positive, got {h}")

    if order == 1:
        return np.array([1.0])

    if order == 2:
        r = h[0] / h[1]
        return np.array([1.0 + 0.5 * r, -0.5 * r])

    h0, h1, h2 = h
    c2 = (h0 * h0 / 3.0 + 0.5 * h1 * h0) / (h2 * (h1 + h2))
    c1 = -(h0 * h0 / 3.0 + 0.5 * (h1 + h2) * h0) / (h1 * h2)
    c0 = 1.0 - c1 - c2
    return np.array([c0, c1, c2])


class AdamsBashforthStepper(StepperBase):
    """
    Explicit multistep Adams-Bashforth scheme.

    Derivative and step size history is kept between calls. Until ``order - 1``
    previous steps exist, the scheme runs at the highest order the history
    allows (so the first step is forward Euler). ``reset()`` drops the
    history, which is required whenever the state is changed outside the
    stepper.

    Every ``step``/``step_to`` call is treated as an accepted step and
    extends the history.
    """

    name = "ab"

    def __init__(self, equation: EquationBase, order: int = 3):
        if not 1 <= order <= MAX_AB_ORDER:
            raise ConfigurationError(
                parameter_name="order",
                provided_value=order,
                reason=f"Adams-Bashforth order must lie in 1..{MAX_AB_ORDER}",
                component="AdamsBashforthStepper",
                valid_values=list(range(1, MAX_AB_ORDER + 1)),
            )
        super().__init__(equation)
        self._order = order
        self._f_history: deque[np.ndarray] = deque(maxlen=order - 1)
        self._dt_history: deque[float] = deque(maxlen=order - 1)

    @property
    def order(self) -> int:
        return self._order

    @property
    def current_order(self) -> int:
        """Order the next step will be taken with."""
        return min(self._order, len(self._f_history) + 1)

    def reset(self) -> None:
        self._f_history.clear()
        self._dt_history.clear()

    def _step_impl(self, t: float, u_in: NDArray, dt: float, u_out: NDArray, uf: NDArray | None) -> None:
        f_now = self._rhs(t, u_in, uf)
        order = self.current_order

        coeffs = ab_coefficients(order, [dt, *self._dt_history])
        increment = coeffs[0] * f_now
        for c, f_old in zip(coeffs[1:], self._f_history, strict=False):
            increment = increment + c * f_old

        u_out[...] = u_in + dt * increment

        if self._order > 1:
            self._f_history.appendleft(f_now.copy())
            self._dt_history.appendleft(float(dt))
