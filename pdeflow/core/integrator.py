"""
Time integration driver.

The Integrator sequences exactly one advance per iteration and terminates by
cycle count, by end time, or by walking a list of checkpoint times. Each
iteration runs, in order:

1. compute the effective step size (``init_dt``, clamped to the remainder)
2. notify every observer, in list order, with the pre-step state
3. advance the state through the equation
4. advance the clock
5. increment the cycle counter
6. invoke the mixer on the new state

After the loop every observer is notified once more with the final state.

State arrays are mutated in place. Python floats are immutable, so every
driver returns the time it reached.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pdeflow.config.core import IntegratorTraits
from pdeflow.core.mixer import NullMixer
from pdeflow.types.schemes import IntegrationType
from pdeflow.utils.exceptions import ConfigurationError, MissingComponentError, StepSizeError
from pdeflow.utils.flow_logging import (
    LoggedOperation,
    get_logger,
    log_integration_progress,
    log_integration_start,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from numpy.typing import NDArray

    from pdeflow.types.protocols import Equation, Grid, Mixer, Observer
    from pdeflow.types.state import StateInfo

logger = get_logger(__name__)

# Relative round-off window within which a step is taken to land on the end time
ARRIVAL_RTOL = 1e-12


class Integrator:
    """
    Drive an equation forward in time.

    Args:
        equation: Equation to advance (required)
        mixer: Post-step forcing updater, NullMixer when omitted
        observers: Ordered observer list, ``[NullObserver()]`` when omitted.
            The list object is kept, not copied.
        grid: Spatial grid handed through for bookkeeping
        traits: Run configuration, defaults to ``IntegratorTraits()``

    Example:
        traits = IntegratorTraits(integ_type="time", dt=0.01, time_end=1.0)
        integ = Integrator(eq, traits=traits)
        t = integ.time_integrate(0.0, None, u)
    """

    def __init__(
        self,
        equation: Equation | None,
        mixer: Mixer | None = None,
        observers: list[Observer] | None = None,
        grid: Grid | None = None,
        traits: IntegratorTraits | None = None,
    ):
        if equation is None:
            raise MissingComponentError(
                "equation", owner="Integrator", hint="Pass the equation to integrate as the first argument"
            )

        if observers is None:
            from pdeflow.observers import NullObserver

            observers = [NullObserver()]

        self._equation = equation
        self._mixer = mixer if mixer is not None else NullMixer()
        self._observers = observers
        self._grid = grid
        self._traits = traits if traits is not None else IntegratorTraits()
        self._cycle = self._traits.cycle

    @property
    def cycle(self) -> int:
        """Number of completed equation steps, counted from ``traits.cycle``."""
        return self._cycle

    @property
    def equation(self) -> Equation:
        return self._equation

    @property
    def mixer(self) -> Mixer:
        return self._mixer

    @property
    def observers(self) -> list[Observer]:
        return self._observers

    @property
    def grid(self) -> Grid | None:
        return self._grid

    @property
    def traits(self) -> IntegratorTraits:
        return self._traits

    def init_observers(self, info: StateInfo) -> None:
        """Hand state metadata to every observer, in list order."""
        for observer in self._observers:
            observer.init(info)

    def init_dt(self, t: float, u: NDArray, dt: float) -> float:
        """
        Effective step size for the next advance.

        The requested dt is clamped into [dt_min, dt_max]. When the equation
        supports step size advice the result is further limited to
        ``courant * equation.dt(t, u)``; the advice takes precedence over
        dt_min. A NaN advice is returned as is, so the caller rejects the
        step. Reads u, changes nothing.
        """
        traits = self._traits
        dt = min(max(dt, traits.dt_min), traits.dt_max)

        if getattr(self._equation, "supports_dt_advice", False):
            advice = traits.courant * self._equation.dt(t, u)
            if not advice >= dt:
                dt = advice

        return dt

    def time_integrate(self, t: float | None, u_forcing: NDArray | None, u: NDArray) -> float:
        """
        Run the integration selected by ``traits.integ_type``.

        Args:
            t: Start time, ``traits.time`` when None. List mode starts from
                the first checkpoint instead.
            u_forcing: Forcing term, or None
            u: State, advanced in place

        Returns:
            The time reached

        Raises:
            ConfigurationError: If no termination mode is configured
        """
        traits = self._traits
        mode = traits.integ_type

        if mode is None:
            raise ConfigurationError(
                parameter_name="integ_type",
                provided_value=None,
                reason="no termination mode configured",
                component="Integrator",
                valid_values=[m.value for m in IntegrationType],
            )

        if t is None:
            t = traits.time

        log_integration_start(logger, mode.value, traits.model_dump(mode="json"))

        with LoggedOperation(logger, f"{mode.value} integration", log_level=logging.DEBUG):
            if mode is IntegrationType.CYCLE:
                t = self.steps(t, traits.dt, traits.cycle_end - self._cycle, u_forcing, u)
            elif mode is IntegrationType.TIME:
                t = self.time(t, traits.time_end, traits.dt, u_forcing, u)
            else:
                t = self.list(traits.times, u_forcing, u)

        logger.info(f"Integration finished at t={t:.6e} after cycle {self._cycle}")
        return t

    def time(self, t0: float, t1: float, dt: float, u_forcing: NDArray | None, u: NDArray) -> float:
        """
        Advance from t0 to exactly t1.

        The last step is clamped to the remaining interval, and a step that
        lands within round-off of t1 sets the clock to t1 itself.

        Returns:
            t1

        Raises:
            StepSizeError: If t1 < t0 or an effective step is not positive
        """
        if t1 < t0:
            raise StepSizeError(dt=t1 - t0, t=t0, t_end=t1, component="Integrator")

        tol = ARRIVAL_RTOL * max(abs(t0), abs(t1), t1 - t0)
        t = t0
        dt_last = 0.0

        while t1 - t > tol:
            remaining = t1 - t
            dt_eff = self.init_dt(t, u, dt)

            if not dt_eff > 0:
                raise StepSizeError(
                    dt=dt_eff, t=t, t_end=t1, dt_advice=self._advice_or_none(t, u), component="Integrator"
                )

            arrive = dt_eff >= remaining - tol
            if arrive:
                dt_eff = remaining

            self._notify(t, dt_eff, u, u_forcing)
            self._equation.step(t, u, dt_eff, u_forcing)
            t = t1 if arrive else t + dt_eff
            self._cycle += 1
            self._mixer.mix(t, u, u_forcing)
            dt_last = dt_eff
            log_integration_progress(logger, self._cycle, t, dt_eff, t1)

        self._notify(t1, dt_last, u, u_forcing)
        return t1

    def steps(self, t0: float, dt: float, n: int, u_forcing: NDArray | None, u: NDArray) -> float:
        """
        Advance exactly n steps from t0.

        Returns:
            The time reached

        Raises:
            ConfigurationError: If n is negative
            StepSizeError: If an effective step is not positive
        """
        if n < 0:
            raise ConfigurationError(
                parameter_name="n", provided_value=n, reason="step count must be non-negative", component="Integrator"
            )

        t = t0
        dt_last = 0.0

        for _ in range(n):
            dt_eff = self.init_dt(t, u, dt)
            if not dt_eff > 0:
                raise StepSizeError(dt=dt_eff, t=t, dt_advice=self._advice_or_none(t, u), component="Integrator")

            self._notify(t, dt_eff, u, u_forcing)
            self._equation.step(t, u, dt_eff, u_forcing)
            t = t + dt_eff
            self._cycle += 1
            self._mixer.mix(t, u, u_forcing)
            dt_last = dt_eff
            log_integration_progress(logger, self._cycle, t, dt_eff)

        self._notify(t, dt_last, u, u_forcing)
        return t

    def list(self, times: Sequence[float], u_forcing: NDArray | None, u: NDArray) -> float:
        """
        Walk a strictly increasing list of checkpoint times.

        Each consecutive pair (a, b) runs ``time(a, b, b - a, ...)``.

        Returns:
            The last checkpoint time
        """
        if len(times) == 0:
            raise ConfigurationError(
                parameter_name="times", provided_value=times, reason="checkpoint list is empty", component="Integrator"
            )

        checkpoints = [float(x) for x in times]
        t = checkpoints[0]
        for t_next in checkpoints[1:]:
            t = self.time(t, t_next, t_next - t, u_forcing, u)
        return t

    def _notify(self, t: float, dt: float, u: NDArray, u_forcing: NDArray | None) -> None:
        for observer in self._observers:
            observer.observe(t, dt, u, u_forcing)

    def _advice_or_none(self, t: float, u: NDArray) -> float | None:
        if getattr(self._equation, "supports_dt_advice", False):
            return self._traits.courant * self._equation.dt(t, u)
        return None
