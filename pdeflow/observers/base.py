"""
Base observer system.

Observers are read-only hooks called before every step and once after the
integration loop ends. They let callers monitor, log or record a run without
subclassing the integrator.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from pdeflow.config.core import ObserverTraits
from pdeflow.types.schemes import ObserverCadence

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from pdeflow.types.state import StateInfo

# Relative round-off window within which a notification counts as reaching its due time
DUE_TIME_RTOL = 1e-12


class ObserverBase(ABC):
    """
    Base class for integration observers.

    ``observe`` counts every notification and forwards it to ``_observe_impl``
    when the cadence configured in ``ObserverTraits`` says it is due: every
    ``cycle_interval`` notifications, or at the first notification reaching
    each point of the grid ``t_first + k * time_interval``, where t_first is
    the first notification time. The first notification is always due.

    Observers must not modify the state or the forcing.

    Example:
        class PeakObserver(ObserverBase):
            def _observe_impl(self, t, dt, u, uf):
                self.peak = max(getattr(self, "peak", 0.0), float(abs(u).max()))

        integrator = Integrator(eq, observers=[PeakObserver()])
    """

    def __init__(self, traits: ObserverTraits | None = None):
        self.traits = traits if traits is not None else ObserverTraits()
        self.info: StateInfo | None = None
        self.ncalls = 0
        self.nobserved = 0
        self._last_time: float | None = None
        self._next_time: float | None = None
        self._anchor = 0.0
        self._periods = 0

    def init(self, info: StateInfo) -> None:
        """
        Receive state metadata once before integration.

        Resets the cadence bookkeeping so one observer can watch several runs.
        """
        self.info = info
        self.ncalls = 0
        self.nobserved = 0
        self._last_time = None
        self._next_time = None

    def observe(self, t: float, dt: float, u: NDArray, uf: NDArray | None) -> None:
        due = self._is_due(t)
        self.ncalls += 1
        if due:
            self.nobserved += 1
            self._last_time = t
            if self.traits.cadence is ObserverCadence.TIME:
                self._advance_due_time(t)
            self._observe_impl(t, dt, u, uf)

    def _is_due(self, t: float) -> bool:
        if self._last_time is None:
            return True
        if self.traits.cadence is ObserverCadence.TIME:
            interval = self.traits.time_interval
            return t >= self._next_time - DUE_TIME_RTOL * max(abs(self._next_time), interval)
        return self.ncalls % self.traits.cycle_interval == 0

    def _advance_due_time(self, t: float) -> None:
        # Due times lie on anchor + k * interval
        interval = self.traits.time_interval
        if self._next_time is None:
            self._anchor, self._periods = t, 0
        elapsed = (t - self._anchor) / interval
        self._periods = max(self._periods + 1, math.floor(elapsed + DUE_TIME_RTOL * max(abs(elapsed), 1.0)) + 1)
        self._next_time = self._anchor + self._periods * interval

    @abstractmethod
    def _observe_impl(self, t: float, dt: float, u: NDArray, uf: NDArray | None) -> None:
        """Act on a due notification."""


class NullObserver(ObserverBase):
    """Observer that does nothing. Default when no observers are given."""

    def _observe_impl(self, t: float, dt: float, u: NDArray, uf: NDArray | None) -> None:
        pass
