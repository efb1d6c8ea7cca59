"""
In-memory recording of observed states.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from .base import ObserverBase

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from pdeflow.config.core import ObserverTraits
    from pdeflow.types.state import StateInfo


@dataclass
class Snapshot:
    t: float
    dt: float
    u: np.ndarray
    uf: np.ndarray | None = None


class HistoryObserver(ObserverBase):
    """
    Keep copies of observed states.

    With ``max_history`` set in the traits only the most recent snapshots
    are kept.

    Example:
        history = HistoryObserver()
        Integrator(eq, observers=[history], traits=traits).time_integrate(0.0, None, u)
        times = history.times
    """

    def __init__(self, traits: ObserverTraits | None = None, record_forcing: bool = False):
        super().__init__(traits)
        self.record_forcing = record_forcing
        self.snapshots: list[Snapshot] = []

    def init(self, info: StateInfo) -> None:
        super().init(info)
        self.snapshots = []

    def _observe_impl(self, t: float, dt: float, u: NDArray, uf: NDArray | None) -> None:
        forcing = np.array(uf, copy=True) if (self.record_forcing and uf is not None) else None
        self.snapshots.append(Snapshot(t=float(t), dt=float(dt), u=np.array(u, copy=True), uf=forcing))

        max_history = self.traits.max_history
        if max_history is not None and len(self.snapshots) > max_history:
            del self.snapshots[: len(self.snapshots) - max_history]

    @property
    def times(self) -> np.ndarray:
        return np.array([s.t for s in self.snapshots])

    @property
    def steps(self) -> np.ndarray:
        return np.array([s.dt for s in self.snapshots])

    def states(self) -> np.ndarray:
        """Recorded states stacked along a new leading axis."""
        if not self.snapshots:
            return np.empty((0,))
        return np.stack([s.u for s in self.snapshots])
