"""
Observer reporting run progress through the pdeflow logger.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from pdeflow.utils.flow_logging import get_logger

from .base import ObserverBase

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from pdeflow.config.core import ObserverTraits
    from pdeflow.types.state import StateInfo


class LoggingObserver(ObserverBase):
    """
    Log time, step size and state norms when due.

    Non-finite state values are reported at WARNING regardless of the
    configured level.
    """

    def __init__(self, traits: ObserverTraits | None = None, logger: logging.Logger | None = None):
        super().__init__(traits)
        self.logger = logger or get_logger(__name__)
        self.level = getattr(logging, self.traits.log_level)

    def init(self, info: StateInfo) -> None:
        super().init(info)
        self.logger.log(
            self.level,
            f"Observing {', '.join(info.svars)}: shape={info.shape} ({info.size} values), dtype={info.dtype}, "
            f"start cycle={info.cycle}, t={info.time:.6e}",
        )

    def _observe_impl(self, t: float, dt: float, u: NDArray, uf: NDArray | None) -> None:
        if not np.all(np.isfinite(u)):
            self.logger.warning(f"Non-finite values in state at t={t:.6e}")
            return

        max_abs = float(np.max(np.abs(u))) if u.size else 0.0
        l2 = float(np.sqrt(np.mean(np.square(u)))) if u.size else 0.0
        self.logger.log(
            self.level, f"[{self.ncalls:6d}] t={t:.6e}, dt={dt:.3e}, |u|_max={max_abs:.6e}, |u|_rms={l2:.6e}"
        )
