"""
State metadata handed to observers before an integration run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np
from numpy.typing import NDArray


@dataclass
class StateInfo:
    """
    Caller-visible description of the integrated state.

    Attributes:
        svars: Names of the state components
        shape: Shape of the state array
        dtype: Data type name of the state array
        cycle: Cycle index the run starts from
        time: Simulation time the run starts from
        odir: Output directory for observers that persist data
        metadata: Additional user data
    """

    svars: list[str] = field(default_factory=lambda: ["u"])
    shape: tuple[int, ...] = ()
    dtype: str = "float64"
    cycle: int = 0
    time: float = 0.0
    odir: str = "."
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_state(cls, u: NDArray, svars: list[str] | None = None, **kwargs: Any) -> StateInfo:
        """Build the description of an existing state array."""
        u = np.asarray(u)
        return cls(svars=list(svars) if svars else ["u"], shape=tuple(u.shape), dtype=str(u.dtype), **kwargs)

    @property
    def size(self) -> int:
        return int(np.prod(self.shape))
