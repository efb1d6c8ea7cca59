"""
Mixers update the forcing term after each completed step.

A mixer may modify ``uf`` in place. It must not rebind the state or move the
simulation clock.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from numpy.typing import NDArray


class MixerBase(ABC):
    """Base class for post-step forcing updates."""

    @abstractmethod
    def mix(self, t: float, u: NDArray, uf: NDArray | None) -> None:
        """
        Update the forcing given the newly advanced state.

        Args:
            t: Time after the step
            u: Advanced state
            uf: Forcing term to update in place, or None
        """


class NullMixer(MixerBase):
    """Mixer that leaves the forcing untouched."""

    def mix(self, t: float, u: NDArray, uf: NDArray | None) -> None:
        pass


class CallbackMixer(MixerBase):
    """
    Mixer wrapping a user callable ``update_forcing(t, u, uf)``.

    Example:
        def update_forcing(t, u, uf):
            uf[:] = np.sin(t) * u

        integrator = Integrator(eq, mixer=CallbackMixer(update_forcing))
    """

    def __init__(self, update_forcing: Callable[[float, NDArray, NDArray | None], None]):
        self.update_forcing = update_forcing
        self.calls = 0

    def mix(self, t: float, u: NDArray, uf: NDArray | None) -> None:
        self.calls += 1
        self.update_forcing(t, u, uf)
