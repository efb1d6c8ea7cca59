"""
Core time integration components: equations, mixers and the integrator.
"""

from .equation import EquationBase
from .integrator import Integrator
from .mixer import CallbackMixer, MixerBase, NullMixer

__all__ = [
    "CallbackMixer",
    "EquationBase",
    "Integrator",
    "MixerBase",
    "NullMixer",
]
