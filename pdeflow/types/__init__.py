"""
Type definitions for pdeflow: protocols, enumerations and state metadata.
"""

from .protocols import (
    ConnectivityOp,
    Derivative,
    Equation,
    Grid,
    IdentityConnectivity,
    LinearSolver,
    Mixer,
    Observer,
    State,
    Stepper,
)
from .schemes import IntegrationType, NormType, ObserverCadence, SolveStatus
from .state import StateInfo

__all__ = [
    "ConnectivityOp",
    "Derivative",
    "Equation",
    "Grid",
    "IdentityConnectivity",
    "IntegrationType",
    "LinearSolver",
    "Mixer",
    "NormType",
    "Observer",
    "ObserverCadence",
    "SolveStatus",
    "State",
    "StateInfo",
    "Stepper",
]
