"""
Name based stepper construction.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pdeflow.utils.exceptions import ConfigurationError

from .explicit import EulerStepper, RK2Stepper, RK4Stepper
from .multistep import AdamsBashforthStepper

if TYPE_CHECKING:
    from pdeflow.core.equation import EquationBase

    from .base import StepperBase

STEPPER_TYPES: dict[str, type[StepperBase]] = {
    "euler": EulerStepper,
    "exrk2": RK2Stepper,
    "exrk4": RK4Stepper,
    "ab": AdamsBashforthStepper,
}


def create_stepper(name: str, equation: EquationBase, **kwargs: Any) -> StepperBase:
    """
    Create a stepper by scheme name.

    Args:
        name: ``euler``, ``exrk2``, ``exrk4`` or ``ab`` (case-insensitive)
        equation: Equation the stepper advances
        **kwargs: Scheme options, e.g. ``order=2`` for ``ab``

    Raises:
        ConfigurationError: If the name is unknown

    Example:
        >>> stepper = create_stepper("ab", equation, order=3)
    """
    key = name.strip().lower()
    if key not in STEPPER_TYPES:
        raise ConfigurationError(
            parameter_name="stepper",
            provided_value=name,
            reason="unknown time stepping scheme",
            component="create_stepper",
            valid_values=list(STEPPER_TYPES),
        )

    stepper_cls = STEPPER_TYPES[key]
    if stepper_cls is AdamsBashforthStepper:
        return AdamsBashforthStepper(equation, **kwargs)
    return stepper_cls(equation)
