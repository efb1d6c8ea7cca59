"""
Time stepping schemes.

- Explicit Runge-Kutta: EulerStepper, RK2Stepper, RK4Stepper
- Multistep: AdamsBashforthStepper (variable step, order 1-3)
"""

from .base import StepperBase
from .explicit import EulerStepper, RK2Stepper, RK4Stepper
from .multistep import AdamsBashforthStepper, ab_coefficients
from .registry import STEPPER_TYPES, create_stepper

__all__ = [
    "STEPPER_TYPES",
    "AdamsBashforthStepper",
    "EulerStepper",
    "RK2Stepper",
    "RK4Stepper",
    "StepperBase",
    "ab_coefficients",
    "create_stepper",
]
