"""
pdeflow Factory Module

- create_stepper() - time stepping scheme by name
- create_mixer() - forcing updater
- create_observer() - observer from ObserverTraits
- create_linear_solver() - CG or Poisson solver
- create_integrator() - fully wired Integrator from a RunConfig
"""

from pdeflow.steppers import create_stepper

from .component_factory import (
    OBSERVER_TYPES,
    create_integrator,
    create_linear_solver,
    create_mixer,
    create_observer,
)

__all__ = [
    "OBSERVER_TYPES",
    "create_integrator",
    "create_linear_solver",
    "create_mixer",
    "create_observer",
    "create_stepper",
]
