"""
Component factories.

Build steppers, mixers, observers, linear solvers and fully wired
integrators from names and configuration objects:

    >>> config = load_run_config("runs/advection.yaml")
    >>> integrator = create_integrator(config, equation)
    >>> t = integrator.time_integrate(0.0, None, u)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pdeflow.config.core import LinSolverTraits, ObserverTraits, RunConfig
from pdeflow.core.integrator import Integrator
from pdeflow.core.mixer import CallbackMixer, NullMixer
from pdeflow.linsolvers import ConjugateGradientSolver, PoissonSolver
from pdeflow.observers import HistoryObserver, LoggingObserver, NullObserver
from pdeflow.steppers import create_stepper
from pdeflow.utils.exceptions import ConfigurationError
from pdeflow.utils.flow_logging import configure_logging, get_logger

if TYPE_CHECKING:
    from collections.abc import Callable

    from pdeflow.core.equation import EquationBase
    from pdeflow.core.mixer import MixerBase
    from pdeflow.linsolvers import LinSolverBase
    from pdeflow.observers import ObserverBase
    from pdeflow.types.protocols import ConnectivityOp, Grid, Observer

logger = get_logger(__name__)

OBSERVER_TYPES: dict[str, type[ObserverBase]] = {
    "null": NullObserver,
    "logging": LoggingObserver,
    "history": HistoryObserver,
}


def create_mixer(name: str = "none", update_forcing: Callable | None = None) -> MixerBase:
    """
    Create a mixer.

    Args:
        name: ``none`` or ``callback``
        update_forcing: Callable ``(t, u, uf)`` required for ``callback``
    """
    key = name.strip().lower()
    if key in ("none", "null"):
        return NullMixer()
    if key == "callback":
        if update_forcing is None:
            raise ConfigurationError(
                parameter_name="update_forcing",
                provided_value=None,
                reason="callback mixer needs an update_forcing callable",
                component="create_mixer",
            )
        return CallbackMixer(update_forcing)
    raise ConfigurationError(
        parameter_name="mixer", provided_value=name, component="create_mixer", valid_values=["none", "callback"]
    )


def create_observer(traits: ObserverTraits | None = None, **kwargs: Any) -> ObserverBase:
    """Create the observer selected by ``traits.kind``."""
    traits = traits if traits is not None else ObserverTraits()
    return OBSERVER_TYPES[traits.kind](traits, **kwargs)


def create_linear_solver(
    traits: LinSolverTraits | None = None,
    operator: Any = None,
    kind: str = "cg",
    preconditioner: Any = None,
    grid: Grid | None = None,
    connectivity: ConnectivityOp | None = None,
) -> LinSolverBase | PoissonSolver:
    """
    Create a linear solver.

    Args:
        kind: ``cg`` or ``poisson`` (the latter requires an operator)
    """
    key = kind.strip().lower()
    if key == "cg":
        return ConjugateGradientSolver(
            traits, operator=operator, preconditioner=preconditioner, grid=grid, connectivity=connectivity
        )
    if key == "poisson":
        if operator is None:
            raise ConfigurationError(
                parameter_name="operator",
                provided_value=None,
                reason="Poisson solver needs a fixed operator",
                component="create_linear_solver",
            )
        return PoissonSolver(traits, operator, preconditioner=preconditioner, grid=grid, connectivity=connectivity)
    raise ConfigurationError(
        parameter_name="kind", provided_value=kind, component="create_linear_solver", valid_values=["cg", "poisson"]
    )


def create_integrator(
    config: RunConfig,
    equation: EquationBase,
    mixer: MixerBase | None = None,
    grid: Grid | None = None,
    observers: list[Observer] | None = None,
    configure_logger: bool = True,
) -> Integrator:
    """
    Wire an integrator from a run configuration.

    The equation gets the stepper named in ``config.stepper`` unless it
    already has one. Observers default to those listed in
    ``config.observers``.
    """
    if configure_logger:
        configure_logging(**config.logging.model_dump())

    if getattr(equation, "stepper", None) is None and hasattr(equation, "set_stepper"):
        kwargs = {"order": config.stepper.order} if config.stepper.name.strip().lower() == "ab" else {}
        equation.set_stepper(create_stepper(config.stepper.name, equation, **kwargs))

    if observers is None:
        observers = [create_observer(traits) for traits in config.observers]

    logger.debug(f"Created integrator: stepper={config.stepper.name}, observers={[type(o).__name__ for o in observers]}")
    return Integrator(equation, mixer=mixer, observers=observers, grid=grid, traits=config.integrator)
