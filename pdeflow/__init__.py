from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pdeflow")  # Matches the name in pyproject.toml
except PackageNotFoundError:
    # package is not installed
    __version__ = "0.0.0-dev"

from .config import (
    IntegratorTraits,
    LinSolverTraits,
    ObserverTraits,
    RunConfig,
    StepperConfig,
    load_run_config,
    save_run_config,
)
from .core import CallbackMixer, EquationBase, Integrator, MixerBase, NullMixer
from .factory import (
    create_integrator,
    create_linear_solver,
    create_mixer,
    create_observer,
    create_stepper,
)
from .linsolvers import ConjugateGradientSolver, LinSolverBase, PoissonSolver
from .observers import HistoryObserver, LoggingObserver, NullObserver, ObserverBase
from .steppers import (
    AdamsBashforthStepper,
    EulerStepper,
    RK2Stepper,
    RK4Stepper,
    StepperBase,
)
from .types import IntegrationType, NormType, SolveStatus, StateInfo
from .utils import (
    ConfigurationError,
    MissingComponentError,
    PDEFlowError,
    StepSizeError,
    configure_logging,
    get_logger,
)

__all__ = [
    "AdamsBashforthStepper",
    "CallbackMixer",
    "ConfigurationError",
    "ConjugateGradientSolver",
    "EquationBase",
    "EulerStepper",
    "HistoryObserver",
    "IntegrationType",
    "Integrator",
    "IntegratorTraits",
    "LinSolverBase",
    "LinSolverTraits",
    "LoggingObserver",
    "MissingComponentError",
    "MixerBase",
    "NormType",
    "NullMixer",
    "NullObserver",
    "ObserverBase",
    "ObserverTraits",
    "PDEFlowError",
    "PoissonSolver",
    "RK2Stepper",
    "RK4Stepper",
    "RunConfig",
    "SolveStatus",
    "StateInfo",
    "StepSizeError",
    "StepperBase",
    "StepperConfig",
    "__version__",
    "configure_logging",
    "create_integrator",
    "create_linear_solver",
    "create_mixer",
    "create_observer",
    "create_stepper",
    "get_logger",
    "load_run_config",
    "save_run_config",
]
