"""
Core run configuration classes.

Configurations specify HOW a run proceeds (termination mode, step size
bounds, solver tolerances, which observers watch the run), not WHAT is
integrated (the Equation instance and its state are Python objects owned by
the caller).

All models are frozen: traits are immutable for the lifetime of a run.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from pdeflow.types.schemes import IntegrationType, NormType, ObserverCadence

if TYPE_CHECKING:
    from pathlib import Path


class _FrozenConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class IntegratorTraits(_FrozenConfig):
    """
    Integrator configuration.

    Attributes
    ----------
    integ_type : IntegrationType | None
        Termination mode: ``cycle``, ``time`` or ``list``. ``None`` means
        unset; ``Integrator.time_integrate`` refuses to run with it.
    dt : float
        Nominal step size (default: 1e-3)
    dt_min, dt_max : float
        Bounds the effective step size is clamped into
    courant : float
        CFL safety factor multiplying the equation's step size advice
        (default: 1.0)
    cycle, cycle_end : int
        Starting and ending cycle indices for ``cycle`` mode
    time, time_end : float
        Starting and ending times for ``time`` mode. ``time`` is the start
        time ``Integrator.time_integrate`` uses when called with ``t=None``
    times : list[float]
        Strictly increasing checkpoint times for ``list`` mode
    """

    integ_type: IntegrationType | None = None
    dt: float = Field(default=1e-3, gt=0)
    dt_min: float = Field(default=1e-12, gt=0)
    dt_max: float = Field(default=1e12, gt=0)
    courant: float = Field(default=1.0, gt=0)
    cycle: int = Field(default=0, ge=0)
    cycle_end: int = Field(default=0, ge=0)
    time: float = 0.0
    time_end: float = 0.0
    times: list[float] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_bounds(self) -> IntegratorTraits:
        """Validate step size bounds and the termination data."""
        if self.dt_min > self.dt_max:
            raise ValueError(f"dt_min ({self.dt_min}) must not exceed dt_max ({self.dt_max})")
        if self.cycle_end < self.cycle:
            raise ValueError(f"cycle_end ({self.cycle_end}) must not be less than cycle ({self.cycle})")
        if self.integ_type is IntegrationType.TIME and self.time_end < self.time:
            raise ValueError(f"time_end ({self.time_end}) must not be less than time ({self.time})")
        if any(b <= a for a, b in zip(self.times[:-1], self.times[1:], strict=True)):
            raise ValueError("times must be strictly increasing")
        if self.integ_type is IntegrationType.LIST and len(self.times) < 1:
            raise ValueError("list mode requires at least one checkpoint time")
        return self


class LinSolverTraits(_FrozenConfig):
    """
    Linear solver configuration.

    Attributes
    ----------
    bbdycond : bool
        Whether a boundary condition exists. When False, only the
        ``solve(b, x)`` and ``solve(A, b, x)`` forms are valid.
    maxit : int
        Maximum number of iterations (default: 512)
    normtype : NormType
        Convergence norm (default: inf). Accepts names such as ``"l2"``.
    tol : float
        Convergence tolerance relative to the norm of b (default: 1e-6)
    """

    bbdycond: bool = False
    maxit: int = Field(default=512, ge=1)
    normtype: NormType = NormType.INF
    tol: float = Field(default=1e-6, gt=0)

    @field_validator("normtype", mode="before")
    @classmethod
    def parse_normtype(cls, value: str | NormType) -> NormType:
        return NormType.from_string(value)


class ObserverTraits(_FrozenConfig):
    """
    Observer configuration.

    ``cadence`` selects whether ``cycle_interval`` or ``time_interval``
    decides when an observer acts on the notifications it receives.
    """

    kind: Literal["null", "logging", "history"] = "null"
    cadence: ObserverCadence = ObserverCadence.CYCLE
    cycle_interval: int = Field(default=1, ge=1)
    time_interval: float | None = Field(default=None, gt=0)
    log_level: Literal["DEBUG", "INFO", "WARNING"] = "INFO"
    max_history: int | None = Field(default=None, ge=1)

    @model_validator(mode="after")
    def validate_cadence(self) -> ObserverTraits:
        if self.cadence is ObserverCadence.TIME and self.time_interval is None:
            raise ValueError("time_interval must be provided when cadence is 'time'")
        return self


class StepperConfig(_FrozenConfig):
    """
    Time stepper selection.

    Attributes
    ----------
    name : str
        One of ``euler``, ``exrk2``, ``exrk4``, ``ab`` (default: exrk2)
    order : int
        Order of the Adams-Bashforth scheme, ignored by the others
    """

    name: str = "exrk2"
    order: int = Field(default=3, ge=1, le=3)


class LoggingConfig(_FrozenConfig):
    """
    Configuration for logging.

    Attributes
    ----------
    level : Literal["DEBUG", "INFO", "WARNING", "ERROR"]
        Logging level (default: INFO)
    log_to_file : bool
        Also write log records to a file (default: False)
    log_file_path : str | None
        Log file location; generated under ``logs/`` when omitted
    use_colors : bool
        Colour console output when colorlog is installed (default: True)
    include_location : bool
        Include module and line number in records (default: False)
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_to_file: bool = False
    log_file_path: str | None = None
    use_colors: bool = True
    include_location: bool = False


class RunConfig(_FrozenConfig):
    """
    Complete configuration of an integration run.

    Examples
    --------
    >>> config = RunConfig.from_yaml("runs/advection.yaml")

    >>> config = RunConfig(
    ...     integrator=IntegratorTraits(integ_type="time", dt=0.01, time_end=1.0),
    ...     stepper=StepperConfig(name="exrk4"),
    ... )
    """

    integrator: IntegratorTraits = Field(default_factory=IntegratorTraits)
    linsolver: LinSolverTraits = Field(default_factory=LinSolverTraits)
    stepper: StepperConfig = Field(default_factory=StepperConfig)
    observers: list[ObserverTraits] = Field(default_factory=lambda: [ObserverTraits()])
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def to_yaml(self, path: str | Path) -> None:
        """Save configuration to a YAML file."""
        from .io import save_run_config

        save_run_config(self, path)

    @classmethod
    def from_yaml(cls, path: str | Path, overrides: list[str] | None = None) -> RunConfig:
        """Load configuration from a YAML file, applying dot-list overrides."""
        from .io import load_run_config

        return load_run_config(path, overrides=overrides)
