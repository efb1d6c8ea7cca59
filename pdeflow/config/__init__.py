"""
Configuration management for pdeflow runs.

Quick Start
-----------
>>> from pdeflow.config import IntegratorTraits, RunConfig
>>> traits = IntegratorTraits(integ_type="time", dt=0.01, time_end=1.0)

>>> # Or load from YAML with overrides
>>> from pdeflow.config import load_run_config
>>> config = load_run_config("runs/heat.yaml", overrides=["integrator.dt=0.005"])
"""

from .core import (
    IntegratorTraits,
    LinSolverTraits,
    LoggingConfig,
    ObserverTraits,
    RunConfig,
    StepperConfig,
)
from .io import load_run_config, merge_overrides, save_run_config, validate_yaml_config

__all__ = [
    "IntegratorTraits",
    "LinSolverTraits",
    "LoggingConfig",
    "ObserverTraits",
    "RunConfig",
    "StepperConfig",
    "load_run_config",
    "merge_overrides",
    "save_run_config",
    "validate_yaml_config",
]
