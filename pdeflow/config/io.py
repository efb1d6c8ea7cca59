"""
YAML I/O for run configurations.

This module loads and saves run configurations from/to YAML files. Command
line style overrides (``integrator.dt=0.01``) are merged with OmegaConf before
the result is validated by the pydantic models.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml
from omegaconf import OmegaConf
from pydantic import ValidationError

if TYPE_CHECKING:
    from .core import RunConfig


def merge_overrides(data: dict[str, Any], overrides: list[str] | None) -> dict[str, Any]:
    """
    Merge dot-list overrides into a plain configuration dictionary.

    Parameters
    ----------
    data : dict
        Configuration as loaded from YAML
    overrides : list[str] | None
        Entries such as ``"integrator.dt=0.01"`` or
        ``"integrator.times=[0.0,0.5,1.0]"``

    Returns
    -------
    dict
        Resolved plain dictionary
    """
    if not overrides:
        return data

    merged = OmegaConf.merge(OmegaConf.create(data), OmegaConf.from_dotlist(list(overrides)))
    container: dict[str, Any] = OmegaConf.to_container(merged, resolve=True)  # type: ignore[assignment]
    return container


def load_run_config(path: str | Path, overrides: list[str] | None = None) -> RunConfig:
    """
    Load run configuration from YAML file.

    Parameters
    ----------
    path : str | Path
        Path to YAML configuration file
    overrides : list[str] | None
        Dot-list overrides applied on top of the file

    Returns
    -------
    RunConfig
        Validated run configuration

    Raises
    ------
    FileNotFoundError
        If configuration file doesn't exist
    yaml.YAMLError
        If YAML syntax is invalid
    ValueError
        If configuration is invalid

    YAML Format
    -----------
    integrator:
      integ_type: time
      dt: 0.01
      time_end: 1.0
    stepper:
      name: exrk4
    linsolver:
      normtype: l2
      tol: 1.0e-8
    observers:
      - kind: logging
        cycle_interval: 10
    """
    from .core import RunConfig

    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise yaml.YAMLError(f"Invalid YAML syntax in {path}: {e}") from e

    if data is None:
        data = {}

    data = merge_overrides(data, overrides)

    try:
        return RunConfig.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration in {path}:\n{e}") from e


def save_run_config(config: RunConfig, path: str | Path) -> None:
    """
    Save run configuration to YAML file.

    Parameters
    ----------
    config : RunConfig
        Configuration to save
    path : str | Path
        Output file path
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    config_dict = config.model_dump(exclude_none=True, mode="json")

    with open(path, "w") as f:
        yaml.dump(config_dict, f, default_flow_style=False, sort_keys=False, indent=2, allow_unicode=True)


def validate_yaml_config(path: str | Path) -> tuple[bool, str]:
    """
    Validate YAML configuration without keeping the result.

    Returns
    -------
    tuple[bool, str]
        (is_valid, message) - True if valid, False with error message otherwise
    """
    from pdeflow.utils.exceptions import ConfigurationError

    try:
        load_run_config(path)
        return True, "Configuration is valid"
    except FileNotFoundError as e:
        return False, str(e)
    except yaml.YAMLError as e:
        return False, f"YAML syntax error: {e}"
    except (ValueError, ConfigurationError) as e:
        return False, f"Validation error: {e}"
