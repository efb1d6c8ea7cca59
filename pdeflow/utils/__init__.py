"""
pdeflow utilities: exceptions and logging.
"""

from .exceptions import (
    ConfigurationError,
    MissingComponentError,
    PDEFlowError,
    StepSizeError,
)
from .flow_logging import LoggedOperation, configure_logging, get_logger

__all__ = [
    "ConfigurationError",
    "LoggedOperation",
    "MissingComponentError",
    "PDEFlowError",
    "StepSizeError",
    "configure_logging",
    "get_logger",
]
