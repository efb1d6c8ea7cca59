"""
Logging utilities for pdeflow.

Usage:
    >>> from pdeflow.utils.flow_logging import get_logger, configure_logging
    >>> configure_logging(level="DEBUG")
    >>> logger = get_logger(__name__)
    >>> logger.info("Starting integration...")
"""

from __future__ import annotations

from .logger import (
    FlowLogger,
    LoggedOperation,
    configure_logging,
    get_logger,
    log_integration_progress,
    log_integration_start,
    log_solver_completion,
)

__all__ = [
    "FlowLogger",
    "LoggedOperation",
    "configure_logging",
    "get_logger",
    "log_integration_progress",
    "log_integration_start",
    "log_solver_completion",
]
