"""
Exception classes for pdeflow with actionable error messages.

Fatal conditions of an integration run (unset termination mode, degenerate
step size, missing collaborators) are raised as exceptions. Linear solver
non-convergence is NOT an exception; it is returned as a status code.
"""

from __future__ import annotations

from typing import Any


class PDEFlowError(Exception):
    """
    Base exception for pdeflow errors with context and suggestions.

    The formatted message carries:
    - the component that raised it
    - a suggested action, when one is known
    - an error code and diagnostic values
    """

    def __init__(
        self,
        message: str,
        component: str | None = None,
        suggested_action: str | None = None,
        error_code: str | None = None,
        diagnostic_data: dict[str, Any] | None = None,
    ):
        self.component = component or "pdeflow"
        self.suggested_action = suggested_action
        self.error_code = error_code
        self.diagnostic_data = diagnostic_data or {}

        full_message = f"[{self.component}] {message}"

        if self.suggested_action:
            full_message += f"\nSuggestion: {self.suggested_action}"

        if self.error_code:
            full_message += f"\nError Code: {self.error_code}"

        if self.diagnostic_data:
            full_message += "\nDiagnostic Information:"
            for key, value in self.diagnostic_data.items():
                full_message += f"\n   - {key}: {value}"

        super().__init__(full_message)


class ConfigurationError(PDEFlowError):
    """Exception raised when a run or solver is configured inconsistently."""

    def __init__(
        self,
        parameter_name: str,
        provided_value: Any,
        reason: str | None = None,
        component: str | None = None,
        valid_values: tuple | list | None = None,
    ):
        diagnostic_data = {
            "parameter": parameter_name,
            "provided_value": str(provided_value),
            "provided_type": type(provided_value).__name__,
        }

        if valid_values:
            diagnostic_data["valid_values"] = ", ".join(str(v) for v in valid_values)

        suggested_action = _generate_configuration_suggestions(parameter_name, provided_value, valid_values)

        message = f"Invalid configuration for parameter '{parameter_name}'"
        if reason:
            message += f": {reason}"

        self.parameter_name = parameter_name
        self.provided_value = provided_value

        super().__init__(
            message=message,
            component=component,
            suggested_action=suggested_action,
            error_code="INVALID_CONFIGURATION",
            diagnostic_data=diagnostic_data,
        )


class StepSizeError(PDEFlowError):
    """Exception raised when the effective time step is non-positive."""

    def __init__(
        self,
        dt: float,
        t: float,
        t_end: float | None = None,
        dt_advice: float | None = None,
        component: str | None = None,
    ):
        diagnostic_data: dict[str, Any] = {"dt": f"{dt:.6e}", "time": f"{t:.6e}"}

        if t_end is not None:
            diagnostic_data["end_time"] = f"{t_end:.6e}"
            diagnostic_data["remaining"] = f"{t_end - t:.6e}"

        if dt_advice is not None:
            diagnostic_data["equation_dt_advice"] = f"{dt_advice:.6e}"

        suggested_action = _generate_step_size_suggestions(dt, t, t_end, dt_advice)

        self.dt = dt
        self.t = t
        self.t_end = t_end

        super().__init__(
            message=f"Non-positive effective time step {dt:.3e} at t={t:.6e}",
            component=component,
            suggested_action=suggested_action,
            error_code="DEGENERATE_TIME_STEP",
            diagnostic_data=diagnostic_data,
        )


class MissingComponentError(PDEFlowError):
    """Exception raised when a required collaborator has not been supplied."""

    def __init__(self, component_name: str, owner: str | None = None, hint: str | None = None):
        self.component_name = component_name

        super().__init__(
            message=f"Required component '{component_name}' is missing",
            component=owner,
            suggested_action=hint or f"Provide a '{component_name}' before running",
            error_code="MISSING_COMPONENT",
            diagnostic_data={"missing": component_name},
        )


def _generate_configuration_suggestions(
    parameter_name: str,
    provided_value: Any,
    valid_values: tuple | list | None,
) -> str:
    """Generate specific suggestions for configuration errors."""

    suggestions = []

    if valid_values:
        suggestions.append(f"Use one of: {', '.join(str(v) for v in valid_values)}")

    if provided_value is None:
        suggestions.append(f"Set '{parameter_name}' explicitly")

    if isinstance(provided_value, (int, float)) and not isinstance(provided_value, bool) and provided_value < 0:
        suggestions.append(f"'{parameter_name}' must be non-negative")

    return " | ".join(suggestions) if suggestions else f"Check {parameter_name} value and try again"


def _generate_step_size_suggestions(
    dt: float,
    t: float,
    t_end: float | None,
    dt_advice: float | None,
) -> str:
    """Generate suggestions for degenerate step sizes."""

    if t_end is not None and t_end < t:
        return "End time lies before the current time: check the requested interval"

    if dt_advice is not None and dt_advice <= 0:
        return "The equation's stable step advice collapsed to zero: check the state for blow-up or zero spacing"

    return "Check dt, dt_min and dt_max, and the courant factor"
