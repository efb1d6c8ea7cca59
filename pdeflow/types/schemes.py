"""
Enumerations shared by the integrator, observers and linear solvers.

- IntegrationType: how an integration run terminates
- NormType: residual norm used by iterative linear solvers
- ObserverCadence: when an observer acts on the notifications it receives
- SolveStatus: return status of a linear solve
"""

from __future__ import annotations

from enum import Enum, IntEnum


class IntegrationType(str, Enum):
    """
    Termination mode of an integration run.

    - **CYCLE**: advance a fixed number of steps (cycle_end - cycle)
    - **TIME**: advance until a fixed end time is reached exactly
    - **LIST**: advance through an increasing list of checkpoint times
    """

    CYCLE = "cycle"
    TIME = "time"
    LIST = "list"


class NormType(str, Enum):
    """
    Residual norm used to decide iterative solver convergence.

    - **INF**: max |r_i|
    - **EUC**: sqrt(sum r_i^2)
    - **L2**: sqrt(sum w_i r_i^2 / sum w_i), with grid quadrature weights w
    - **L1**: sum w_i |r_i| / sum w_i
    - **NONE**: no stopping test; iterate exactly maxit times
    """

    INF = "inf"
    EUC = "euc"
    L2 = "l2"
    L1 = "l1"
    NONE = "none"

    @classmethod
    def from_string(cls, name: str | NormType) -> NormType:
        """
        Parse a norm name (case-insensitive).

        Accepts the enum values plus the aliases ``euclidean``, ``infinity``,
        ``max`` and the GCG_NORM_* spellings.

        Raises:
            ConfigurationError: If the name is not recognised
        """
        if isinstance(name, cls):
            return name

        key = str(name).strip().lower()
        if key.startswith("gcg_norm_"):
            key = key[len("gcg_norm_") :]

        key = _NORM_ALIASES.get(key, key)
        for member in cls:
            if member.value == key:
                return member

        from pdeflow.utils.exceptions import ConfigurationError

        raise ConfigurationError(
            parameter_name="normtype",
            provided_value=name,
            reason="unknown norm name",
            component="NormType",
            valid_values=[m.value for m in cls],
        )


_NORM_ALIASES = {
    "infinity": "inf",
    "max": "inf",
    "euclidean": "euc",
    "l_2": "l2",
    "l_1": "l1",
}


class ObserverCadence(str, Enum):
    """Whether an observer acts every N cycles or every time interval."""

    CYCLE = "cycle"
    TIME = "time"


class SolveStatus(IntEnum):
    """
    Status returned by LinSolverBase.solve.

    CONVERGED is 0 so the status can be compared against the integer
    convention ``status == 0`` for success.
    """

    CONVERGED = 0
    NOT_CONVERGED = 1
    BREAKDOWN = 2

    @property
    def converged(self) -> bool:
        return self is SolveStatus.CONVERGED
