"""This module defines configuration classes for the solver error methods.

An error method turns the current state of a solver into the scalar progress
estimate that is fed to the logger at every iteration.
"""

from abc import ABC
from dataclasses import dataclass, asdict
from typing import Any


__all__ = [
    "SolverErrorConfig",
    "FullResidualConfig",
    "CompressedResidualConfig",
    "LSGradientConfig",
    "_is_solver_error_config",
]


@dataclass(kw_only=True, frozen=False)
class SolverErrorConfig(ABC):
    """Abstract base class for solver error configurations."""

    def to_dict(self) -> dict:
        """Convert the configuration to a dictionary.

        Returns:
            dict: A dictionary representation of the configuration.
        """
        return asdict(self)


@dataclass(kw_only=True, frozen=False)
class FullResidualConfig(SolverErrorConfig):
    """Configuration for the full residual norm ``||b - Ax||``."""

    pass


@dataclass(kw_only=True, frozen=False)
class CompressedResidualConfig(SolverErrorConfig):
    """Configuration for the compressed residual norm ``||Sb - SAx||``.

    The compressed residual costs as much as one compressed iteration and is the
    quantity tracked by the moving-average logger.
    """

    pass


@dataclass(kw_only=True, frozen=False)
class LSGradientConfig(SolverErrorConfig):
    """Configuration for the least-squares gradient norm ``||A^T (Ax - b)||``."""

    pass


def _is_solver_error_config(param: Any, param_name: str):
    if not isinstance(param, SolverErrorConfig):
        raise TypeError(
            f"{param_name} is of type {type(param).__name__}, "
            "but expected type SolverErrorConfig"
        )
