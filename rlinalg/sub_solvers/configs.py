"""This module defines configuration classes for the sub-solvers.

A sub-solver solves the small compressed system produced at every iteration of a
block solver. The configurations carry no parameters; they only select the
factorization.
"""

from abc import ABC
from dataclasses import dataclass, asdict
from typing import Any


__all__ = [
    "SubSolverConfig",
    "LQSolverConfig",
    "QRSolverConfig",
    "_is_sub_solver_config",
]


@dataclass(kw_only=True, frozen=False)
class SubSolverConfig(ABC):
    """Abstract base class for sub-solver configurations."""

    def to_dict(self) -> dict:
        """Convert the configuration to a dictionary.

        Returns:
            dict: A dictionary representation of the configuration.
        """
        return asdict(self)


@dataclass(kw_only=True, frozen=False)
class LQSolverConfig(SubSolverConfig):
    """Configuration for the LQ sub-solver.

    The LQ sub-solver returns the minimum-norm solution of a wide system.
    """

    pass


@dataclass(kw_only=True, frozen=False)
class QRSolverConfig(SubSolverConfig):
    """Configuration for the QR sub-solver.

    The QR sub-solver returns the least-squares solution of a tall system.
    """

    pass


def _is_sub_solver_config(param: Any, param_name: str):
    if not isinstance(param, SubSolverConfig):
        raise TypeError(
            f"{param_name} is of type {type(param).__name__}, "
            "but expected type SubSolverConfig"
        )
