"""This module provides a factory for creating sub-solvers."""

import torch

from .configs import (
    SubSolverConfig,
    LQSolverConfig,
    QRSolverConfig,
    _is_sub_solver_config,
)
from .lq import LQSolver
from .qr import QRSolver
from .sub_solver import SubSolver
from rlinalg.utils.input_checkers import _is_torch_tensor


# Mapping of configuration classes to their corresponding sub-solver classes
CONFIG_TO_SUB_SOLVER = {
    LQSolverConfig: LQSolver,
    QRSolverConfig: QRSolver,
}


__all__ = ["complete_sub_solver", "update_sub_solver"]


def complete_sub_solver(
    sub_solver_config: SubSolverConfig, A: torch.Tensor
) -> SubSolver:
    """Create a sub-solver and factor ``A``.

    Args:
        sub_solver_config (SubSolverConfig): The configuration of the sub-solver.
        A (torch.Tensor): The (compressed) matrix to factor.

    Returns:
        SubSolver: The completed sub-solver.

    Raises:
        KeyError: If no sub-solver class is found for the configuration.
    """
    _is_sub_solver_config(sub_solver_config, "sub_solver_config")
    _is_torch_tensor(A, "A")
    sub_solver_class = CONFIG_TO_SUB_SOLVER.get(sub_solver_config.__class__)

    if sub_solver_class is None:
        raise KeyError(
            f"No sub-solver found for configuration: {sub_solver_config.__class__}"
        )

    return sub_solver_class(sub_solver_config, A)


def update_sub_solver(sub_solver: SubSolver, A: torch.Tensor) -> SubSolver:
    """Refactor a sub-solver against a new matrix."""
    _is_torch_tensor(A, "A")
    sub_solver._update(A)
    return sub_solver
