"""This module provides a factory for creating solver error methods."""

import torch

from .compressed_residual import CompressedResidual
from .configs import (
    SolverErrorConfig,
    FullResidualConfig,
    CompressedResidualConfig,
    LSGradientConfig,
    _is_solver_error_config,
)
from .full_residual import FullResidual
from .ls_gradient import LSGradient
from .solver_error import SolverError
from rlinalg.utils.input_checkers import _is_torch_tensor


# Mapping of configuration classes to their corresponding error classes
CONFIG_TO_SOLVER_ERROR = {
    FullResidualConfig: FullResidual,
    CompressedResidualConfig: CompressedResidual,
    LSGradientConfig: LSGradient,
}


__all__ = ["complete_error", "compute_error"]


def complete_error(
    error_config: SolverErrorConfig,
    solver_config,
    A: torch.Tensor,
    b: torch.Tensor,
) -> SolverError:
    """Create an error method for a solver.

    Args:
        error_config (SolverErrorConfig): The configuration of the error method.
        solver_config: The configuration of the solver the method will serve.
        A (torch.Tensor): The coefficient matrix.
        b (torch.Tensor): The constant vector.

    Returns:
        SolverError: The completed error method.

    Raises:
        KeyError: If no error class is found for the configuration.
    """
    _is_solver_error_config(error_config, "error_config")
    _is_torch_tensor(A, "A")
    _is_torch_tensor(b, "b")
    error_class = CONFIG_TO_SOLVER_ERROR.get(error_config.__class__)

    if error_class is None:
        raise KeyError(
            f"No solver error found for configuration: {error_config.__class__}"
        )

    return error_class(error_config, A, b)


def compute_error(
    error: SolverError, solver, A: torch.Tensor, b: torch.Tensor
) -> float:
    """Compute the error of the current iterate of ``solver``.

    Args:
        error (SolverError): The error method.
        solver: The solver whose ``solution_vec`` (and views) are inspected.
        A (torch.Tensor): The coefficient matrix.
        b (torch.Tensor): The constant vector.

    Returns:
        float: The error, also stored in ``error.error``.
    """
    return error._compute(solver, A, b)
