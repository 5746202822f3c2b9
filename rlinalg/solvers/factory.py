"""This module provides a factory for creating solver recipes.

It maps solver configurations to their classes and exposes ``complete_solver`` and
``rsolve``, the two entry points of a solve.
"""

import torch

from .col_projection import ColumnProjection
from .configs import (
    SolverConfig,
    KaczmarzConfig,
    ColumnProjectionConfig,
    IHSConfig,
    _is_solver_config,
)
from .ihs import IHS
from .kaczmarz import Kaczmarz
from .solver import Solver
from rlinalg.utils.input_checkers import _is_torch_tensor


# Mapping of configuration classes to their corresponding solver classes
CONFIG_TO_SOLVER = {
    KaczmarzConfig: Kaczmarz,
    ColumnProjectionConfig: ColumnProjection,
    IHSConfig: IHS,
}


__all__ = ["complete_solver", "rsolve"]


def _check_system(x: torch.Tensor, A: torch.Tensor, b: torch.Tensor):
    _is_torch_tensor(x, "x")
    _is_torch_tensor(A, "A")
    _is_torch_tensor(b, "b")
    if x.ndim != 1 or A.ndim != 2 or b.ndim != 1:
        raise ValueError(
            "Expected a 1D x, a 2D A and a 1D b, but received "
            f"{x.ndim}D, {A.ndim}D and {b.ndim}D tensors"
        )


def complete_solver(
    solver_config: SolverConfig,
    x: torch.Tensor,
    A: torch.Tensor,
    b: torch.Tensor,
) -> Solver:
    """Create a solver recipe for the system ``A x = b``.

    The compressor, logger, error method and sub-solver are completed, their
    compatibility is checked and every buffer is allocated.

    Args:
        solver_config (SolverConfig): The configuration of the solver.
        x (torch.Tensor): The starting point. It is aliased, not copied.
        A (torch.Tensor): The coefficient matrix.
        b (torch.Tensor): The constant vector.

    Returns:
        Solver: The completed solver.

    Raises:
        KeyError: If no solver class is found for the configuration.
        ConfigurationError: If the logger or the error method lacks a capability
            the solver relies on.

    Example:
        >>> config = KaczmarzConfig(
        ...     compressor_config=SparseSignConfig(compression_dim=1),
        ...     logger_config=BasicLoggerConfig(
        ...         max_it=2000, stopping_criterion=MaxIterations(2000)
        ...     ),
        ... )
        >>> solver = complete_solver(config, x, A, b)
        >>> rsolve(solver, x, A, b)
    """
    _is_solver_config(solver_config, "solver_config")
    _check_system(x, A, b)
    solver_class = CONFIG_TO_SOLVER.get(solver_config.__class__)

    if solver_class is None:
        raise KeyError(f"No solver found for configuration: {solver_config.__class__}")

    return solver_class(solver_config, x, A, b)


def rsolve(
    solver: Solver, x: torch.Tensor, A: torch.Tensor, b: torch.Tensor
) -> torch.Tensor:
    """Run a solver recipe from ``x``, see ``Solver.rsolve``."""
    _check_system(x, A, b)
    return solver.rsolve(x, A, b)
