"""This module defines the abstract base class for solver recipes.

A solver recipe owns every component and buffer a solve needs. Buffers are sized
once, at completion, to the largest compression any iteration can produce and are
re-viewed, never reallocated, inside the iteration loop.
"""

from abc import ABC, abstractmethod
from typing import Tuple
import warnings

import torch

from .configs import SolverConfig, _get_solver_name
from rlinalg.compressors import complete_compressor, update_compressor
from rlinalg.loggers import complete_logger
from rlinalg.solver_errors import complete_error, compute_error
from rlinalg.utils.enums import Cardinality
from rlinalg.utils.errors import ConfigurationError, DimensionMismatchError
from rlinalg.utils.wandb_ import _get_wandb_kwargs


__all__ = ["Solver"]


class Solver(ABC):
    """Abstract base class for solver recipes.

    Attributes:
        config (SolverConfig): Configuration of the solver.
        alpha (float): Relaxation parameter.
        compressor (Compressor): The compressor, resampled every iteration.
        operator: The compressor, or its adjoint when the compressor was configured
            with the cardinality the solver does not compress from.
        logger (Logger): The logger recipe.
        error (SolverError): The error method.
        solution_vec (torch.Tensor): The caller's solution vector, updated in place.
    """

    provides: Tuple[str, ...] = ()
    compress_side: Cardinality = Cardinality.LEFT

    def __init__(
        self,
        config: SolverConfig,
        x: torch.Tensor,
        A: torch.Tensor,
        b: torch.Tensor,
    ):
        self.config = config
        self.name = _get_solver_name(config)
        self.alpha = config.alpha

        compressor_config = config.compressor_config
        self._adjoint = compressor_config.cardinality != self.compress_side
        if self._adjoint:
            warnings.warn(
                f"Compressor has cardinality "
                f"`{compressor_config.cardinality.name.lower()}` but the {self.name} "
                f"solver compresses from the `{self.compress_side.name.lower()}`. "
                "The adjoint of the compressor is used instead."
            )
        self.compressor = complete_compressor(
            compressor_config, x, self._target_of(A), b
        )
        self.operator = self.compressor.T if self._adjoint else self.compressor
        self.logger = complete_logger(config.logger_config, self.compressor, A)
        self.error = complete_error(config.error_config, config, A, b)
        self._check_capabilities()

        if config.logger_config.wandb_kwargs is not None:
            run_config = {"solver": self.name, **config.to_dict()}
            self.logger.run_logger.wandb_kwargs = _get_wandb_kwargs(
                config.logger_config.wandb_kwargs, run_config
            )

        self.solution_vec = x
        self._allocate(x, A, b)

    def _missing_capability(self, component, capability: str) -> ConfigurationError:
        return ConfigurationError(
            f"{type(component).__name__} is not valid for a {self.name} solver: "
            f"'{capability}' is not available."
        )

    def _check_capabilities(self):
        if not self.error.provides_residual:
            raise self._missing_capability(self.error, "residual")
        if not getattr(self.logger, "provides_converged", False):
            raise self._missing_capability(self.logger, "converged")
        for view in self.error.required_views:
            if view not in self.provides:
                raise self._missing_capability(self.error, view)

    @abstractmethod
    def _allocate(self, x: torch.Tensor, A: torch.Tensor, b: torch.Tensor):
        """Allocate every buffer the iterations need."""
        pass

    @abstractmethod
    def _compress(self, x: torch.Tensor, A: torch.Tensor, b: torch.Tensor):
        """Re-view the buffers to the current compression and fill them."""
        pass

    @abstractmethod
    def _step(self, A: torch.Tensor, b: torch.Tensor):
        """Update ``solution_vec`` from the current compression."""
        pass

    def _prepare(self, x: torch.Tensor, A: torch.Tensor, b: torch.Tensor):
        """Initialize the state that depends on the starting point."""
        pass

    def _resample(self, x: torch.Tensor, A: torch.Tensor, b: torch.Tensor):
        update_compressor(self.compressor, x, self._target_of(A), b)

    def _target_of(self, A: torch.Tensor) -> torch.Tensor:
        return A.mT if self._adjoint else A

    def _check_dims(self, x: torch.Tensor, A: torch.Tensor, b: torch.Tensor):
        if x.shape[0] != A.shape[1]:
            raise DimensionMismatchError(
                f"Dimension of x, {x.shape[0]}, is different from the number of "
                f"columns in A, {A.shape[1]}."
            )
        elif b.shape[0] != A.shape[0]:
            raise DimensionMismatchError(
                f"Dimension of b, {b.shape[0]}, is different from the number of "
                f"rows in A, {A.shape[0]}."
            )

    def rsolve(self, x: torch.Tensor, A: torch.Tensor, b: torch.Tensor) -> torch.Tensor:
        """Run the solver from the starting point ``x``, updating it in place.

        Iteration 0 records the error of the starting point. The loop ends when the
        stopping criterion of the logger is met or after ``max_it`` iterations.
        Running out of iterations is not an error: check ``self.logger.converged``.

        Args:
            x (torch.Tensor): Starting point, overwritten by the solution.
            A (torch.Tensor): The coefficient matrix.
            b (torch.Tensor): The constant vector.

        Returns:
            torch.Tensor: ``x``.

        Raises:
            DimensionMismatchError: If the dimensions of x, A and b disagree.
        """
        self._check_dims(x, A, b)
        self.logger.reset()
        self.solution_vec = x
        self._prepare(x, A, b)
        self._compress(x, A, b)

        for i in range(self.logger.max_it + 1):
            err = compute_error(self.error, self, A, b)
            self.logger.update(err, i)
            if self.logger.converged or i == self.logger.max_it:
                break

            self._step(A, b)
            self._resample(x, A, b)
            self._compress(x, A, b)

        self.logger._terminate()
        return x
