"""This module defines the abstract base class for sub-solvers."""

from abc import ABC, abstractmethod

import torch

from .configs import SubSolverConfig
from rlinalg.utils.errors import DimensionMismatchError


__all__ = ["SubSolver"]


def _is_rank_deficient(R: torch.Tensor) -> bool:
    """Whether the triangular factor R cannot be inverted reliably."""
    if R.shape[0] != R.shape[1] or R.numel() == 0:
        return True
    diag = R.diagonal().abs()
    tol = torch.finfo(R.dtype).eps ** 0.5 * diag.max()
    return bool((diag <= tol).any())


class SubSolver(ABC):
    """Abstract base class for sub-solvers.

    A sub-solver holds the factorization of the current compressed matrix and
    solves against it. The factorization is refreshed with ``_update`` whenever the
    compressed matrix changes. Compressed matrices often lose rank, for instance
    when a row is sampled twice; their triangular factor is then not inverted and
    the pseudo-inverse gives the minimum-norm least-squares solution instead.

    Attributes:
        config (SubSolverConfig): Configuration of the sub-solver.
        Q (torch.Tensor): Orthonormal factor of the last factorization.
        R (torch.Tensor): Triangular factor of the last factorization.
        pinv (Optional[torch.Tensor]): Pseudo-inverse of the factored matrix when it
            is rank deficient, otherwise None.
    """

    def __init__(self, config: SubSolverConfig, A: torch.Tensor):
        self.config = config
        self.Q = None
        self.R = None
        self.pinv = None
        self._rhs_dim = 0
        self._update(A)

    @abstractmethod
    def _factor(self, A: torch.Tensor):
        """Compute ``Q`` and ``R`` for the matrix ``A``."""
        pass

    @abstractmethod
    def _solve(self, rhs: torch.Tensor) -> torch.Tensor:
        """Solve with the triangular factor, ``rhs`` has one column."""
        pass

    def _update(self, A: torch.Tensor):
        """Factor the matrix ``A``."""
        self._rhs_dim = A.shape[0]
        self._factor(A)
        if _is_rank_deficient(self.R):
            self.pinv = torch.linalg.pinv(A)
        else:
            self.pinv = None

    def solve(self, out: torch.Tensor, rhs: torch.Tensor) -> torch.Tensor:
        """Solve against the factored matrix and write the result into ``out``.

        Args:
            out (torch.Tensor): 1D output, overwritten in place.
            rhs (torch.Tensor): 1D right-hand side.

        Returns:
            torch.Tensor: ``out``.

        Raises:
            DimensionMismatchError: If ``rhs`` does not match the factored matrix.
        """
        if rhs.shape[0] != self._rhs_dim:
            raise DimensionMismatchError(
                f"Vector rhs has {rhs.shape[0]} entries while the factored matrix "
                f"has {self._rhs_dim} rows."
            )
        if self.pinv is not None:
            sol = self.pinv @ rhs
        else:
            sol = self._solve(rhs.unsqueeze(-1)).squeeze(-1)
        if out.shape != sol.shape:
            raise DimensionMismatchError(
                f"Vector out has {out.shape[0]} entries while the solution has "
                f"{sol.shape[0]} entries."
            )
        out.copy_(sol)
        return out
