"""This module defines the abstract base class for low-rank approximators.

An approximator recipe behaves as the matrix it represents: it can be multiplied
from either side with ``@`` and transposed, without copy, with ``.T``. The represented
matrix is stored as a product of thin factors and is never formed.
"""

from abc import ABC, abstractmethod
from typing import List, Tuple
import warnings

import torch

from .configs import ApproximatorConfig
from rlinalg.compressors import complete_compressor, multiply
from rlinalg.utils.enums import Cardinality
from rlinalg.utils.errors import DimensionMismatchError


__all__ = ["Approximator", "ApproximatorAdjoint"]


def _chain(factors: List[torch.Tensor], X: torch.Tensor) -> torch.Tensor:
    for factor in reversed(factors):
        X = factor @ X
    return X


class _ApproximatorOperator(ABC):
    @property
    @abstractmethod
    def shape(self) -> Tuple[int, int]:
        pass

    @abstractmethod
    def _factors(self) -> List[torch.Tensor]:
        """Thin factors whose product is the represented matrix."""
        pass

    def __matmul__(self, X: torch.Tensor) -> torch.Tensor:
        if not isinstance(X, torch.Tensor):
            return NotImplemented
        if X.shape[0] != self.shape[1]:
            raise DimensionMismatchError(
                f"Matrix A has {X.shape[0]} rows while R has {self.shape[1]} columns."
            )
        return _chain(self._factors(), X)

    def __rmatmul__(self, X: torch.Tensor) -> torch.Tensor:
        if not isinstance(X, torch.Tensor):
            return NotImplemented
        if X.shape[-1] != self.shape[0]:
            raise DimensionMismatchError(
                f"Matrix A has {X.shape[-1]} columns while R has {self.shape[0]} rows."
            )
        # X R = (R^T X^T)^T
        factors_t = [f.mT for f in reversed(self._factors())]
        if X.ndim == 1:
            return _chain(factors_t, X)
        return _chain(factors_t, X.mT).mT


class Approximator(_ApproximatorOperator):
    """Abstract base class for low-rank approximator recipes.

    Attributes:
        config (ApproximatorConfig): Configuration of the approximator.
        compressor (Compressor): The compressor applied to ``A`` from the right.
        operator: The compressor, or its adjoint for a left compressor.
        n_rows (int): Number of rows of the approximated matrix.
        n_cols (int): Number of columns of the approximated matrix.
    """

    def __init__(self, config: ApproximatorConfig, A: torch.Tensor):
        self.config = config
        self.power_its = config.power_its
        self.orthogonalize = config.orthogonalize
        self.n_rows, self.n_cols = A.shape

        compressor_config = config.compressor_config
        self._adjoint = compressor_config.cardinality == Cardinality.LEFT
        if self._adjoint:
            warnings.warn(
                "Compressor with cardinality `left` being applied from the `right`. "
                "The adjoint of the compressor is used instead."
            )
        self.compressor = complete_compressor(
            compressor_config, A.mT if self._adjoint else A
        )
        self.operator = self.compressor.T if self._adjoint else self.compressor

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.n_rows, self.n_cols)

    @property
    def T(self) -> "ApproximatorAdjoint":
        return ApproximatorAdjoint(self)

    @abstractmethod
    def _update(self, A: torch.Tensor):
        """Compute the approximation of ``A`` with the current compressor."""
        pass

    def _range(self, A: torch.Tensor) -> torch.Tensor:
        """Orthonormal basis approximating the range of ``A``.

        Without orthogonalization this is the randomized power iteration
        (Algorithm 4.3 of Halko et al.), otherwise the randomized subspace iteration
        (Algorithm 4.4).
        """
        Y = torch.zeros(
            A.shape[0], self.operator.shape[1], dtype=A.dtype, device=A.device
        )
        multiply(Y, A, self.operator)

        if not self.orthogonalize:
            for _ in range(self.power_its):
                Y = A @ (A.mT @ Y)
            return torch.linalg.qr(Y, mode="reduced").Q

        Q = torch.linalg.qr(Y, mode="reduced").Q
        for _ in range(self.power_its):
            # re-orthogonalizing after every product limits rounding errors
            Q = torch.linalg.qr(A.mT @ Q, mode="reduced").Q
            Q = torch.linalg.qr(A @ Q, mode="reduced").Q
        return Q


class ApproximatorAdjoint(_ApproximatorOperator):
    """Zero-copy transposed view of an approximator.

    Attributes:
        parent (Approximator): The approximator being transposed.
    """

    def __init__(self, parent: Approximator):
        self.parent = parent

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.parent.shape[1], self.parent.shape[0])

    @property
    def T(self) -> Approximator:
        return self.parent

    def _factors(self) -> List[torch.Tensor]:
        return [f.mT for f in reversed(self.parent._factors())]
