"""Compressor module for matrix compression operations.

This module provides the abstract base class shared by every compressor, the
zero-copy adjoint view, and the ``multiply`` entry point through which solvers and
approximators apply a compressor to a matrix or vector.

Every compressor stores its operator in a canonical "left form" ``L`` of shape
``(compression_dim, initial_size)``. A compressor with LEFT cardinality is ``S = L``
and one with RIGHT cardinality is ``S = L^T``, so a single pair of kernels
(``L @ B`` and ``L^T @ B``) serves both cardinalities, both sides, and the adjoint.
"""

from abc import ABC, abstractmethod
from typing import Optional, Tuple, Union

import torch

from .configs import CompressorConfig
from .dim_checks import _left_mul_dimcheck, _right_mul_dimcheck, _vec_mul_dimcheck
from rlinalg.utils.enums import Cardinality


__all__ = ["Compressor", "CompressorAdjoint", "multiply", "transpose"]


def _scale_accumulate(
    C: torch.Tensor, update: torch.Tensor, alpha: float, beta: float
) -> torch.Tensor:
    """Compute ``C = alpha * update + beta * C`` in place."""
    if beta == 0.0:
        # beta == 0 must not propagate nan/inf stored in C
        C.copy_(update)
        if alpha != 1.0:
            C.mul_(alpha)
    else:
        if beta != 1.0:
            C.mul_(beta)
        C.add_(update, alpha=alpha)
    return C


class _CompressorOperator(ABC):
    """Operations shared by compressors and their adjoint views."""

    @property
    @abstractmethod
    def shape(self) -> Tuple[int, int]:
        pass

    @property
    @abstractmethod
    def dtype(self) -> torch.dtype:
        pass

    @property
    @abstractmethod
    def device(self) -> torch.device:
        pass

    @abstractmethod
    def _left_apply(self, C, A, alpha, beta):
        """Compute ``C = alpha * self @ A + beta * C`` without dimension checks."""
        pass

    @abstractmethod
    def _right_apply(self, C, A, alpha, beta):
        """Compute ``C = alpha * A @ self + beta * C`` without dimension checks."""
        pass

    def _resize(self, operand: torch.Tensor, side: Cardinality):
        """Adapt the realized shape to an operand. A no-op for fixed-shape operators."""
        pass

    def __matmul__(self, A: torch.Tensor) -> torch.Tensor:
        if not isinstance(A, torch.Tensor):
            return NotImplemented
        self._resize(A, Cardinality.LEFT)
        out_shape = (self.shape[0],) if A.ndim == 1 else (self.shape[0], A.shape[1])
        C = torch.zeros(out_shape, dtype=A.dtype, device=A.device)
        multiply(C, self, A)
        return C

    def __rmatmul__(self, A: torch.Tensor) -> torch.Tensor:
        if not isinstance(A, torch.Tensor):
            return NotImplemented
        self._resize(A, Cardinality.RIGHT)
        out_shape = (self.shape[1],) if A.ndim == 1 else (A.shape[0], self.shape[1])
        C = torch.zeros(out_shape, dtype=A.dtype, device=A.device)
        multiply(C, A, self)
        return C

    def to_dense(self) -> torch.Tensor:
        """Materialize the operator as a dense matrix."""
        eye = torch.eye(self.shape[1], dtype=self.dtype, device=self.device)
        return self @ eye


class Compressor(_CompressorOperator):
    """Abstract base class for compressors.

    A compressor is a fully allocated random operator with a fixed shape. Its
    randomness is resampled in place by ``_update``.

    Attributes:
        config (CompressorConfig): Configuration the compressor was built from.
        cardinality (Cardinality): The side the compressor is meant to be applied
            from.
        n_rows (int): Number of rows of the operator.
        n_cols (int): Number of columns of the operator.
    """

    def __init__(
        self,
        config: CompressorConfig,
        A: torch.Tensor,
        compression_dim: Optional[int] = None,
    ):
        """Initializes the compressor against the matrix it will compress.

        Args:
            config (CompressorConfig): Configuration of the compressor.
            A (torch.Tensor): The matrix (or vector, treated as one column) that
                will be compressed.
            compression_dim (Optional[int]): Target dimension. Defaults to
                ``config.compression_dim``.
        """
        self.config = config
        self.cardinality = config.cardinality
        self._dtype = config.dtype if config.dtype is not None else A.dtype
        self._device = A.device

        if compression_dim is None:
            compression_dim = config.compression_dim
        A = A if A.ndim == 2 else A.unsqueeze(-1)
        if self.cardinality == Cardinality.LEFT:
            self.n_rows, self.n_cols = compression_dim, A.shape[0]
            self._initial_size = A.shape[0]
        else:
            self.n_rows, self.n_cols = A.shape[1], compression_dim
            self._initial_size = A.shape[1]

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.n_rows, self.n_cols)

    @property
    def dtype(self) -> torch.dtype:
        return self._dtype

    @property
    def device(self) -> torch.device:
        return self._device

    @property
    def compression_dim(self) -> int:
        if self.cardinality == Cardinality.LEFT:
            return self.n_rows
        return self.n_cols

    @property
    def T(self) -> "CompressorAdjoint":
        return CompressorAdjoint(self)

    @abstractmethod
    def _update(
        self,
        x: Optional[torch.Tensor] = None,
        A: Optional[torch.Tensor] = None,
        b: Optional[torch.Tensor] = None,
    ):
        """Resample the randomness of the compressor in place."""
        pass

    @abstractmethod
    def _form_mul(
        self,
        C: torch.Tensor,
        B: torch.Tensor,
        alpha: float,
        beta: float,
        transpose: bool,
    ):
        """Compute ``C = alpha * op(L) @ B + beta * C`` for the left form ``L``.

        Args:
            C (torch.Tensor): 2D output, possibly a strided view.
            B (torch.Tensor): 2D input, possibly a strided view.
            alpha (float): Scale of the product.
            beta (float): Scale of the previous content of C.
            transpose (bool): Use ``L^T`` instead of ``L``.
        """
        pass

    def _left_apply(self, C, A, alpha, beta, adjoint=False):
        # S = L for LEFT and S = L^T for RIGHT
        transpose = (self.cardinality == Cardinality.RIGHT) != adjoint
        self._form_mul(C, A, alpha, beta, transpose=transpose)

    def _right_apply(self, C, A, alpha, beta, adjoint=False):
        # C = A op(S) is evaluated as C^T = op(S)^T A^T
        self._left_apply(C.mT, A.mT, alpha, beta, adjoint=not adjoint)


class CompressorAdjoint(_CompressorOperator):
    """Zero-copy transposed view of a compressor.

    The view holds a reference to its parent, reports the swapped shape, and
    routes multiplications to the transposed kernels of the parent. Resampling the
    parent is visible through the view.

    Attributes:
        parent (Compressor): The compressor being transposed.
    """

    def __init__(self, parent: Compressor):
        self.parent = parent

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.parent.n_cols, self.parent.n_rows)

    @property
    def dtype(self) -> torch.dtype:
        return self.parent.dtype

    @property
    def device(self) -> torch.device:
        return self.parent.device

    @property
    def T(self) -> Compressor:
        return self.parent

    def _resize(self, operand: torch.Tensor, side: Cardinality):
        other = Cardinality.RIGHT if side == Cardinality.LEFT else Cardinality.LEFT
        self.parent._resize(operand.mT if operand.ndim == 2 else operand, other)

    def _left_apply(self, C, A, alpha, beta):
        self.parent._left_apply(C, A, alpha, beta, adjoint=True)

    def _right_apply(self, C, A, alpha, beta):
        self.parent._right_apply(C, A, alpha, beta, adjoint=True)


def transpose(
    S: Union[Compressor, CompressorAdjoint]
) -> Union[Compressor, CompressorAdjoint]:
    """Return the adjoint of a compressor; ``transpose(transpose(S)) is S``."""
    if not isinstance(S, _CompressorOperator):
        raise TypeError(
            f"S is of type {type(S).__name__}, "
            "but expected type Compressor or CompressorAdjoint"
        )
    return S.T


def multiply(
    C: torch.Tensor,
    left: Union[torch.Tensor, Compressor, CompressorAdjoint],
    right: Union[torch.Tensor, Compressor, CompressorAdjoint],
    alpha: float = 1.0,
    beta: float = 0.0,
) -> torch.Tensor:
    """Compute ``C = alpha * left @ right + beta * C`` in place.

    Exactly one of ``left`` and ``right`` is a compressor (or its adjoint), the
    other is a 1D or 2D tensor. Dimensions are validated before ``C`` is touched.

    Args:
        C (torch.Tensor): The output, overwritten in place. May be a view.
        left: The left operand.
        right: The right operand.
        alpha (float): Scale of the product. Defaults to 1.0.
        beta (float): Scale of the previous content of C. Defaults to 0.0.

    Returns:
        torch.Tensor: ``C``.

    Raises:
        DimensionMismatchError: If the operand shapes are incompatible.
        TypeError: If no multiplication is defined for the operand types.

    Example:
        >>> S = complete_compressor(GaussianConfig(compression_dim=5), A)
        >>> C = torch.zeros(5, A.shape[1])
        >>> multiply(C, S, A)
    """
    if isinstance(left, _CompressorOperator) and isinstance(right, torch.Tensor):
        left._resize(right, Cardinality.LEFT)
        if right.ndim == 1:
            _vec_mul_dimcheck(C, left, right)
            left._left_apply(C.unsqueeze(-1), right.unsqueeze(-1), alpha, beta)
        else:
            _left_mul_dimcheck(C, left, right)
            left._left_apply(C, right, alpha, beta)
    elif isinstance(right, _CompressorOperator) and isinstance(left, torch.Tensor):
        right._resize(left, Cardinality.RIGHT)
        if left.ndim == 1:
            _vec_mul_dimcheck(C, right, left, transposed=True)
            right._right_apply(C.unsqueeze(0), left.unsqueeze(0), alpha, beta)
        else:
            _right_mul_dimcheck(C, left, right)
            right._right_apply(C, left, alpha, beta)
    else:
        raise TypeError(
            "No method multiply for operands of type "
            f"{type(C).__name__}, {type(left).__name__} and {type(right).__name__}"
        )
    return C
