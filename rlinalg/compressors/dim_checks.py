"""Dimension checks shared by every compressor multiplication.

Each check raises a DimensionMismatchError before anything is written to the
output, so a failed multiplication never leaves a partially updated buffer.
"""

import torch

from rlinalg.utils.errors import DimensionMismatchError


def _left_mul_dimcheck(C: torch.Tensor, S, A: torch.Tensor):
    """Check the operands of ``C = S @ A``."""
    s_rows, s_cols = S.shape
    a_rows, a_cols = A.shape
    c_rows, c_cols = C.shape
    if a_rows != s_cols:
        raise DimensionMismatchError(
            f"Matrix A has {a_rows} rows while S has {s_cols} columns."
        )
    elif a_cols != c_cols:
        raise DimensionMismatchError(
            f"Matrix A has {a_cols} columns while C has {c_cols} columns."
        )
    elif c_rows != s_rows:
        raise DimensionMismatchError(
            f"Matrix C has {c_rows} rows while S has {s_rows} rows."
        )


def _right_mul_dimcheck(C: torch.Tensor, A: torch.Tensor, S):
    """Check the operands of ``C = A @ S``."""
    s_rows, s_cols = S.shape
    a_rows, a_cols = A.shape
    c_rows, c_cols = C.shape
    if a_cols != s_rows:
        raise DimensionMismatchError(
            f"Matrix A has {a_cols} columns while S has {s_rows} rows."
        )
    elif c_cols != s_cols:
        raise DimensionMismatchError(
            f"Matrix C has {c_cols} columns while S has {s_cols} columns."
        )
    elif c_rows != a_rows:
        raise DimensionMismatchError(
            f"Matrix C has {c_rows} rows while A has {a_rows} rows."
        )


def _vec_mul_dimcheck(z: torch.Tensor, S, y: torch.Tensor, transposed: bool = False):
    """Check the operands of ``z = S @ y`` (or ``z = y @ S`` when transposed)."""
    s_rows, s_cols = S.shape
    if transposed:
        s_rows, s_cols = s_cols, s_rows
    if y.shape[0] != s_cols:
        raise DimensionMismatchError(
            f"Vector y is of dimension {y.shape[0]} while S has {s_cols} "
            f"{'rows' if transposed else 'columns'}."
        )
    elif z.shape[0] != s_rows:
        raise DimensionMismatchError(
            f"Vector z is of dimension {z.shape[0]} while S has {s_rows} "
            f"{'columns' if transposed else 'rows'}."
        )
