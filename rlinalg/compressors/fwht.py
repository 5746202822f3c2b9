"""In-place fast Walsh-Hadamard transform."""

from typing import Optional

import torch

from rlinalg.utils.errors import DimensionMismatchError


__all__ = ["fwht_"]


def fwht_(
    x: torch.Tensor, signs: Optional[torch.Tensor] = None, scale: float = 1.0
) -> torch.Tensor:
    """Apply the unnormalized Hadamard matrix to ``x`` along its first dimension.

    Computes ``x <- scale * H @ diag(signs) @ x`` in place, where ``H`` is the
    Sylvester-ordered Hadamard matrix of order ``x.shape[0]`` (the ordering of
    ``scipy.linalg.hadamard``). Every column of a 2D input is transformed.

    Args:
        x (torch.Tensor): A contiguous 1D or 2D tensor whose first dimension is a
            power of two.
        signs (Optional[torch.Tensor]): Optional vector of +1/-1 entries of length
            ``x.shape[0]`` applied before the transform.
        scale (float): Factor applied to the result. Defaults to 1.0.

    Returns:
        torch.Tensor: ``x``, transformed in place.

    Raises:
        DimensionMismatchError: If the first dimension is not a power of two.
    """
    n = x.shape[0]
    if n < 1 or n & (n - 1) != 0:
        raise DimensionMismatchError("Size of vector must be power of 2.")
    if not x.is_contiguous():
        raise ValueError("fwht_ requires a contiguous tensor to operate in place")

    # signs and scaling are folded into the first pass over the data
    if signs is not None:
        x.mul_(signs.view(-1, *([1] * (x.ndim - 1))))
    if scale != 1.0:
        x.mul_(scale)

    trailing = x.shape[1:]
    h = 1
    while h < n:
        # pair entry j of each block with entry j + h
        y = x.view(n // (2 * h), 2, h, *trailing)
        top = y[:, 0].clone()
        y[:, 0].add_(y[:, 1])
        y[:, 1].sub_(top).neg_()
        h *= 2
    return x
