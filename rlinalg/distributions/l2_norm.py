"""This module implements the squared-norm (Frobenius) distribution."""

import torch

from .distribution import Distribution
from rlinalg.utils.enums import Cardinality


class L2Norm(Distribution):
    """Draws rows (or columns) with probability proportional to their squared norm.

    The probability of row i is ``||A_i||^2 / ||A||_F^2``.
    """

    def _compute_weights(self, x, A, b) -> torch.Tensor:
        dim = 1 if self.cardinality == Cardinality.LEFT else 0
        return A.abs().pow(2).sum(dim=dim)
