"""This module implements the leverage-score distribution."""

import torch

from .distribution import Distribution
from rlinalg.utils.enums import Cardinality


class LeverageScore(Distribution):
    """Draws rows (or columns) with probability proportional to their leverage score.

    The leverage score of row i is the squared norm of the i-th row of the thin ``Q``
    factor of ``A`` (of ``A^T`` for columns). The scores sum to the rank of ``A``.
    """

    def _compute_weights(self, x, A, b) -> torch.Tensor:
        M = A if self.cardinality == Cardinality.LEFT else A.mT
        Q, _ = torch.linalg.qr(M, mode="reduced")
        return Q.abs().pow(2).sum(dim=1)
