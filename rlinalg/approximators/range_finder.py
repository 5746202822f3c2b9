import torch

from .approximator import Approximator
from .configs import RangeFinderConfig


class RangeFinder(Approximator):
    """Randomized range finder recipe.

    The recipe represents the ``(rows, compression_dim)`` orthonormal matrix ``Q``
    approximating the range of ``A``. ``R @ (R.T @ A)`` is then a low-rank
    approximation of ``A``.

    Attributes:
        range (torch.Tensor): The orthonormal basis ``Q``.
    """

    def __init__(self, config: RangeFinderConfig, A: torch.Tensor):
        super().__init__(config, A)
        self.range = None

    @property
    def shape(self):
        return (self.n_rows, self.operator.shape[1])

    def _factors(self):
        return [self.range]

    def _update(self, A):
        self.range = self._range(A)
