import torch

from .approximator import Approximator
from .configs import RandSVDConfig


class RandSVD(Approximator):
    """Randomized SVD recipe.

    From the range ``Q`` of ``A``, the SVD ``W diag(S) V^T`` of the small matrix
    ``Q^T A`` gives ``U = Q W``. The recipe represents ``U diag(S) V^T``.

    Attributes:
        U (torch.Tensor): Approximate leading left singular vectors.
        S (torch.Tensor): Approximate leading singular values, in decreasing order.
        V (torch.Tensor): Approximate leading right singular vectors.
    """

    def __init__(self, config: RandSVDConfig, A: torch.Tensor):
        super().__init__(config, A)
        self.U = None
        self.S = None
        self.V = None

    def _factors(self):
        return [self.U * self.S, self.V.mT]

    def _update(self, A):
        Q = self._range(A)
        W, self.S, Vh = torch.linalg.svd(Q.mT @ A, full_matrices=False)
        self.U = Q @ W
        self.V = Vh.mT
