"""QR sub-solver: least-squares solutions of tall systems.

For a tall ``A = QR`` of shape ``(m, s)`` with ``m >= s``, the least-squares solution
of ``A u = r`` is ``u = R^{-1} Q^T r``. Wide or rank-deficient matrices are solved
through their pseudo-inverse.
"""

import torch

from .configs import QRSolverConfig
from .sub_solver import SubSolver


class QRSolver(SubSolver):
    def __init__(self, config: QRSolverConfig, A: torch.Tensor):
        super().__init__(config, A)

    def _factor(self, A: torch.Tensor):
        self.Q, self.R = torch.linalg.qr(A, mode="reduced")

    def _solve(self, rhs: torch.Tensor) -> torch.Tensor:
        return torch.linalg.solve_triangular(self.R, self.Q.mT @ rhs, upper=True)
