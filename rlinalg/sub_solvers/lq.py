"""LQ sub-solver: minimum-norm solutions of compressed systems.

For a wide ``A`` of shape ``(s, n)`` with ``s <= n``, the factorization
``A^T = QR`` gives ``A = R^T Q^T`` and the minimum-norm solution of ``A u = r`` is
``u = Q R^{-T} r``. A tall ``A``, which block Kaczmarz produces whenever more rows are
kept than ``A`` has columns, is factored as ``A = QR`` and solved in the least-squares
sense, ``u = R^{-1} Q^T r``.
"""

import torch

from .configs import LQSolverConfig
from .sub_solver import SubSolver


class LQSolver(SubSolver):
    def __init__(self, config: LQSolverConfig, A: torch.Tensor):
        self._wide = True
        super().__init__(config, A)

    def _factor(self, A: torch.Tensor):
        self._wide = A.shape[0] <= A.shape[1]
        if self._wide:
            self.Q, self.R = torch.linalg.qr(A.mT, mode="reduced")
        else:
            self.Q, self.R = torch.linalg.qr(A, mode="reduced")

    def _solve(self, rhs: torch.Tensor) -> torch.Tensor:
        if self._wide:
            y = torch.linalg.solve_triangular(self.R.mT, rhs, upper=False)
            return self.Q @ y
        return torch.linalg.solve_triangular(self.R, self.Q.mT @ rhs, upper=True)
