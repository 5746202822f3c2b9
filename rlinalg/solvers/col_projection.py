"""Column projection solver for least squares problems.

Every iteration compresses the columns of ``A`` into ``A S`` and moves the iterate
along the range of ``S`` by the least-squares correction of the current residual
within the compressed column space.
"""

import torch

from .configs import ColumnProjectionConfig
from .solver import Solver
from rlinalg.compressors import multiply
from rlinalg.sub_solvers import complete_sub_solver, update_sub_solver
from rlinalg.utils.enums import Cardinality


class ColumnProjection(Solver):
    """Column projection solver recipe.

    Attributes:
        compressed_mat (torch.Tensor): Buffer holding ``A S``.
        mat_view (torch.Tensor): The columns of ``compressed_mat`` in use.
        residual_vec (torch.Tensor): The residual ``A x - b``, updated every
            iteration without recomputing ``A x``.
        update_vec (torch.Tensor): Buffer for the coefficients of the correction.
        sub_solver (SubSolver): Solver of the compressed least-squares problem.
    """

    provides = ("residual_vec",)
    compress_side = Cardinality.RIGHT

    def __init__(
        self,
        config: ColumnProjectionConfig,
        x: torch.Tensor,
        A: torch.Tensor,
        b: torch.Tensor,
    ):
        super().__init__(config, x, A, b)

    def _allocate(self, x, A, b):
        sample_size = self.operator.shape[1]
        self.compressed_mat = torch.zeros(
            A.shape[0], sample_size, dtype=A.dtype, device=A.device
        )
        self.residual_vec = torch.zeros(A.shape[0], dtype=b.dtype, device=b.device)
        self.update_vec = torch.zeros(sample_size, dtype=x.dtype, device=x.device)
        self.mat_view = self.compressed_mat
        self.sub_solver = complete_sub_solver(
            self.config.sub_solver_config, self.compressed_mat
        )

    def _prepare(self, x, A, b):
        torch.mv(A, x, out=self.residual_vec)
        self.residual_vec.sub_(b)

    def _compress(self, x, A, b):
        cols_s = self.operator.shape[1]
        self.mat_view = self.compressed_mat[:, :cols_s]
        multiply(self.mat_view, A, self.operator)

    def _step(self, A, b):
        cols_s = self.mat_view.shape[1]
        update = self.update_vec[:cols_s]
        if cols_s == 1:
            a = self.mat_view[:, 0]
            norm2 = torch.dot(a, a)
            if norm2 == 0:
                return
            update[0] = torch.dot(a, self.residual_vec) / norm2
        else:
            update_sub_solver(self.sub_solver, self.mat_view)
            self.sub_solver.solve(update, self.residual_vec)

        multiply(self.solution_vec, self.operator, update, alpha=-self.alpha, beta=1.0)
        self.residual_vec.addmv_(self.mat_view, update, alpha=-self.alpha)
