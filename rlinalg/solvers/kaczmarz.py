"""Randomized (block) Kaczmarz solver.

Every iteration compresses the rows of the system, ``S A x = S b``, and projects the
iterate onto the solution set of the compressed system. With a single compressed row
this is the classical Kaczmarz step ``x <- x - alpha (a^T x - c) / ||a||^2 a``. With
more rows the projection is the minimum-norm correction computed by the sub-solver.
"""

import torch

from .configs import KaczmarzConfig
from .solver import Solver
from rlinalg.compressors import multiply
from rlinalg.sub_solvers import complete_sub_solver, update_sub_solver


class Kaczmarz(Solver):
    """Block Kaczmarz solver recipe.

    Attributes:
        compressed_mat (torch.Tensor): Buffer holding ``S A``.
        compressed_vec (torch.Tensor): Buffer holding ``S b``.
        mat_view (torch.Tensor): The rows of ``compressed_mat`` in use.
        vec_view (torch.Tensor): The entries of ``compressed_vec`` in use.
        update_vec (torch.Tensor): The last correction of the block path.
        sub_solver (SubSolver): Solver of the compressed system.
    """

    provides = ("compressed_system",)

    def __init__(
        self,
        config: KaczmarzConfig,
        x: torch.Tensor,
        A: torch.Tensor,
        b: torch.Tensor,
    ):
        super().__init__(config, x, A, b)

    def _allocate(self, x, A, b):
        sample_size = self.operator.shape[0]
        self.compressed_mat = torch.zeros(
            sample_size, A.shape[1], dtype=A.dtype, device=A.device
        )
        self.compressed_vec = torch.zeros(sample_size, dtype=b.dtype, device=b.device)
        self._compressed_res = torch.zeros_like(self.compressed_vec)
        self.update_vec = torch.zeros(A.shape[1], dtype=x.dtype, device=x.device)
        self.mat_view = self.compressed_mat
        self.vec_view = self.compressed_vec
        self.sub_solver = complete_sub_solver(
            self.config.sub_solver_config, self.compressed_mat
        )

    def _compress(self, x, A, b):
        rows_s = self.operator.shape[0]
        self.mat_view = self.compressed_mat[:rows_s]
        self.vec_view = self.compressed_vec[:rows_s]
        multiply(self.mat_view, self.operator, A)
        multiply(self.vec_view, self.operator, b)

    def _step(self, A, b):
        x = self.solution_vec
        if self.vec_view.shape[0] == 1:
            a = self.mat_view[0]
            # a zero compressed row carries no information
            norm2 = torch.dot(a, a)
            if norm2 > 0:
                scaling = self.alpha * (torch.dot(a, x) - self.vec_view[0]) / norm2
                x.sub_(scaling * a)
        else:
            update_sub_solver(self.sub_solver, self.mat_view)
            res = self._compressed_res[: self.vec_view.shape[0]]
            torch.addmv(self.vec_view, self.mat_view, x, alpha=-1.0, out=res)
            self.sub_solver.solve(self.update_vec, res)
            x.add_(self.update_vec, alpha=self.alpha)
