"""Iterative Hessian Sketch solver for least squares problems.

Every iteration replaces the Hessian ``A^T A`` of the least-squares problem by the
compressed ``(S A)^T (S A)`` and takes the step
``x <- x + alpha ((S A)^T (S A))^{-1} A^T (b - A x)``. The step is computed from the
triangular factor ``R`` of ``S A = Q R`` with two triangular solves, so the compressed
Hessian is never formed.

For more information see:
- Pilanci, Mert, and Martin J. Wainwright. "Iterative Hessian sketch: Fast and
  accurate solution approximation for constrained least-squares." JMLR (2016).
"""

import warnings

import torch

from .configs import IHSConfig
from .solver import Solver
from rlinalg.compressors import multiply


class IHS(Solver):
    """Iterative Hessian Sketch solver recipe.

    Attributes:
        compressed_mat (torch.Tensor): Buffer holding ``S A``.
        compressed_vec (torch.Tensor): Buffer holding ``S b``.
        mat_view (torch.Tensor): The rows of ``compressed_mat`` in use.
        vec_view (torch.Tensor): The entries of ``compressed_vec`` in use.
        residual_vec (torch.Tensor): The residual ``b - A x``.
        gradient_vec (torch.Tensor): The negative gradient ``A^T (b - A x)``.
        update_vec (torch.Tensor): The last step.
        R (torch.Tensor): Triangular factor of the last compressed matrix.
    """

    provides = ("compressed_system", "residual_vec")

    def __init__(
        self,
        config: IHSConfig,
        x: torch.Tensor,
        A: torch.Tensor,
        b: torch.Tensor,
    ):
        super().__init__(config, x, A, b)
        if A.shape[1] > self.operator.shape[0]:
            warnings.warn(
                f"Compression dimension {self.operator.shape[0]} is smaller than the "
                f"number of columns {A.shape[1]}, this leads to singular QR "
                "factorizations which cannot be inverted."
            )

    def _allocate(self, x, A, b):
        sample_size = self.operator.shape[0]
        self.compressed_mat = torch.zeros(
            sample_size, A.shape[1], dtype=A.dtype, device=A.device
        )
        self.compressed_vec = torch.zeros(sample_size, dtype=b.dtype, device=b.device)
        self.residual_vec = torch.zeros(A.shape[0], dtype=b.dtype, device=b.device)
        self.gradient_vec = torch.zeros(A.shape[1], dtype=x.dtype, device=x.device)
        self.update_vec = torch.zeros_like(self.gradient_vec)
        self.mat_view = self.compressed_mat
        self.vec_view = self.compressed_vec
        self.R = None

    def _prepare(self, x, A, b):
        torch.addmv(b, A, x, alpha=-1.0, out=self.residual_vec)

    def _compress(self, x, A, b):
        rows_s = self.operator.shape[0]
        self.mat_view = self.compressed_mat[:rows_s]
        self.vec_view = self.compressed_vec[:rows_s]
        multiply(self.mat_view, self.operator, A)
        multiply(self.vec_view, self.operator, b)

    def _step(self, A, b):
        torch.mv(A.mT, self.residual_vec, out=self.gradient_vec)
        self.R = torch.linalg.qr(self.mat_view, mode="r").R

        g = self.gradient_vec.unsqueeze(-1)
        if self.R.shape[0] == self.R.shape[1]:
            y = torch.linalg.solve_triangular(self.R.mT, g, upper=False)
            u = torch.linalg.solve_triangular(self.R, y, upper=True)
        else:
            # fewer compressed rows than columns, take the minimum-norm step
            R_pinv = torch.linalg.pinv(self.R)
            u = R_pinv @ (R_pinv.mT @ g)
        self.update_vec.copy_(u.squeeze(-1))

        self.solution_vec.add_(self.update_vec, alpha=self.alpha)
        torch.addmv(b, A, self.solution_vec, alpha=-1.0, out=self.residual_vec)
