import torch

from .configs import LSGradientConfig
from .solver_error import SolverError


class LSGradient(SolverError):
    """Norm of the least-squares gradient ``A^T (Ax - b)``.

    The residual is not recomputed: the solver maintains it in its ``residual_vec``
    buffer, which is only offered by solvers that update it every iteration.
    """

    required_views = ("residual_vec",)

    def __init__(self, config: LSGradientConfig, A: torch.Tensor, b: torch.Tensor):
        super().__init__(config, A, b)
        self.gradient = torch.empty(A.shape[1], dtype=A.dtype, device=A.device)

    def _compute(self, solver, A, b):
        self.residual = solver.residual_vec
        torch.mv(A.mT, self.residual, out=self.gradient)
        self.error = torch.linalg.vector_norm(self.gradient).item()
        return self.error
