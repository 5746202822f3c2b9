import torch

from .configs import FullResidualConfig
from .solver_error import SolverError


class FullResidual(SolverError):
    """Euclidean norm of the full residual ``b - Ax``."""

    def __init__(self, config: FullResidualConfig, A: torch.Tensor, b: torch.Tensor):
        super().__init__(config, A, b)
        self.residual = torch.empty_like(b)

    def _compute(self, solver, A, b):
        self.residual.copy_(b)
        self.residual.sub_(A @ solver.solution_vec)
        self.error = torch.linalg.vector_norm(self.residual).item()
        return self.error
