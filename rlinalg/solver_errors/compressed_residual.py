import torch

from .configs import CompressedResidualConfig
from .solver_error import SolverError


class CompressedResidual(SolverError):
    """Euclidean norm of the compressed residual ``Sb - SAx``.

    The compressed matrix and vector are read from the current views of the solver,
    so no compression is performed here. The residual buffer is sized on first use
    and re-viewed afterwards.
    """

    required_views = ("compressed_system",)

    def __init__(
        self, config: CompressedResidualConfig, A: torch.Tensor, b: torch.Tensor
    ):
        super().__init__(config, A, b)
        self._buffer = None

    def _compute(self, solver, A, b):
        vec_view, mat_view = solver.vec_view, solver.mat_view
        rows = vec_view.shape[0]
        if self._buffer is None or self._buffer.shape[0] < rows:
            self._buffer = torch.empty(
                rows, dtype=vec_view.dtype, device=vec_view.device
            )

        self.residual = self._buffer[:rows]
        torch.addmv(
            vec_view, mat_view, solver.solution_vec, alpha=-1.0, out=self.residual
        )
        self.error = torch.linalg.vector_norm(self.residual).item()
        return self.error
