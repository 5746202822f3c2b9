"""SparseSign compressor implementation.

Every column of the left-shaped operator holds exactly ``nnz`` non-zeros at
distinct rows, each equal to ``+1/sqrt(nnz)`` or ``-1/sqrt(nnz)`` with equal
probability.
"""

from typing import Optional

import torch

from .compressor import Compressor, _scale_accumulate
from .configs import SparseSignConfig
from rlinalg.utils.enums import Cardinality


class SparseSign(Compressor):
    """Sparse sign compressor stored as a COO tensor.

    The COO tensor is allocated once. Resampling rewrites its index and value
    storage in place, entries of column ``j`` occupying the slots
    ``j * nnz`` to ``(j + 1) * nnz - 1``.

    Attributes:
        nnz (int): Number of non-zeros per column of the left-shaped operator.
    """

    def __init__(self, config: SparseSignConfig, A: torch.Tensor):
        super().__init__(config, A)
        self.nnz = config.nnz
        s = self.compression_dim
        n = self._initial_size

        indices = torch.zeros(2, n * self.nnz, dtype=torch.long, device=self.device)
        indices[1] = torch.arange(n, device=self.device).repeat_interleave(self.nnz)
        values = torch.zeros(n * self.nnz, dtype=self.dtype, device=self.device)
        self._mat = torch.sparse_coo_tensor(indices, values, (s, n), device=self.device)
        # views of the storage owned by the COO tensor
        self._rows = self._mat._indices()[0].view(n, self.nnz)
        self._values = self._mat._values()
        self._update()

    @property
    def op(self) -> torch.Tensor:
        """The compressor as a sparse COO tensor of shape ``self.shape``."""
        if self.cardinality == Cardinality.LEFT:
            return self._mat
        return self._mat.t()

    def _draw_rows(self):
        # Floyd's algorithm, run for every column at once
        s = self.compression_dim
        for k, j in enumerate(range(s - self.nnz, s)):
            t = torch.randint(0, j + 1, (self._initial_size,), device=self.device)
            taken = (self._rows[:, :k] == t.unsqueeze(-1)).any(dim=1)
            self._rows[:, k] = t.masked_fill_(taken, j)

    def _update(
        self,
        x: Optional[torch.Tensor] = None,
        A: Optional[torch.Tensor] = None,
        b: Optional[torch.Tensor] = None,
    ):
        self._draw_rows()
        scale = 1.0 / self.nnz**0.5
        self._values.bernoulli_(0.5).mul_(2 * scale).sub_(scale)

    def _form_mul(self, C, B, alpha, beta, transpose):
        mat = self._mat.t() if transpose else self._mat
        prod = torch.sparse.mm(mat.to(B.dtype), B)
        _scale_accumulate(C, prod, alpha, beta)
