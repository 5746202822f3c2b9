"""Fast Johnson-Lindenstrauss Transform.

The projection ``K`` is a sparse Gaussian matrix whose entries are non-zero with
probability ``q``.
"""

import math

import torch

from .configs import FJLTConfig
from .hadamard import _HadamardCompressor


class FJLT(_HadamardCompressor):
    """Fast Johnson-Lindenstrauss Transform compressor.

    Attributes:
        sparsity (float): Probability ``q`` that an entry of ``K`` is non-zero.
    """

    def __init__(self, config: FJLTConfig, A: torch.Tensor):
        super().__init__(config, A)
        n = self._initial_size
        if config.sparsity > 0.0:
            self.sparsity = config.sparsity
        else:
            q = min(0.25 * math.log(n) ** 2 / n, 1.0)
            # log(1) == 0, a single entry keeps every coordinate
            self.sparsity = q if q > 0.0 else 1.0

        s = self.compression_dim
        self.scale = 1.0 / math.sqrt(self.padded_size * self.sparsity * s)
        self._K = None
        self._update()

    def _resample_projection(self):
        s, p = self.compression_dim, self.padded_size
        mask = torch.rand(s, p, device=self.device) < self.sparsity
        indices = mask.nonzero().mT
        values = torch.randn(indices.shape[1], dtype=self.dtype, device=self.device)
        self._K = torch.sparse_coo_tensor(
            indices, values, (s, p), device=self.device
        ).coalesce()

    def _project(self, block):
        return torch.sparse.mm(self._K, block)

    def _project_t(self, out, block):
        out.copy_(torch.sparse.mm(self._K.t(), block))
