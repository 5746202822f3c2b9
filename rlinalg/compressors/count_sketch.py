"""CountSketch compressor implementation.

Each column of the left-shaped operator has a single non-zero, a random sign placed
in a uniformly drawn bucket. Applying it hashes the rows of the target into
``compression_dim`` buckets and sums them with random signs.
"""

from typing import Optional

import torch

from .compressor import Compressor, _scale_accumulate
from .configs import CountSketchConfig


class CountSketch(Compressor):
    def __init__(self, config: CountSketchConfig, A: torch.Tensor):
        super().__init__(config, A)
        n = self._initial_size
        self._buckets = torch.empty(n, dtype=torch.long, device=self.device)
        self._signs = torch.empty(n, dtype=self.dtype, device=self.device)
        self._update()

    def _update(
        self,
        x: Optional[torch.Tensor] = None,
        A: Optional[torch.Tensor] = None,
        b: Optional[torch.Tensor] = None,
    ):
        self._buckets.random_(0, self.compression_dim)
        self._signs.bernoulli_(0.5).mul_(2).sub_(1)

    def _form_mul(self, C, B, alpha, beta, transpose):
        signs = self._signs.to(B.dtype).unsqueeze(-1)
        if transpose:
            # row i of L^T B is sign_i * row bucket_i of B
            prod = B[self._buckets] * signs
        else:
            prod = torch.zeros(
                self.compression_dim, B.shape[1], dtype=B.dtype, device=B.device
            )
            prod.index_add_(0, self._buckets, B * signs)
        _scale_accumulate(C, prod, alpha, beta)
