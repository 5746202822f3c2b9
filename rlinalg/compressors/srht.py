"""Subsampled Randomized Hadamard Transform.

The projection ``K`` keeps ``compression_dim`` distinct rows of the transformed,
padded target, drawn uniformly without replacement.
"""

import math

import torch

from .configs import SRHTConfig
from .hadamard import _HadamardCompressor
from rlinalg.utils.errors import DimensionMismatchError


class SRHT(_HadamardCompressor):
    def __init__(self, config: SRHTConfig, A: torch.Tensor):
        super().__init__(config, A)
        if self.compression_dim > self.padded_size:
            raise DimensionMismatchError(
                f"compression_dim={self.compression_dim} exceeds the padded "
                f"dimension {self.padded_size} of the SRHT."
            )
        # H / sqrt(p) is orthogonal and sqrt(p / s) rescales the kept rows
        self.scale = 1.0 / math.sqrt(self.compression_dim)
        self._idx = torch.empty(
            self.compression_dim, dtype=torch.long, device=self.device
        )
        self._update()

    def _resample_projection(self):
        perm = torch.randperm(self.padded_size, device=self.device)
        self._idx.copy_(perm[: self.compression_dim].sort().values)

    def _project(self, block):
        return block.index_select(0, self._idx)

    def _project_t(self, out, block):
        out.index_copy_(0, self._idx, block)
