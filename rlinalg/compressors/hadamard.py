"""Shared machinery for the Hadamard-based compressors.

The left-shaped operator of both FJLT and SRHT is ``scale * K @ H @ D @ P``, where
``P`` zero-pads the target to the next power of two ``p``, ``D`` is a random
diagonal sign matrix, ``H`` is the unnormalized Hadamard matrix of order ``p`` and
``K`` is a random ``(compression_dim, p)`` projection. Only ``K`` differs between
the two recipes. The target is processed ``block_size`` columns at a time through a
preallocated padding buffer.
"""

from abc import abstractmethod
from typing import Optional

import torch

from .compressor import Compressor, _scale_accumulate
from .fwht import fwht_


class _HadamardCompressor(Compressor):
    """Abstract base class of the compressors built on the fast Hadamard transform.

    Attributes:
        padded_size (int): Smallest power of two not below the initial size.
        block_size (int): Number of target columns transformed at once.
        scale (float): Scalar applied with the transform.
    """

    def __init__(self, config, A: torch.Tensor):
        super().__init__(config, A)
        n = self._initial_size
        self.padded_size = 1 << (n - 1).bit_length()
        self.block_size = config.block_size
        self.scale = 1.0

        self._signs = torch.empty(
            self.padded_size, dtype=self.dtype, device=self.device
        )
        self._padding = torch.zeros(
            self.padded_size, self.block_size, dtype=self.dtype, device=self.device
        )

    @abstractmethod
    def _project(self, block: torch.Tensor) -> torch.Tensor:
        """Apply ``K`` to a ``(padded_size, k)`` block."""
        pass

    @abstractmethod
    def _project_t(self, out: torch.Tensor, block: torch.Tensor):
        """Write ``K^T @ block`` into the ``(padded_size, k)`` tensor ``out``."""
        pass

    @abstractmethod
    def _resample_projection(self):
        pass

    def _update(
        self,
        x: Optional[torch.Tensor] = None,
        A: Optional[torch.Tensor] = None,
        b: Optional[torch.Tensor] = None,
    ):
        self._signs.bernoulli_(0.5).mul_(2).sub_(1)
        self._resample_projection()

    def _form_mul(self, C, B, alpha, beta, transpose):
        n = self._initial_size
        for start in range(0, B.shape[1], self.block_size):
            stop = min(start + self.block_size, B.shape[1])
            blk = stop - start
            B_blk = B[:, start:stop].to(self.dtype)

            self._padding.zero_()
            if transpose:
                self._project_t(self._padding[:, :blk], B_blk)
                fwht_(self._padding, scale=self.scale)
                self._padding.mul_(self._signs.unsqueeze(-1))
                prod = self._padding[:n, :blk]
            else:
                self._padding[:n, :blk].copy_(B_blk)
                fwht_(self._padding, self._signs, self.scale)
                prod = self._project(self._padding[:, :blk])

            _scale_accumulate(C[:, start:stop], prod.to(C.dtype), alpha, beta)
