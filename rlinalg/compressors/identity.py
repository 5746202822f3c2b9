"""Identity compressor implementation.

The Identity compressor leaves its target unchanged. It has no fixed shape: every
multiplication resizes it to the dimension of the operand, which makes it a
convenient stand-in wherever a compressor is expected but no compression is wanted.
"""

from typing import Optional

import torch

from .compressor import Compressor, _scale_accumulate
from .configs import IdentityConfig
from rlinalg.utils.enums import Cardinality


class Identity(Compressor):
    def __init__(self, config: IdentityConfig, A: torch.Tensor):
        A = A if A.ndim == 2 else A.unsqueeze(-1)
        dim = A.shape[0] if config.cardinality == Cardinality.LEFT else A.shape[1]
        super().__init__(config, A, compression_dim=dim)

    def _resize(self, operand: torch.Tensor, side: Cardinality):
        if operand.ndim == 1:
            dim = operand.shape[0]
        elif side == Cardinality.LEFT:
            dim = operand.shape[0]
        else:
            dim = operand.shape[1]
        self.n_rows = self.n_cols = self._initial_size = dim

    def _update(
        self,
        x: Optional[torch.Tensor] = None,
        A: Optional[torch.Tensor] = None,
        b: Optional[torch.Tensor] = None,
    ):
        pass

    def _form_mul(self, C, B, alpha, beta, transpose):
        _scale_accumulate(C, B, alpha, beta)
