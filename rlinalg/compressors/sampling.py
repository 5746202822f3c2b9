"""Sub-sampling compressor implementation.

The left-shaped operator is a selection matrix: row ``j`` is the unit vector of the
``j``-th drawn index. Applied from the left it gathers rows of the target, applied
from the right it gathers columns. Indices are drawn from a distribution over the
rows (or columns) of the matrix the compressor was completed against.
"""

from dataclasses import replace
from typing import Optional

import torch

from .compressor import Compressor, _scale_accumulate
from .configs import SamplingConfig
from rlinalg.distributions import (
    complete_distribution,
    sample_distribution,
    update_distribution,
)


class Sampling(Compressor):
    """Compressor that selects rows (or columns) drawn from a distribution.

    Attributes:
        distribution (Distribution): The distribution the indices are drawn from.
            It shares the cardinality of the compressor.
    """

    def __init__(self, config: SamplingConfig, A: torch.Tensor):
        super().__init__(config, A)
        distribution_config = replace(
            config.distribution_config, cardinality=self.cardinality
        )
        self.distribution = complete_distribution(distribution_config, A)
        self._idx = torch.empty(
            self.compression_dim, dtype=torch.long, device=self.device
        )
        sample_distribution(self.distribution, self._idx)

    @property
    def indices(self) -> torch.Tensor:
        """The sorted indices of the current realization."""
        return self._idx

    def _update(
        self,
        x: Optional[torch.Tensor] = None,
        A: Optional[torch.Tensor] = None,
        b: Optional[torch.Tensor] = None,
    ):
        if A is not None:
            update_distribution(self.distribution, x, A, b)
        sample_distribution(self.distribution, self._idx)

    def _form_mul(self, C, B, alpha, beta, transpose):
        if transpose:
            prod = torch.zeros(
                self._initial_size, B.shape[1], dtype=B.dtype, device=B.device
            )
            # repeated indices accumulate when sampling with replacement
            prod.index_add_(0, self._idx, B)
        else:
            prod = B.index_select(0, self._idx)
        _scale_accumulate(C, prod, alpha, beta)
