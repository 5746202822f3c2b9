"""Gaussian compressor implementation.

This module provides a dense compressor whose entries are i.i.d. normal with
variance ``1 / compression_dim``, so that ``S^T S`` (or ``S S^T``) is an isometry in
expectation.

Typical usage example:

  S = complete_compressor(GaussianConfig(compression_dim=5), A)
  SA = S @ A
"""

from typing import Optional

import torch

from .compressor import Compressor
from .configs import GaussianConfig
from rlinalg.utils.enums import Cardinality


class Gaussian(Compressor):
    """Dense Gaussian compressor.

    Attributes:
        Inherited from Compressor class.
    """

    def __init__(self, config: GaussianConfig, A: torch.Tensor):
        """Initializes the Gaussian compressor and draws its first realization."""
        super().__init__(config, A)
        self._mat = torch.empty(
            config.compression_dim,
            self._initial_size,
            dtype=self.dtype,
            device=self.device,
        )
        self._update()

    @property
    def op(self) -> torch.Tensor:
        """The compressor as a dense tensor of shape ``self.shape``."""
        if self.cardinality == Cardinality.LEFT:
            return self._mat
        return self._mat.mT

    def _update(
        self,
        x: Optional[torch.Tensor] = None,
        A: Optional[torch.Tensor] = None,
        b: Optional[torch.Tensor] = None,
    ):
        # Normalizing by 1 / sqrt(s) makes S an expected isometry
        self._mat.normal_(0.0, 1.0 / self._mat.shape[0] ** 0.5)

    def _form_mul(self, C, B, alpha, beta, transpose):
        mat = self._mat.mT if transpose else self._mat
        C.addmm_(mat.to(B.dtype), B, beta=beta, alpha=alpha)
