"""This module implements the uniform distribution."""

import torch

from .distribution import Distribution


class Uniform(Distribution):
    """Every row (or column) is drawn with the same probability.

    Example:
        >>> import torch
        >>> from rlinalg.distributions import UniformConfig, complete_distribution
        >>>
        >>> A = torch.randn(100, 10)
        >>> dist = complete_distribution(UniformConfig(cardinality="left"), A)
        >>> idx = torch.empty(5, dtype=torch.long)
        >>> dist._sample(idx)
    """

    def _compute_weights(self, x, A, b) -> torch.Tensor:
        return torch.ones(self.state_space, dtype=torch.float64, device=A.device)
