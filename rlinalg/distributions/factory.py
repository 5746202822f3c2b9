"""This module provides a factory for creating distributions.

It maps distribution configurations to their classes and exposes the functions
used by the sampling compressor to complete, update and sample a distribution.
"""

from typing import Optional

import torch

from .configs import (
    DistributionConfig,
    UniformConfig,
    L2NormConfig,
    LeverageScoreConfig,
)
from .distribution import Distribution
from .l2_norm import L2Norm
from .leverage_score import LeverageScore
from .uniform import Uniform
from rlinalg.utils.input_checkers import _is_torch_tensor


# Mapping of configuration classes to their corresponding distribution classes
CONFIG_TO_DISTRIBUTION = {
    UniformConfig: Uniform,
    L2NormConfig: L2Norm,
    LeverageScoreConfig: LeverageScore,
}


__all__ = ["complete_distribution", "update_distribution", "sample_distribution"]


def complete_distribution(
    distribution_config: DistributionConfig, *args: torch.Tensor
) -> Distribution:
    """Create a distribution over the rows or columns of a matrix.

    Args:
        distribution_config (DistributionConfig): The configuration of the
            distribution. Its cardinality must be set.
        *args: Either ``(A,)`` or ``(x, A, b)``.

    Returns:
        Distribution: The completed distribution.

    Raises:
        KeyError: If no distribution class is found for the configuration.
        ValueError: If the cardinality of the configuration is not set.
    """
    x, A, b = _unpack_args(args)
    distribution_class = CONFIG_TO_DISTRIBUTION.get(distribution_config.__class__)

    if distribution_class is None:
        raise KeyError(
            "No distribution found for configuration: "
            f"{distribution_config.__class__}"
        )

    distribution = distribution_class(distribution_config, A)
    if x is not None or b is not None:
        distribution._update(x, A, b)
    return distribution


def update_distribution(
    distribution: Distribution,
    x: Optional[torch.Tensor],
    A: torch.Tensor,
    b: Optional[torch.Tensor],
):
    """Recompute the weights of a distribution for a matrix of the same size."""
    _is_torch_tensor(A, "A")
    distribution._update(x, A, b)


def sample_distribution(distribution: Distribution, out: torch.Tensor) -> torch.Tensor:
    """Draw ``len(out)`` sorted indices from the distribution into ``out``."""
    _is_torch_tensor(out, "out")
    return distribution._sample(out)


def _unpack_args(args):
    if len(args) == 1:
        x, A, b = None, args[0], None
    elif len(args) == 3:
        x, A, b = args
    else:
        raise TypeError(
            f"Expected the arguments (A) or (x, A, b), but received {len(args)} "
            "positional arguments"
        )
    _is_torch_tensor(A, "A")
    return x, A, b
