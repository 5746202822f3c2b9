"""This module provides a factory for creating low-rank approximators."""

from typing import Union

import torch

from .approximator import Approximator
from .configs import (
    ApproximatorConfig,
    RangeFinderConfig,
    RandSVDConfig,
    _is_approximator_config,
)
from .rand_svd import RandSVD
from .range_finder import RangeFinder
from rlinalg.compressors import update_compressor
from rlinalg.utils.input_checkers import _is_torch_tensor


# Mapping of configuration classes to their corresponding approximator classes
CONFIG_TO_APPROXIMATOR = {
    RangeFinderConfig: RangeFinder,
    RandSVDConfig: RandSVD,
}


__all__ = ["complete_approximator", "rapproximate"]


def complete_approximator(
    approximator_config: ApproximatorConfig, A: torch.Tensor
) -> Approximator:
    """Create an approximator recipe for ``A`` without computing the approximation.

    Args:
        approximator_config (ApproximatorConfig): The configuration.
        A (torch.Tensor): The matrix to approximate.

    Returns:
        Approximator: The completed approximator.

    Raises:
        KeyError: If no approximator class is found for the configuration.
    """
    _is_approximator_config(approximator_config, "approximator_config")
    _is_torch_tensor(A, "A")
    approximator_class = CONFIG_TO_APPROXIMATOR.get(approximator_config.__class__)

    if approximator_class is None:
        raise KeyError(
            "No approximator found for configuration: "
            f"{approximator_config.__class__}"
        )

    return approximator_class(approximator_config, A)


def rapproximate(
    approximator: Union[ApproximatorConfig, Approximator], A: torch.Tensor
) -> Approximator:
    """Compute a low-rank approximation of ``A``.

    Given a configuration, a recipe is completed first. Given a recipe, its
    compressor is resampled and the approximation recomputed in place.

    Args:
        approximator (Union[ApproximatorConfig, Approximator]): A configuration or
            a completed recipe.
        A (torch.Tensor): The matrix to approximate.

    Returns:
        Approximator: The recipe holding the approximation.

    Example:
        >>> config = RandSVDConfig(
        ...     compressor_config=GaussianConfig(
        ...         cardinality="right", compression_dim=10
        ...     )
        ... )
        >>> approx = rapproximate(config, A)
        >>> approx.S
    """
    if isinstance(approximator, Approximator):
        _is_torch_tensor(A, "A")
        update_compressor(
            approximator.compressor, A=A.mT if approximator._adjoint else A
        )
    else:
        approximator = complete_approximator(approximator, A)
    approximator._update(A)
    return approximator
