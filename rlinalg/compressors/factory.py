"""This module provides a factory for creating compressors.

It maps compressor configurations to their classes and exposes the functions used to
complete a compressor against a matrix and to resample it in place.
"""

from typing import Optional

import torch

from .compressor import Compressor
from .configs import (
    CompressorConfig,
    GaussianConfig,
    SparseSignConfig,
    FJLTConfig,
    SRHTConfig,
    CountSketchConfig,
    IdentityConfig,
    SamplingConfig,
    _is_compressor_config,
)
from .count_sketch import CountSketch
from .fjlt import FJLT
from .gaussian import Gaussian
from .identity import Identity
from .sampling import Sampling
from .sparse_sign import SparseSign
from .srht import SRHT
from rlinalg.utils.input_checkers import _is_torch_tensor


# Mapping of configuration classes to their corresponding compressor classes
CONFIG_TO_COMPRESSOR = {
    GaussianConfig: Gaussian,
    SparseSignConfig: SparseSign,
    FJLTConfig: FJLT,
    SRHTConfig: SRHT,
    CountSketchConfig: CountSketch,
    IdentityConfig: Identity,
    SamplingConfig: Sampling,
}


__all__ = ["complete_compressor", "update_compressor"]


def complete_compressor(
    compressor_config: CompressorConfig, *args: torch.Tensor
) -> Compressor:
    """Create a fully allocated compressor for a matrix.

    The shape of the compressor is derived from the matrix and the cardinality of
    the configuration: ``(compression_dim, rows(A))`` for LEFT and
    ``(cols(A), compression_dim)`` for RIGHT. A first realization is drawn.

    Args:
        compressor_config (CompressorConfig): The configuration of the compressor.
        *args: Either ``(A,)`` or ``(x, A, b)``. The iterate ``x`` and constant
            vector ``b`` are only consumed by data-dependent compressors.

    Returns:
        Compressor: The completed compressor.

    Raises:
        KeyError: If no compressor class is found for the configuration.
        TypeError: If the arguments are not ``(A,)`` or ``(x, A, b)``.

    Example:
        >>> config = SparseSignConfig(cardinality="left", compression_dim=10)
        >>> S = complete_compressor(config, A)
        >>> S.shape
        (10, 1000)
    """
    _is_compressor_config(compressor_config, "compressor_config")
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

    compressor_class = CONFIG_TO_COMPRESSOR.get(compressor_config.__class__)
    if compressor_class is None:
        raise KeyError(
            f"No compressor found for configuration: {compressor_config.__class__}"
        )

    compressor = compressor_class(compressor_config, A)
    if x is not None or b is not None:
        compressor._update(x, A, b)
    return compressor


def update_compressor(
    compressor: Compressor,
    x: Optional[torch.Tensor] = None,
    A: Optional[torch.Tensor] = None,
    b: Optional[torch.Tensor] = None,
) -> Compressor:
    """Draw a fresh realization of a compressor in place.

    The shape and buffers of the compressor are kept. Data-dependent compressors
    (Sampling) refresh their distribution first when ``A`` is given.

    Args:
        compressor (Compressor): The compressor to resample.
        x (Optional[torch.Tensor]): The current iterate.
        A (Optional[torch.Tensor]): The matrix being compressed.
        b (Optional[torch.Tensor]): The constant vector.

    Returns:
        Compressor: ``compressor``.
    """
    if not isinstance(compressor, Compressor):
        raise TypeError(
            f"compressor is of type {type(compressor).__name__}, "
            "but expected type Compressor"
        )
    compressor._update(x, A, b)
    return compressor
