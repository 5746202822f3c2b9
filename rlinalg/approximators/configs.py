"""This module defines configuration classes for the low-rank approximators.

Both approximators compress ``A`` from the right to capture its range, following
Halko, Martinsson and Tropp, "Finding structure with randomness" (SIAM Review, 2011).
"""

from abc import ABC
from dataclasses import dataclass, field
from typing import Any

from rlinalg.compressors import (
    CompressorConfig,
    SparseSignConfig,
    _is_compressor_config,
)
from rlinalg.utils.input_checkers import _is_bool, _is_nonneg_int


__all__ = [
    "ApproximatorConfig",
    "RangeFinderConfig",
    "RandSVDConfig",
    "_is_approximator_config",
]


@dataclass(kw_only=True, frozen=False)
class ApproximatorConfig(ABC):
    """Abstract base class for approximator configurations.

    Attributes:
        compressor_config (CompressorConfig): Compression applied to ``A`` from the
            right. Its ``compression_dim`` is the rank of the approximation.
            Defaults to a right SparseSign.
        power_its (int): Number of power iterations. Defaults to 0.
        orthogonalize (bool): Whether the power iterations are orthogonalized
            (subspace iteration). Defaults to False.
    """

    compressor_config: CompressorConfig = field(
        default_factory=lambda: SparseSignConfig(cardinality="right")
    )
    power_its: int = 0
    orthogonalize: bool = False

    def __post_init__(self):
        """Validate the configuration parameters after initialization."""
        _is_compressor_config(self.compressor_config, "compressor_config")
        _is_nonneg_int(self.power_its, "power_its")
        _is_bool(self.orthogonalize, "orthogonalize")

    def to_dict(self) -> dict:
        """Convert the configuration to a dictionary.

        Returns:
            dict: A dictionary representation of the configuration.
        """
        return {
            "compressor_config": self.compressor_config.to_dict(),
            "power_its": self.power_its,
            "orthogonalize": self.orthogonalize,
        }


@dataclass(kw_only=True, frozen=False)
class RangeFinderConfig(ApproximatorConfig):
    """Configuration for the randomized range finder.

    The recipe holds an orthonormal ``Q`` with ``Q Q^T A ~ A``.
    """

    pass


@dataclass(kw_only=True, frozen=False)
class RandSVDConfig(ApproximatorConfig):
    """Configuration for the randomized SVD.

    The recipe holds ``U``, ``S`` and ``V`` with ``U diag(S) V^T ~ A``.

    Attributes:
        power_its (int): Defaults to 1.
    """

    power_its: int = 1


def _is_approximator_config(param: Any, param_name: str):
    if not isinstance(param, ApproximatorConfig):
        raise TypeError(
            f"{param_name} is of type {type(param).__name__}, "
            "but expected type ApproximatorConfig"
        )
