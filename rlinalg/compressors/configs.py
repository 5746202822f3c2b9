"""This module defines configuration classes for the compressors.

A configuration is a lightweight, validated bag of parameters. It is turned into a
fully allocated compressor by ``complete_compressor`` once the matrix that will be
compressed is known.
"""

from abc import ABC
from dataclasses import dataclass, asdict, field
from enum import Enum
from typing import Any, Optional, Union

import torch

from rlinalg.distributions import DistributionConfig, UniformConfig
from rlinalg.distributions.configs import _is_distribution_config
from rlinalg.utils.enums import Cardinality
from rlinalg.utils.input_checkers import _is_pos_int, _is_prob, _is_torch_dtype


__all__ = [
    "CompressorConfig",
    "GaussianConfig",
    "SparseSignConfig",
    "FJLTConfig",
    "SRHTConfig",
    "CountSketchConfig",
    "IdentityConfig",
    "SamplingConfig",
    "_is_compressor_config",
]


@dataclass(kw_only=True, frozen=False)
class CompressorConfig(ABC):
    """Abstract base class for compressor configurations.

    Attributes:
        cardinality (Union[str, Cardinality]): The side the compressor is applied
            from. Can be specified as "left" or "right". Defaults to "left".
        dtype (Optional[torch.dtype]): Element type of the compressor. Defaults to
            None, meaning the dtype of the compressed matrix.
    """

    cardinality: Union[str, Cardinality] = "left"
    dtype: Optional[torch.dtype] = None

    def __post_init__(self):
        """Validate the configuration parameters after initialization."""
        self.cardinality = Cardinality._from_str(self.cardinality, "cardinality")
        if self.dtype is not None:
            _is_torch_dtype(self.dtype, "dtype")

    def to_dict(self) -> dict:
        """Convert the configuration to a dictionary.

        Returns:
            dict: A dictionary representation of the configuration.
        """
        data_dict = asdict(self)
        for key, value in data_dict.items():
            if isinstance(value, Enum):
                data_dict[key] = value.name.lower()
            elif isinstance(value, torch.dtype):
                data_dict[key] = str(value)
        return data_dict


@dataclass(kw_only=True, frozen=False)
class GaussianConfig(CompressorConfig):
    """Configuration for the Gaussian compressor.

    Attributes:
        compression_dim (int): Target dimension ``s``. Defaults to 2.
    """

    compression_dim: int = 2

    def __post_init__(self):
        """Validate the configuration parameters after initialization."""
        super().__post_init__()
        _is_pos_int(self.compression_dim, "compression_dim")


@dataclass(kw_only=True, frozen=False)
class SparseSignConfig(CompressorConfig):
    """Configuration for the SparseSign compressor.

    Attributes:
        compression_dim (int): Target dimension ``s``. Defaults to 2.
        nnz (Optional[int]): Number of non-zeros per column of the left-shaped
            operator. Defaults to ``min(8, compression_dim)``.
    """

    compression_dim: int = 2
    nnz: Optional[int] = None

    def __post_init__(self):
        """Validate the configuration parameters after initialization."""
        super().__post_init__()
        _is_pos_int(self.compression_dim, "compression_dim")
        if self.nnz is None:
            self.nnz = min(8, self.compression_dim)
        _is_pos_int(self.nnz, "nnz")
        if self.nnz > self.compression_dim:
            raise ValueError(
                f"nnz must be less than or equal to compression_dim, "
                f"but received nnz={self.nnz} and "
                f"compression_dim={self.compression_dim}"
            )


@dataclass(kw_only=True, frozen=False)
class FJLTConfig(CompressorConfig):
    """Configuration for the Fast Johnson-Lindenstrauss Transform.

    Attributes:
        compression_dim (int): Target dimension ``s``. Defaults to 2.
        block_size (int): Number of columns of the target matrix transformed at
            once. Defaults to 10.
        sparsity (float): Probability that an entry of the sparse Gaussian factor is
            non-zero. Defaults to 0.0, meaning ``min(log(n)^2 / (4n), 1)``.
    """

    compression_dim: int = 2
    block_size: int = 10
    sparsity: float = 0.0

    def __post_init__(self):
        """Validate the configuration parameters after initialization."""
        super().__post_init__()
        _is_pos_int(self.compression_dim, "compression_dim")
        _is_pos_int(self.block_size, "block_size")
        _is_prob(self.sparsity, "sparsity")


@dataclass(kw_only=True, frozen=False)
class SRHTConfig(CompressorConfig):
    """Configuration for the Subsampled Randomized Hadamard Transform.

    Attributes:
        compression_dim (int): Target dimension ``s``. Defaults to 2.
        block_size (int): Number of columns of the target matrix transformed at
            once. Defaults to 10.
    """

    compression_dim: int = 2
    block_size: int = 10

    def __post_init__(self):
        """Validate the configuration parameters after initialization."""
        super().__post_init__()
        _is_pos_int(self.compression_dim, "compression_dim")
        _is_pos_int(self.block_size, "block_size")


@dataclass(kw_only=True, frozen=False)
class CountSketchConfig(CompressorConfig):
    """Configuration for the CountSketch compressor.

    Attributes:
        compression_dim (int): Number of buckets ``s``. Defaults to 2.
    """

    compression_dim: int = 2

    def __post_init__(self):
        """Validate the configuration parameters after initialization."""
        super().__post_init__()
        _is_pos_int(self.compression_dim, "compression_dim")


@dataclass(kw_only=True, frozen=False)
class IdentityConfig(CompressorConfig):
    """Configuration for the Identity compressor.

    This configuration doesn't require any specific parameters.
    """

    pass


@dataclass(kw_only=True, frozen=False)
class SamplingConfig(CompressorConfig):
    """Configuration for the sub-sampling compressor.

    Attributes:
        compression_dim (int): Number of rows (or columns) drawn. Defaults to 2.
        distribution_config (DistributionConfig): Distribution the indices are
            drawn from. Defaults to UniformConfig(). Its cardinality is overwritten
            by the cardinality of the compressor.
    """

    compression_dim: int = 2
    distribution_config: DistributionConfig = field(default_factory=UniformConfig)

    def __post_init__(self):
        """Validate the configuration parameters after initialization."""
        super().__post_init__()
        _is_pos_int(self.compression_dim, "compression_dim")
        _is_distribution_config(self.distribution_config, "distribution_config")

    def to_dict(self) -> dict:
        data_dict = super().to_dict()
        data_dict["distribution_config"] = self.distribution_config.to_dict()
        return data_dict


def _is_compressor_config(param: Any, param_name: str):
    if not isinstance(param, CompressorConfig):
        raise TypeError(
            f"{param_name} is of type {type(param).__name__}, "
            "but expected type CompressorConfig"
        )
