"""This module defines configuration classes for sampling distributions.

A distribution assigns a probability to every row (Left) or column (Right) of a
matrix. The cardinality may be left unset, in which case the compressor that owns
the distribution sets it when the distribution is completed.
"""

from abc import ABC
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Optional, Union

from rlinalg.utils.enums import Cardinality
from rlinalg.utils.input_checkers import _is_bool


__all__ = [
    "DistributionConfig",
    "UniformConfig",
    "L2NormConfig",
    "LeverageScoreConfig",
    "_is_distribution_config",
]


@dataclass(kw_only=True, frozen=False)
class DistributionConfig(ABC):
    """Abstract base class for distribution configurations.

    Attributes:
        cardinality (Optional[Union[str, Cardinality]]): Whether rows ("left") or
            columns ("right") are sampled. Defaults to None, meaning the owning
            compressor decides.
        replace (bool): Whether indices are drawn with replacement.
    """

    cardinality: Optional[Union[str, Cardinality]] = None
    replace: bool = False

    def __post_init__(self):
        """Validate the configuration parameters after initialization."""
        if self.cardinality is not None:
            self.cardinality = Cardinality._from_str(self.cardinality, "cardinality")
        _is_bool(self.replace, "replace")

    def to_dict(self) -> dict:
        """Convert the configuration to a dictionary.

        Returns:
            dict: A dictionary representation of the configuration.
        """
        data_dict = asdict(self)
        for key, value in data_dict.items():
            if isinstance(value, Enum):
                data_dict[key] = value.name.lower()
        return data_dict


@dataclass(kw_only=True, frozen=False)
class UniformConfig(DistributionConfig):
    """Configuration for the uniform distribution over rows or columns."""

    replace: bool = False


@dataclass(kw_only=True, frozen=False)
class L2NormConfig(DistributionConfig):
    """Configuration for sampling proportionally to squared row or column norms.

    This is the distribution of Strohmer and Vershynin's randomized Kaczmarz method.
    """

    replace: bool = True


@dataclass(kw_only=True, frozen=False)
class LeverageScoreConfig(DistributionConfig):
    """Configuration for sampling proportionally to (exact) leverage scores."""

    replace: bool = True


def _is_distribution_config(param: Any, param_name: str):
    if not isinstance(param, DistributionConfig):
        raise TypeError(
            f"{param_name} is of type {type(param).__name__}, "
            "but expected type DistributionConfig"
        )
