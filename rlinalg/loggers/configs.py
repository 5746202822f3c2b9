"""This module defines configuration classes for the logger recipes.

A logger records the progress of a solver, decides through its stopping criterion
when the solver has converged and, when ``wandb_kwargs`` is given, mirrors every
collected record to a Weights and Biases run.
"""

from abc import ABC
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from .stopping import MAStop, threshold_stop
from rlinalg.utils.input_checkers import (
    _is_callable,
    _is_nonneg_float,
    _is_nonneg_int,
    _is_pos_float,
    _is_pos_int,
)


__all__ = [
    "LoggerConfig",
    "BasicLoggerConfig",
    "MALoggerConfig",
    "_is_logger_config",
]


@dataclass(kw_only=True, frozen=False)
class LoggerConfig(ABC):
    """Abstract base class for logger configurations.

    Attributes:
        max_it (int): Maximum number of iterations of the solver. Defaults to 0.
        collection_rate (int): Number of iterations between two records, starting
            with iteration 0. Defaults to 1.
        stopping_criterion (Callable): Callable taking the logger recipe and
            returning whether the solver has converged.
        wandb_kwargs (Optional[dict]): Keyword arguments for ``wandb.init``.
            Defaults to None, meaning nothing is sent to Weights and Biases.
    """

    max_it: int = 0
    collection_rate: int = 1
    stopping_criterion: Callable = threshold_stop
    wandb_kwargs: Optional[dict] = None

    def __post_init__(self):
        """Validate the configuration parameters after initialization."""
        _is_nonneg_int(self.max_it, "max_it")
        _is_pos_int(self.collection_rate, "collection_rate")
        if self.max_it > 0 and self.collection_rate > self.max_it:
            raise ValueError(
                f"collection_rate must be less than or equal to max_it, "
                f"but received collection_rate={self.collection_rate} and "
                f"max_it={self.max_it}"
            )
        _is_callable(self.stopping_criterion, "stopping_criterion")
        if self.wandb_kwargs is not None and not isinstance(self.wandb_kwargs, dict):
            raise TypeError(
                f"wandb_kwargs is of type {type(self.wandb_kwargs).__name__}, "
                "but expected type dict"
            )

    def to_dict(self) -> dict:
        """Convert the configuration to a dictionary.

        Returns:
            dict: A dictionary representation of the configuration.
        """
        data_dict = {
            "max_it": self.max_it,
            "collection_rate": self.collection_rate,
            "stopping_criterion": getattr(
                self.stopping_criterion,
                "__name__",
                type(self.stopping_criterion).__name__,
            ),
        }
        return data_dict


@dataclass(kw_only=True, frozen=False)
class BasicLoggerConfig(LoggerConfig):
    """Configuration for the basic logger.

    Attributes:
        threshold (float): Value read by ``threshold_stop``. Defaults to 0.0.
    """

    threshold: float = 0.0

    def __post_init__(self):
        """Validate the configuration parameters after initialization."""
        super().__post_init__()
        _is_nonneg_float(self.threshold, "threshold")

    def to_dict(self) -> dict:
        data_dict = super().to_dict()
        data_dict["threshold"] = self.threshold
        return data_dict


@dataclass(kw_only=True, frozen=False)
class MALoggerConfig(LoggerConfig):
    """Configuration for the moving-average logger.

    The logger tracks a moving average ``rho`` of the squared (compressed) error and
    its second moment ``iota``. The window has width ``lambda1`` while the error
    decreases monotonically and widens to ``lambda2`` afterwards.

    Attributes:
        lambda1 (int): Window width of the fast convergence phase. Defaults to 1.
        lambda2 (int): Window width of the slow convergence phase. Defaults to 30.
        stopping_criterion (Callable): Defaults to ``MAStop()``.
        sigma2 (Optional[float]): Variance parameter of the sub-Exponential
            distribution of the compressed error. Defaults to None, meaning a value
            is looked up from the compressor.
        omega (Optional[float]): Exponential parameter of the sub-Exponential
            distribution. Defaults to None.
        eta (float): Conservativeness of the bounds; larger is less conservative.
            Defaults to 1.0.
    """

    lambda1: int = 1
    lambda2: int = 30
    stopping_criterion: Callable = field(default_factory=MAStop)
    sigma2: Optional[float] = None
    omega: Optional[float] = None
    eta: float = 1.0

    def __post_init__(self):
        """Validate the configuration parameters after initialization."""
        super().__post_init__()
        _is_pos_int(self.lambda1, "lambda1")
        _is_pos_int(self.lambda2, "lambda2")
        if self.lambda1 > self.lambda2:
            raise ValueError(
                f"lambda1 must be less than or equal to lambda2, but received "
                f"lambda1={self.lambda1} and lambda2={self.lambda2}"
            )
        if self.sigma2 is not None:
            _is_pos_float(self.sigma2, "sigma2")
        if self.omega is not None:
            _is_pos_float(self.omega, "omega")
        _is_pos_float(self.eta, "eta")

    def to_dict(self) -> dict:
        data_dict = super().to_dict()
        data_dict.update(
            lambda1=self.lambda1,
            lambda2=self.lambda2,
            sigma2=self.sigma2,
            omega=self.omega,
            eta=self.eta,
        )
        return data_dict


def _is_logger_config(param: Any, param_name: str):
    if not isinstance(param, LoggerConfig):
        raise TypeError(
            f"{param_name} is of type {type(param).__name__}, "
            "but expected type LoggerConfig"
        )
