"""This module defines configuration classes for the solvers.

A solver configuration bundles the configurations of the components a solver is
built from (compressor, logger, error method and sub-solver) together with the
relaxation parameter ``alpha``.
"""

from abc import ABC
from dataclasses import dataclass, field, fields
from typing import Any

from rlinalg.compressors import (
    CompressorConfig,
    GaussianConfig,
    SparseSignConfig,
    _is_compressor_config,
)
from rlinalg.loggers import BasicLoggerConfig, LoggerConfig, _is_logger_config
from rlinalg.solver_errors import (
    FullResidualConfig,
    LSGradientConfig,
    SolverErrorConfig,
    _is_solver_error_config,
)
from rlinalg.sub_solvers import (
    LQSolverConfig,
    QRSolverConfig,
    SubSolverConfig,
    _is_sub_solver_config,
)
from rlinalg.utils.errors import ConfigurationError
from rlinalg.utils.input_checkers import _is_float


__all__ = [
    "SolverConfig",
    "KaczmarzConfig",
    "ColumnProjectionConfig",
    "IHSConfig",
    "_is_solver_config",
    "_get_solver_name",
]


@dataclass(kw_only=True, frozen=False)
class SolverConfig(ABC):
    """Abstract base class for solver configurations.

    Attributes:
        compressor_config (CompressorConfig): Compression applied every iteration.
        logger_config (LoggerConfig): Logger and stopping criterion.
        error_config (SolverErrorConfig): Progress estimate fed to the logger.
        alpha (float): Relaxation parameter multiplying every update. Convergence
            is only guaranteed for values in (0, 2). Defaults to 1.0.
    """

    compressor_config: CompressorConfig
    logger_config: LoggerConfig = field(default_factory=BasicLoggerConfig)
    error_config: SolverErrorConfig = field(default_factory=FullResidualConfig)
    alpha: float = 1.0

    def __post_init__(self):
        """Validate the configuration parameters after initialization."""
        _is_compressor_config(self.compressor_config, "compressor_config")
        _is_logger_config(self.logger_config, "logger_config")
        _is_solver_error_config(self.error_config, "error_config")
        _is_float(self.alpha, "alpha")

    def to_dict(self) -> dict:
        """Convert the configuration to a dictionary.

        Nested component configurations are converted with their own ``to_dict``.

        Returns:
            dict: A dictionary representation of the configuration.
        """
        data_dict = {}
        for f in fields(self):
            value = getattr(self, f.name)
            data_dict[f.name] = value.to_dict() if hasattr(value, "to_dict") else value
        return data_dict


@dataclass(kw_only=True, frozen=False)
class KaczmarzConfig(SolverConfig):
    """Configuration for the (block) Kaczmarz solver.

    Attributes:
        compressor_config (CompressorConfig): Defaults to a left SparseSign.
        sub_solver_config (SubSolverConfig): Solver of the compressed wide system.
            Defaults to LQSolverConfig().
    """

    compressor_config: CompressorConfig = field(
        default_factory=lambda: SparseSignConfig(cardinality="left")
    )
    sub_solver_config: SubSolverConfig = field(default_factory=LQSolverConfig)

    def __post_init__(self):
        """Validate the configuration parameters after initialization."""
        super().__post_init__()
        _is_sub_solver_config(self.sub_solver_config, "sub_solver_config")


@dataclass(kw_only=True, frozen=False)
class ColumnProjectionConfig(SolverConfig):
    """Configuration for the column projection solver.

    Attributes:
        compressor_config (CompressorConfig): Defaults to a right SparseSign.
        error_config (SolverErrorConfig): Defaults to LSGradientConfig().
        sub_solver_config (SubSolverConfig): Solver of the compressed tall system.
            Defaults to QRSolverConfig().
    """

    compressor_config: CompressorConfig = field(
        default_factory=lambda: SparseSignConfig(cardinality="right")
    )
    error_config: SolverErrorConfig = field(default_factory=LSGradientConfig)
    sub_solver_config: SubSolverConfig = field(default_factory=QRSolverConfig)

    def __post_init__(self):
        """Validate the configuration parameters after initialization."""
        super().__post_init__()
        _is_sub_solver_config(self.sub_solver_config, "sub_solver_config")


@dataclass(kw_only=True, frozen=False)
class IHSConfig(SolverConfig):
    """Configuration for the Iterative Hessian Sketch solver.

    Attributes:
        compressor_config (CompressorConfig): Defaults to a left Gaussian.
    """

    compressor_config: CompressorConfig = field(
        default_factory=lambda: GaussianConfig(cardinality="left")
    )


def _is_solver_config(param: Any, param_name: str):
    if not isinstance(param, SolverConfig):
        raise TypeError(
            f"{param_name} is of type {type(param).__name__}, "
            "but expected type SolverConfig"
        )


CONFIG_TO_NAME = {
    KaczmarzConfig: "kaczmarz",
    ColumnProjectionConfig: "column projection",
    IHSConfig: "IHS",
}


def _get_solver_name(solver_config: SolverConfig) -> str:
    config_class = solver_config.__class__
    name = CONFIG_TO_NAME.get(config_class)
    if name is None:
        raise ConfigurationError(
            f"No solver is registered for configuration: {config_class.__name__}"
        )
    return name
