"""This module provides a factory for creating logger recipes."""

from typing import Optional

import torch

from .basic import BasicLogger
from .configs import (
    LoggerConfig,
    BasicLoggerConfig,
    MALoggerConfig,
    _is_logger_config,
)
from .logger import Logger
from .ma import MALogger
from rlinalg.compressors import Compressor


# Mapping of configuration classes to their corresponding logger classes
CONFIG_TO_LOGGER = {
    BasicLoggerConfig: BasicLogger,
    MALoggerConfig: MALogger,
}


__all__ = ["complete_logger", "update_logger", "reset_logger"]


def complete_logger(
    logger_config: LoggerConfig,
    compressor: Optional[Compressor] = None,
    A: Optional[torch.Tensor] = None,
) -> Logger:
    """Create a logger recipe.

    Args:
        logger_config (LoggerConfig): The configuration of the logger.
        compressor (Optional[Compressor]): The compressor of the solver. The
            moving-average logger derives its sub-Exponential constants from it.
        A (Optional[torch.Tensor]): The coefficient matrix.

    Returns:
        Logger: The completed logger.

    Raises:
        KeyError: If no logger class is found for the configuration.
    """
    _is_logger_config(logger_config, "logger_config")
    logger_class = CONFIG_TO_LOGGER.get(logger_config.__class__)

    if logger_class is None:
        raise KeyError(f"No logger found for configuration: {logger_config.__class__}")

    return logger_class(logger_config, compressor, A)


def update_logger(logger: Logger, error: float, iteration: int):
    """Record the error of an iteration, see ``Logger.update``."""
    logger.update(error, iteration)


def reset_logger(logger: Logger):
    """Clear a logger before a new solve."""
    logger.reset()
