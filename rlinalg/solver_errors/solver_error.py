"""This module defines the abstract base class for solver error methods."""

from abc import ABC, abstractmethod
from typing import Tuple

import torch

from .configs import SolverErrorConfig


__all__ = ["SolverError"]


class SolverError(ABC):
    """Abstract base class for solver error methods.

    Attributes:
        config (SolverErrorConfig): Configuration of the error method.
        provides_residual (bool): Whether the method exposes the residual buffer
            it last computed. Every solver loop relies on it.
        required_views (Tuple[str, ...]): Solver buffers the method reads. A
            solver that does not offer one of them cannot be completed with this
            method.
        error (float): The last computed error.
    """

    provides_residual: bool = True
    required_views: Tuple[str, ...] = ()

    def __init__(self, config: SolverErrorConfig, A: torch.Tensor, b: torch.Tensor):
        self.config = config
        self.error = float("inf")
        self.residual = None

    @abstractmethod
    def _compute(self, solver, A: torch.Tensor, b: torch.Tensor) -> float:
        """Compute the error of the current iterate of ``solver``."""
        pass
