"""This module defines the abstract base class for sampling distributions."""

from abc import ABC, abstractmethod
from typing import Optional

import numpy as np
import torch

from .configs import DistributionConfig
from rlinalg.utils.enums import Cardinality
from rlinalg.utils.errors import DimensionMismatchError


__all__ = ["Distribution"]


class Distribution(ABC):
    """Abstract base class for distributions over the rows or columns of a matrix.

    Attributes:
        config (DistributionConfig): Configuration of the distribution.
        cardinality (Cardinality): LEFT samples rows, RIGHT samples columns.
        replace (bool): Whether samples are drawn with replacement.
        state_space (int): Number of indices that can be drawn.
        weights (torch.Tensor): Normalized float64 probabilities of every index.
    """

    def __init__(self, config: DistributionConfig, A: torch.Tensor):
        if config.cardinality is None:
            raise ValueError(
                "The cardinality of a distribution must be set before it is completed."
            )
        self.config = config
        self.cardinality = config.cardinality
        self.replace = config.replace

        A = A if A.ndim == 2 else A.unsqueeze(-1)
        if self.cardinality == Cardinality.LEFT:
            self.state_space = A.shape[0]
        else:
            self.state_space = A.shape[1]

        self.weights = torch.empty(
            self.state_space, dtype=torch.float64, device=A.device
        )
        self._update(None, A, None)

    @abstractmethod
    def _compute_weights(
        self,
        x: Optional[torch.Tensor],
        A: torch.Tensor,
        b: Optional[torch.Tensor],
    ) -> torch.Tensor:
        """Compute (possibly unnormalized) non-negative weights of every index.

        Args:
            x (Optional[torch.Tensor]): Current iterate, if available.
            A (torch.Tensor): The matrix being sampled.
            b (Optional[torch.Tensor]): The constant vector, if available.

        Returns:
            torch.Tensor: A 1D tensor of length state_space.
        """
        pass

    def _update(
        self,
        x: Optional[torch.Tensor],
        A: torch.Tensor,
        b: Optional[torch.Tensor],
    ):
        if A.ndim == 1:
            A = A.unsqueeze(-1)
        if self.cardinality == Cardinality.LEFT:
            size, kind = A.shape[0], "rows"
        else:
            size, kind = A.shape[1], "columns"
        if size != self.state_space:
            raise DimensionMismatchError(
                f"Matrix A has {size} {kind} while the distribution is defined over "
                f"{self.state_space} indices."
            )
        weights = self._compute_weights(x, A, b).to(torch.float64)
        total = weights.sum()
        if total > 0:
            self.weights.copy_(weights / total)
        else:
            # A zero matrix carries no information, fall back to uniform weights
            self.weights.fill_(1.0 / self.state_space)

    def _sample(self, out: torch.Tensor) -> torch.Tensor:
        """Fill ``out`` with sorted indices drawn from the distribution.

        Args:
            out (torch.Tensor): An integer tensor receiving the sample in place.

        Returns:
            torch.Tensor: ``out``.

        Raises:
            ValueError: If more indices than available are requested without
                replacement.
        """
        n_samples = out.shape[0]
        if not self.replace and n_samples > self.state_space:
            raise ValueError(
                f"Cannot draw {n_samples} indices without replacement "
                f"from a state space of size {self.state_space}"
            )

        try:
            idx = torch.multinomial(self.weights, n_samples, replacement=self.replace)
        except RuntimeError as e:
            if "number of categories cannot exceed" not in str(e):
                raise e
            idx = np.random.choice(
                self.state_space,
                size=n_samples,
                replace=self.replace,
                p=self.weights.cpu().numpy(),
            )
            idx = torch.from_numpy(idx)
        out.copy_(torch.sort(idx.to(out.device)).values)
        return out
