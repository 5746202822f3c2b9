"""This module defines the abstract base class for logger recipes."""

from abc import ABC, abstractmethod

import numpy as np

from .configs import LoggerConfig
from rlinalg.utils.logger import RunLogger


__all__ = ["Logger"]


class Logger(ABC):
    """Abstract base class for logger recipes.

    Attributes:
        config (LoggerConfig): Configuration of the logger.
        provides_converged (bool): Whether the recipe maintains the ``converged``
            flag read by the solver loop.
        max_it (int): Maximum number of iterations.
        collection_rate (int): Number of iterations between two records.
        stopping_criterion (Callable): The stopping criterion.
        error (float): The last error received.
        iteration (int): The last iteration received.
        converged (bool): Whether the stopping criterion was met.
        hist (np.ndarray): Preallocated history of errors, one slot per record.
    """

    provides_converged: bool = True

    def __init__(self, config: LoggerConfig):
        self.config = config
        self.max_it = config.max_it
        self.collection_rate = config.collection_rate
        self.stopping_criterion = config.stopping_criterion

        # ceil leaves room for the last iterate whether or not the rate divides max_it
        max_collection = -(-self.max_it // self.collection_rate)
        self.hist = np.zeros(max_collection + 1)
        self.run_logger = RunLogger(config.wandb_kwargs)
        self._clear()

    def _clear(self):
        self.error = float("inf")
        self.iteration = 0
        self.record_location = 0
        self.n_records = 0
        self.converged = False
        self.hist.fill(0.0)

    def reset(self):
        """Clear the state of the logger before a new solve."""
        self._clear()
        self.run_logger._start()

    @property
    def history(self) -> np.ndarray:
        """The recorded part of ``hist``."""
        return self.hist[: self.n_records]

    @abstractmethod
    def _metrics(self) -> dict:
        """Quantities sent along with every record."""
        pass

    def _on_update(self, error: float, iteration: int):
        pass

    def update(self, error: float, iteration: int):
        """Record the error of an iteration and evaluate the stopping criterion.

        Args:
            error (float): The error of the current iterate.
            iteration (int): The current iteration, starting at 0.
        """
        self.iteration = iteration
        self.error = error
        self._on_update(error, iteration)

        if iteration <= self.max_it:
            self.converged = bool(self.stopping_criterion(self))
        else:
            self.converged = True

        if self.converged:
            # past max_it the last slot is overwritten
            location = min(self.record_location, self.hist.shape[0] - 1)
            self.hist[location] = error
            self.n_records = location + 1
            self.run_logger._record(iteration, self._metrics())
        elif iteration % self.collection_rate == 0:
            self.hist[self.record_location] = error
            self.record_location += 1
            self.n_records = self.record_location
            self.run_logger._record(iteration, self._metrics())

    def _terminate(self):
        self.run_logger._terminate()
