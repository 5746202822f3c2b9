from typing import Optional
import time

import wandb


__all__ = ["RunLogger"]


class RunLogger:
    """Times solver iterations and mirrors collected records to Weights and Biases.

    A run is opened lazily by ``_start`` and closed by ``_terminate`` so that one
    solver recipe can be solved several times, each solve being its own wandb run.
    """

    def __init__(self, wandb_kwargs: Optional[dict] = None):
        self.wandb_kwargs = wandb_kwargs
        self.log_in_wandb = wandb_kwargs is not None
        self._active = False

        self.start_time = time.time()
        self.iter_time = 0.0
        self.cum_time = 0.0

    def _start(self):
        if self.log_in_wandb and not self._active:
            wandb.init(**self.wandb_kwargs)
            self._active = True

        self.start_time = time.time()
        self.iter_time = 0.0
        self.cum_time = 0.0

    def _reset_timer(self):
        self.start_time = time.time()

    def _update_cum_time(self):
        self.iter_time = time.time() - self.start_time
        self.cum_time += self.iter_time

    def _record(self, i: int, metrics: dict) -> dict:
        self._update_cum_time()

        log_dict = {"iter_time": self.iter_time, "cum_time": self.cum_time}
        log_dict["metrics"] = metrics

        if self._active:
            wandb.log(log_dict, step=i)

        self._reset_timer()

        return log_dict

    def _terminate(self):
        if self._active:
            wandb.finish()
            self._active = False
