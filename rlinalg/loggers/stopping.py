"""Stopping criteria for the logger recipes.

A stopping criterion is any callable taking the logger recipe and returning whether
the solver has converged. It is evaluated by the logger after every update.
"""

import math

from rlinalg.utils.input_checkers import (
    _is_nonneg_float,
    _is_nonneg_int,
    _is_pos_float,
)


__all__ = ["threshold_stop", "MaxIterations", "Threshold", "MAStop"]


def threshold_stop(log) -> bool:
    """Stop once the last error is below the threshold of the logger."""
    return log.error < log.threshold


class MaxIterations:
    """Stop once a number of iterations has been performed.

    Attributes:
        max_it (int): The iteration at which to stop.
    """

    def __init__(self, max_it: int):
        _is_nonneg_int(max_it, "max_it")
        self.max_it = max_it

    def __call__(self, log) -> bool:
        return log.iteration >= self.max_it


class Threshold:
    """Stop once the last error is below a fixed value.

    Attributes:
        threshold (float): The error below which to stop.
    """

    def __init__(self, threshold: float):
        _is_nonneg_float(threshold, "threshold")
        self.threshold = threshold

    def __call__(self, log) -> bool:
        return log.error < self.threshold


class MAStop:
    """Stopping criterion accounting for the noise of the moving average estimator.

    The criterion stops when the moving average ``rho`` is below ``threshold`` and
    the estimated variability ``sqrt(iota)`` is small enough that, with probability
    at least ``1 - chi1``, the true residual is not below ``delta1 * threshold``
    (stopping too late) and, with probability at least ``1 - chi2``, not above
    ``delta2 * threshold`` (stopping too early).

    For more information see:
    - Pritchard, Nathaniel, and Vivak Patel. "Solving, tracking and stopping
      streaming linear inverse problems." Inverse Problems (2024).

    Attributes:
        threshold (float): Target value of the progress estimator.
        delta1 (float): Fraction of the threshold below which not stopping is a
            mistake.
        delta2 (float): Fraction of the threshold above which stopping is a
            mistake.
        chi1 (float): Tolerated probability of stopping too late.
        chi2 (float): Tolerated probability of stopping too early.
    """

    def __init__(
        self,
        threshold: float = 1e-10,
        delta1: float = 0.9,
        delta2: float = 1.1,
        chi1: float = 0.01,
        chi2: float = 0.01,
    ):
        _is_pos_float(threshold, "threshold")
        _is_pos_float(delta1, "delta1")
        _is_pos_float(delta2, "delta2")
        _is_pos_float(chi1, "chi1")
        _is_pos_float(chi2, "chi2")
        if delta1 >= 1.0 or delta2 <= 1.0:
            raise ValueError(
                f"delta1 must be below 1 and delta2 above 1, but received "
                f"delta1={delta1} and delta2={delta2}"
            )
        if chi1 >= 1.0 or chi2 >= 1.0:
            raise ValueError(
                f"chi1 and chi2 must be below 1, but received chi1={chi1} "
                f"and chi2={chi2}"
            )
        self.threshold = threshold
        self.delta1 = delta1
        self.delta2 = delta2
        self.chi1 = chi1
        self.chi2 = chi2

    def iota_threshold(self, log) -> float:
        """Largest ``sqrt(iota)`` at which stopping satisfies both error rates."""
        dist_info = log.dist_info
        lam = log.ma_info.lambda_
        t = self.threshold
        log_chi1 = 2 * math.log(1 / self.chi1)
        log_chi2 = 2 * math.log(1 / self.chi2)
        siota = dist_info.sigma2 * math.sqrt(log.iota) * (1 + math.log(lam)) / lam
        g1 = (1 - self.delta1) ** 2 * t**2 / log_chi1
        g2 = (self.delta2 - 1) ** 2 * t**2 / log_chi2

        if dist_info.omega is None:
            return min(g1, g2) / siota if siota > 0 else math.inf

        min1 = min(
            g1 / siota if siota > 0 else math.inf,
            lam * (1 - self.delta1) * t / (log_chi1 * dist_info.omega),
        )
        min2 = min(
            g2 / siota if siota > 0 else math.inf,
            lam * (self.delta2 - 1) * t / (log_chi2 * dist_info.omega),
        )
        return min(min1, min2)

    def __call__(self, log) -> bool:
        if log.iteration == 0:
            return False
        return (
            math.sqrt(log.iota) <= self.iota_threshold(log)
            and log.rho <= self.threshold
        )
