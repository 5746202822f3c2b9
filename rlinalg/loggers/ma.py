"""Moving-average logger and its uncertainty quantification.

The logger tracks a moving average of the squared compressed error. While the error
decreases monotonically the window stays at ``lambda1``, so that the estimate follows
the fast initial progress. At the first increase the window grows one slot per
iteration up to ``lambda2``, smoothing out the randomness of the compression. Under a
sub-Exponential model of the compressed error, the second moment ``iota`` of the
window yields credible intervals for the true error.

For more information see:
- Pritchard, Nathaniel, and Vivak Patel. "Solving, tracking and stopping streaming
  linear inverse problems." Inverse Problems (2024).
- Pritchard, Nathaniel, and Vivak Patel. "Towards Practical Large-Scale Randomized
  Iterative Least Squares Solvers through Uncertainty Quantification." SIAM/ASA J.
  Uncertainty Quantification 11 (2022): 996-1024.
"""

import math
import warnings
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

import numpy as np
import torch

from .configs import MALoggerConfig
from .logger import Logger
from rlinalg.compressors import Compressor, Gaussian, Sampling
from rlinalg.utils.enums import Cardinality


__all__ = ["MAInfo", "SEDistInfo", "get_uncertainty"]


@dataclass
class MAInfo:
    """State of the moving average.

    Attributes:
        lambda1 (int): Window width of the fast convergence phase.
        lambda2 (int): Window width of the slow convergence phase.
        lambda_ (int): Current window width.
        flag (bool): True once the slow convergence phase is entered.
        idx (int): Position of the last value written to ``res_window``.
        res_window (np.ndarray): Ring buffer of length ``lambda2``.
    """

    lambda1: int
    lambda2: int
    lambda_: int
    flag: bool
    idx: int
    res_window: np.ndarray


@dataclass
class SEDistInfo:
    """Sub-Exponential constants of the compressed error.

    Attributes:
        sampler (Optional[type]): Class of the compressor.
        dimension (int): Dimension of the space being compressed.
        block_dimension (int): Compression dimension.
        sigma2 (Optional[float]): Variance parameter.
        omega (Optional[float]): Exponential parameter.
        eta (float): Conservativeness of the bounds.
        scaling (float): Factor making the expected squared compressed error equal
            to the squared true error.
    """

    sampler: Optional[type] = None
    dimension: int = 0
    block_dimension: int = 0
    sigma2: Optional[float] = None
    omega: Optional[float] = None
    eta: float = 1.0
    scaling: float = 1.0


def _sampling_constants(dist_info: SEDistInfo):
    ratio = dist_info.dimension / dist_info.block_dimension
    dist_info.sigma2 = ratio**2 / (4 * dist_info.eta)
    dist_info.scaling = ratio


def _gaussian_constants(dist_info: SEDistInfo):
    dist_info.sigma2 = dist_info.block_dimension / (0.2345 * dist_info.eta)
    dist_info.omega = 0.1127
    dist_info.scaling = 1.0


# Sub-Exponential constants of the compressors for which they are known
SE_CONSTANTS = {
    Sampling: _sampling_constants,
    Gaussian: _gaussian_constants,
}


def _set_se_constants(dist_info: SEDistInfo):
    set_constants: Optional[Callable] = SE_CONSTANTS.get(dist_info.sampler)
    if set_constants is None:
        warnings.warn(
            f"No constants defined for compressor of type {dist_info.sampler}. "
            "By default sigma2 is set to 1 and scaling is set to 1."
        )
        dist_info.sigma2 = 1.0
        dist_info.scaling = 1.0
    else:
        set_constants(dist_info)


class MALogger(Logger):
    """Logger tracking a moving average of the squared compressed error.

    Attributes:
        ma_info (MAInfo): State of the moving average.
        dist_info (SEDistInfo): Sub-Exponential constants of the compressor.
        rho (float): Current moving average.
        iota (float): Current moving average of the squared entries of the window.
        resid_hist (List[float]): Moving averages at the collection rate.
        iota_hist (List[float]): Second moments at the collection rate.
        lambda_hist (List[int]): Window widths at the collection rate.
    """

    def __init__(
        self,
        config: MALoggerConfig,
        compressor: Optional[Compressor] = None,
        A: Optional[torch.Tensor] = None,
    ):
        self.ma_info = MAInfo(
            lambda1=config.lambda1,
            lambda2=config.lambda2,
            lambda_=config.lambda1,
            flag=False,
            idx=0,
            res_window=np.zeros(config.lambda2),
        )
        self.dist_info = SEDistInfo(
            sigma2=config.sigma2, omega=config.omega, eta=config.eta
        )
        if compressor is not None:
            self.dist_info.sampler = type(compressor)
            self.dist_info.block_dimension = compressor.compression_dim
            if compressor.cardinality == Cardinality.LEFT:
                self.dist_info.dimension = compressor.shape[1]
            else:
                self.dist_info.dimension = compressor.shape[0]
        if self.dist_info.sigma2 is None:
            _set_se_constants(self.dist_info)

        self.resid_hist: List[float] = []
        self.iota_hist: List[float] = []
        self.lambda_hist: List[int] = []
        super().__init__(config)

    def _clear(self):
        super()._clear()
        self.rho = float("inf")
        self.iota = float("inf")
        self.ma_info.lambda_ = self.ma_info.lambda1
        self.ma_info.flag = False
        self.ma_info.idx = 0
        self.ma_info.res_window.fill(0.0)
        self.resid_hist.clear()
        self.iota_hist.clear()
        self.lambda_hist.clear()

    def _metrics(self) -> dict:
        return {"error": self.error, "rho": self.rho, "iota": self.iota}

    def _on_update(self, error: float, iteration: int):
        ma_info = self.ma_info
        res = self.dist_info.scaling * error**2

        if ma_info.flag:
            update_ma(self, res, ma_info.lambda2, iteration)
        else:
            # the window is overwritten by update_ma, so the comparison comes first
            flag_cond = iteration == 0 or res <= ma_info.res_window[ma_info.idx]
            update_ma(self, res, ma_info.lambda1, iteration)
            ma_info.flag = not flag_cond


def update_ma(log: MALogger, res: float, lambda_base: int, iteration: int):
    """Push ``res`` into the window and recompute the moving average.

    Args:
        log (MALogger): The logger whose moving average is updated.
        res (float): The scaled squared compressed error of the iteration.
        lambda_base (int): Width the window is allowed to grow to.
        iteration (int): The current iteration.
    """
    ma_info = log.ma_info
    window = ma_info.res_window
    if ma_info.idx < ma_info.lambda2 - 1 and iteration != 0:
        ma_info.idx += 1
    else:
        ma_info.idx = 0
    window[ma_info.idx] = res

    lam = ma_info.lambda_
    if lam == ma_info.lambda2:
        entries = window
    else:
        # last lam entries ending at idx, wrapping around the ring buffer
        entries = window[np.arange(ma_info.idx - lam + 1, ma_info.idx + 1)]
    log.rho = float(entries.sum() / lam)
    log.iota = float((entries**2).sum() / lam)

    if iteration % log.collection_rate == 0:
        log.lambda_hist.append(lam)
        log.resid_hist.append(log.rho)
        log.iota_hist.append(log.iota)

    if lam < lambda_base:
        ma_info.lambda_ += 1


def get_uncertainty(
    log: MALogger, alpha: float = 0.05
) -> Tuple[List[float], np.ndarray, np.ndarray]:
    """Compute ``(1 - alpha)`` credible intervals for every recorded moving average.

    When ``omega`` is known, the half-width is the larger of the Gaussian-type and
    exponential-type half-widths.

    Args:
        log (MALogger): A logger that has been updated by a solver.
        alpha (float): One minus the credibility level. Defaults to 0.05.

    Returns:
        Tuple[List[float], np.ndarray, np.ndarray]: The recorded moving averages,
        the upper bounds and the lower bounds.

    Raises:
        ValueError: If the sub-Exponential constants are not set.
    """
    dist_info = log.dist_info
    if dist_info.sigma2 is None:
        raise ValueError(
            "The sub-Exponential constants are empty, "
            "please set them in the dist_info field of the logger first."
        )

    n = len(log.iota_hist)
    upper = np.zeros(n)
    lower = np.zeros(n)
    log_alpha = 2 * math.log(2 / alpha)
    for i in range(n):
        width = log.lambda_hist[i]
        iota = log.iota_hist[i]
        rho = log.resid_hist[i]
        cG = dist_info.sigma2 * (1 + math.log(width)) * iota / (dist_info.eta * width)
        diff = math.sqrt(cG * log_alpha)
        if dist_info.omega is not None:
            scale = dist_info.omega / (dist_info.eta * width)
            diffO = math.sqrt(iota) * log_alpha * scale
            diff = max(diff, diffO)
        upper[i] = rho + diff
        lower[i] = rho - diff

    return log.resid_hist, upper, lower
