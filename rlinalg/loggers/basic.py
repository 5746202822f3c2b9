from typing import Optional

import torch

from .configs import BasicLoggerConfig
from .logger import Logger
from rlinalg.compressors import Compressor


class BasicLogger(Logger):
    """Logger recording the raw error at the collection rate.

    Attributes:
        threshold (float): Value read by ``threshold_stop``.
    """

    def __init__(
        self,
        config: BasicLoggerConfig,
        compressor: Optional[Compressor] = None,
        A: Optional[torch.Tensor] = None,
    ):
        self.threshold = config.threshold
        super().__init__(config)

    def _metrics(self) -> dict:
        return {"error": self.error}
