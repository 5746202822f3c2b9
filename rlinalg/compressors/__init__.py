"""Compressors module __init__.py file."""
from .configs import *
from .compressor import *
from .factory import *
from .fwht import *
from .count_sketch import CountSketch
from .fjlt import FJLT
from .gaussian import Gaussian
from .identity import Identity
from .sampling import Sampling
from .sparse_sign import SparseSign
from .srht import SRHT
from rlinalg.utils.enums import Cardinality

# Collect __all__ from imported modules
__all__ = [
    "Cardinality",
    "CountSketch",
    "FJLT",
    "Gaussian",
    "Identity",
    "Sampling",
    "SparseSign",
    "SRHT",
]
for module in [configs, compressor, factory, fwht]:
    if hasattr(module, "__all__"):
        __all__.extend(module.__all__)
