"""Approximators module __init__.py file."""
from .configs import *
from .approximator import *
from .factory import *
from .rand_svd import RandSVD
from .range_finder import RangeFinder

# Collect __all__ from imported modules
__all__ = ["RandSVD", "RangeFinder"]
for module in [configs, approximator, factory]:
    if hasattr(module, "__all__"):
        __all__.extend(module.__all__)
