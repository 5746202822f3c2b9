"""Solvers module __init__.py file."""
from .configs import *
from .factory import *
from .solver import *
from .col_projection import ColumnProjection
from .ihs import IHS
from .kaczmarz import Kaczmarz

# Collect __all__ from imported modules
__all__ = ["ColumnProjection", "IHS", "Kaczmarz"]
for module in [configs, factory, solver]:
    if hasattr(module, "__all__"):
        __all__.extend(module.__all__)
