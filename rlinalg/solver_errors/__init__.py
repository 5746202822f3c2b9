"""Solver errors module __init__.py file."""
from .configs import *
from .factory import *
from .solver_error import *
from .compressed_residual import CompressedResidual
from .full_residual import FullResidual
from .ls_gradient import LSGradient

# Collect __all__ from imported modules
__all__ = ["CompressedResidual", "FullResidual", "LSGradient"]
for module in [configs, factory, solver_error]:
    if hasattr(module, "__all__"):
        __all__.extend(module.__all__)
