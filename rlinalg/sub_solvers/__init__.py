"""Sub-solvers module __init__.py file."""
from .configs import *
from .factory import *
from .sub_solver import *
from .lq import LQSolver
from .qr import QRSolver

# Collect __all__ from imported modules
__all__ = ["LQSolver", "QRSolver"]
for module in [configs, factory, sub_solver]:
    if hasattr(module, "__all__"):
        __all__.extend(module.__all__)
