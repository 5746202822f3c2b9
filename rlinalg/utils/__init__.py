"""Utils module __init__.py file."""
from .enums import *
from .errors import *
from .input_checkers import *
from .logger import *
from .wandb_ import *

# Collect __all__ from imported modules
__all__ = []
for module in [enums, errors, input_checkers, logger, wandb_]:
    if hasattr(module, "__all__"):
        __all__.extend(module.__all__)
