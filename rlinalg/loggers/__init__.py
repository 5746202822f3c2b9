"""Loggers module __init__.py file."""
from .configs import *
from .factory import *
from .logger import *
from .ma import *
from .stopping import *
from .basic import BasicLogger
from .ma import MALogger, update_ma

# Collect __all__ from imported modules
__all__ = ["BasicLogger", "MALogger", "update_ma"]
for module in [configs, factory, logger, ma, stopping]:
    if hasattr(module, "__all__"):
        __all__.extend(module.__all__)
