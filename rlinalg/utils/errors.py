"""Exceptions raised by rlinalg."""


__all__ = ["RLinAlgError", "DimensionMismatchError", "ConfigurationError"]


class RLinAlgError(Exception):
    """Base class for all errors raised by rlinalg."""

    def __init__(self, message: str) -> None:
        module_name = self.__class__.__module__
        class_name = self.__class__.__name__
        super().__init__(f"{message} ({module_name}.{class_name})")


class DimensionMismatchError(RLinAlgError, ValueError):
    r"""Incompatible operand dimensions.

    This error occurs when the shapes of the operands of a multiplication or a solve
    do not agree. It is always raised before any output buffer is written to.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigurationError(RLinAlgError, TypeError):
    r"""Incompatible combination of components.

    This error occurs when a solver is completed with a logger or an error method
    that lacks a capability the solver loop relies on, or that relies on a
    capability the solver does not offer, or when a configuration has no solver
    registered for it.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
