"""Enums shared across rlinalg.

This module provides the Cardinality enum, which records whether a compression
operator is applied from the left (reducing rows) or from the right (reducing
columns) of the matrix it compresses.
"""
from enum import Enum, auto


__all__ = ["Cardinality"]


class Cardinality(Enum):
    """Enumeration for compression sides.

    Attributes:
        LEFT: Compress from the left, i.e. reduce the number of rows.
        RIGHT: Compress from the right, i.e. reduce the number of columns.
    """

    LEFT = auto()
    RIGHT = auto()

    @classmethod
    def _from_str(cls, value, param_name):
        if isinstance(value, cls):
            return value

        if isinstance(value, str):
            value = value.lower()
            if value == "left":
                return cls.LEFT
            elif value == "right":
                return cls.RIGHT

        raise ValueError(
            f"Invalid value for {param_name}: {value}. "
            "Expected 'left', 'right', Cardinality.LEFT, "
            "or Cardinality.RIGHT."
        )
