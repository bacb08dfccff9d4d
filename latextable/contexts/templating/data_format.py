"""
Numeric Data Formats

Maps a display mode and a precision to a printf-style specifier (e.g. "%.3f"),
and broadcasts per-row or per-column mode/precision settings to the data shape.
"""

import numbers
from enum import Enum
from typing import Any, Dict, Tuple

import numpy as np

from latextable.contexts.templating.exceptions import (
    InvalidConfigError,
    InvalidPrecisionError,
    ShapeMismatchError,
)


class DataFormat(Enum):
    """
    Numeric display modes.

    Values match the mode names accepted in settings and YAML presets.
    DECIMAL and FIXED_POINT currently produce the same conversion.
    """

    COMPACT = "compact"
    COMPACT_UPPER = "Compact"
    FIXED_POINT = "fixedPoint"
    DECIMAL = "decimal"
    EXPONENTIAL = "exponential"
    EXPONENTIAL_UPPER = "Exponential"

    @classmethod
    def _missing_(cls, value: Any):
        if isinstance(value, str):
            alias = _ALIASES.get(value)
            if alias is not None:
                return cls(alias)
            member = cls.__members__.get(value.upper())
            if member is not None:
                return member
        return None

    @classmethod
    def parse(cls, value: Any) -> "DataFormat":
        """Coerce a mode name or member into a DataFormat, raising InvalidConfigError."""
        try:
            return cls(value)
        except ValueError:
            raise InvalidConfigError("data_format", value, [m.value for m in cls]) from None

    @property
    def letter(self) -> str:
        """printf conversion letter for this mode."""
        return _CONVERSION_LETTERS[self]


_ALIASES: Dict[str, str] = {
    "CompactUpper": "Compact",
    "ExponentialUpper": "Exponential",
}

_CONVERSION_LETTERS = {
    DataFormat.COMPACT: "g",
    DataFormat.COMPACT_UPPER: "G",
    DataFormat.FIXED_POINT: "f",
    DataFormat.DECIMAL: "f",
    DataFormat.EXPONENTIAL: "e",
    DataFormat.EXPONENTIAL_UPPER: "E",
}


def validate_precision(precision: Any) -> int:
    """
    Check that precision is a non-negative integer.

    Args:
        precision: Candidate precision (int, numpy integer, or an integer-valued float such as 2.0)

    Returns:
        Precision as a plain int

    Raises:
        InvalidPrecisionError: For bools, non-integers and negative values
    """
    if isinstance(precision, (bool, np.bool_)) or not isinstance(precision, numbers.Real):
        raise InvalidPrecisionError(precision)
    if not isinstance(precision, numbers.Integral) and not float(precision).is_integer():
        raise InvalidPrecisionError(precision)
    if precision < 0:
        raise InvalidPrecisionError(precision)
    return int(precision)


def to_format(mode: Any, precision: Any) -> str:
    """
    Build the printf-style specifier for one cell.

    Args:
        mode: DataFormat member or mode name
        precision: Non-negative integer

    Returns:
        Specifier such as "%.3g"

    Examples:
        >>> to_format(DataFormat.FIXED_POINT, 2)
        '%.2f'
        >>> to_format("Exponential", 4)
        '%.4E'
    """
    data_format = DataFormat.parse(mode)
    precision = validate_precision(precision)
    return f"%.{precision}{data_format.letter}"


def broadcast_to_shape(spec: Any, shape: Tuple[int, int], field_name: str) -> np.ndarray:
    """
    Expand a scalar, single-row or single-column specification to a full grid.

    A 1-D sequence is treated as a single row (one entry per column).
    A 1-row specification is repeated down the rows, a 1-column
    specification across the columns.

    Args:
        spec: Scalar, 1-D sequence, or 2-D nested sequence/array
        shape: Target (rows, cols)
        field_name: Setting name used in error messages

    Returns:
        Object array of the target shape

    Raises:
        ShapeMismatchError: If the specification cannot be conformed to shape
    """
    if isinstance(spec, (str, Enum)) or np.ndim(spec) == 0:
        grid = np.empty(shape, dtype=object)
        grid.fill(spec)
        return grid

    grid = np.array(spec, dtype=object)
    if grid.ndim == 1:
        grid = grid.reshape(1, -1)
    if grid.ndim != 2:
        raise ShapeMismatchError(
            f"Cannot broadcast a {grid.ndim}-D specification",
            field_name=field_name,
            expected_shape=tuple(shape),
            actual_shape=grid.shape,
        )

    if grid.shape[0] == 1:
        grid = np.tile(grid, (shape[0], 1))
    if grid.shape[1] == 1:
        grid = np.tile(grid, (1, shape[1]))

    if grid.shape != tuple(shape):
        raise ShapeMismatchError(
            "Specification does not match data shape",
            field_name=field_name,
            expected_shape=tuple(shape),
            actual_shape=grid.shape,
        )
    return grid


def format_grid(modes: Any, precisions: Any, shape: Tuple[int, int]) -> np.ndarray:
    """
    Produce one printf specifier per data cell.

    Args:
        modes: Mode setting (scalar, row, column or full grid)
        precisions: Precision setting (scalar, row, column or full grid)
        shape: Data shape (rows, cols)

    Returns:
        Object array of specifier strings with the data shape
    """
    mode_grid = broadcast_to_shape(modes, shape, "data_format")
    precision_grid = broadcast_to_shape(precisions, shape, "data_precision")

    specs = np.empty(shape, dtype=object)
    for index in np.ndindex(*shape):
        specs[index] = to_format(mode_grid[index], precision_grid[index])
    return specs
