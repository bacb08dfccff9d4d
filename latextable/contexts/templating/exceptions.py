"""Custom exceptions for the templating context (cell formatting and LaTeX assembly)."""

from typing import Any, Iterable, Optional, Tuple


class UnsupportedDataTypeError(TypeError):
    """
    Exception raised when a data source cannot be converted into a cell grid.

    Attributes:
        message: Error description
        data_type: Name of the offending type
    """

    def __init__(self, message: str, data_type: Optional[str] = None):
        self.message = message
        self.data_type = data_type

        parts = [message]
        if data_type:
            parts.append(f"Data type: {data_type}")
            parts.append(
                "Supported: numeric numpy arrays, pandas DataFrames, sympy matrices/expressions"
            )

        super().__init__("\n".join(parts))


class ShapeMismatchError(ValueError):
    """
    Exception raised when a per-cell specification cannot be conformed to the data shape.

    Attributes:
        message: Error description
        field_name: Setting being broadcast (e.g., 'data_precision', 'row_labels')
        expected_shape: Shape of the data grid
        actual_shape: Shape of the specification after broadcast
    """

    def __init__(
        self,
        message: str,
        field_name: Optional[str] = None,
        expected_shape: Optional[Tuple[int, ...]] = None,
        actual_shape: Optional[Tuple[int, ...]] = None,
    ):
        self.message = message
        self.field_name = field_name
        self.expected_shape = expected_shape
        self.actual_shape = actual_shape

        parts = [message]
        if field_name:
            parts.append(f"Field: {field_name}")
        if expected_shape is not None and actual_shape is not None:
            parts.append(f"Expected shape {expected_shape}, got {actual_shape}")

        super().__init__("\n".join(parts))


class InvalidPrecisionError(ValueError):
    """Exception raised when a precision is not a non-negative integer."""

    def __init__(self, precision: Any):
        self.precision = precision
        super().__init__(
            f"Precision must be a non-negative integer, got {precision!r} "
            f"({type(precision).__name__})"
        )


class InvalidConfigError(ValueError):
    """
    Exception raised when an enumerated setting holds a value outside its closed set.

    Attributes:
        field_name: Name of the setting (e.g., 'borders')
        value: Rejected value
        allowed: Accepted values
    """

    def __init__(self, field_name: str, value: Any, allowed: Iterable[Any]):
        self.field_name = field_name
        self.value = value
        self.allowed = list(allowed)
        super().__init__(
            f"Invalid value {value!r} for '{field_name}'. Valid values: {self.allowed}"
        )
