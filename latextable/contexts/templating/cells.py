"""
Cell Grid

Tagged cell variants and conversion of supported data sources into a grid of
cells. Each variant knows how to render itself given a printf specifier and
the NaN placeholder; the infinity rewrite is shared by all of them.
"""

import dataclasses
import math
import numbers
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

import numpy as np
import pandas as pd
import sympy
from sympy.printing.str import StrPrinter

from latextable.contexts.templating.exceptions import UnsupportedDataTypeError
from latextable.contexts.templating.latex_patterns import CellPatterns
from latextable.contexts.templating.layout_config import LayoutConfig
from latextable.contexts.templating.logger import log_grid_conversion


class _InfinityStrPrinter(StrPrinter):
    """sympy string printer emitting the LaTeX infinity token instead of 'oo'."""

    def _print_Infinity(self, expr):
        return CellPatterns.INFINITY

    def _print_NegativeInfinity(self, expr):
        return f"-{CellPatterns.INFINITY}"


@dataclass(frozen=True)
class Cell:
    """Base class for grid cells."""

    def render(self, spec: str, nan_placeholder: str) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class NumberCell(Cell):
    """Raw numeric value, formatted with the cell's printf specifier."""

    value: float

    def render(self, spec: str, nan_placeholder: str) -> str:
        """
        NaN gives nan_placeholder; +/-inf give the infinity token with the sign
        kept outside it, so -inf ends up as -$\\infty$ after format_cell().
        """
        if math.isnan(self.value):
            return nan_placeholder
        if math.isinf(self.value):
            sign = "-" if self.value < 0 else ""
            return f"{sign}{CellPatterns.INFINITY}"
        return spec % self.value


@dataclass(frozen=True)
class TextCell(Cell):
    """Pre-formatted text, used verbatim."""

    text: str

    def render(self, spec: str, nan_placeholder: str) -> str:
        return self.text


@dataclass(frozen=True)
class SymbolicCell(Cell):
    """sympy expression, rendered to its canonical string form."""

    expr: Any

    def render(self, spec: str, nan_placeholder: str) -> str:
        return _InfinityStrPrinter().doprint(self.expr)


@dataclass(frozen=True)
class CellGrid:
    """Immutable rows x cols arrangement of cells."""

    rows: Tuple[Tuple[Cell, ...], ...]
    n_cols: int = 0

    @property
    def shape(self) -> Tuple[int, int]:
        return len(self.rows), self.n_cols

    def __iter__(self):
        return iter(self.rows)

    @classmethod
    def from_rows(cls, rows: List[List[Cell]], n_cols: Optional[int] = None) -> "CellGrid":
        """
        Build a grid from nested lists, checking that rows have equal length.

        n_cols is needed only when there are no rows to take the width from.
        """
        widths = {len(row) for row in rows}
        if n_cols is not None:
            widths.add(n_cols)
        if len(widths) > 1:
            raise UnsupportedDataTypeError(
                f"Rows have differing lengths: {sorted(widths)}", data_type="ragged sequence"
            )
        return cls(rows=tuple(tuple(row) for row in rows), n_cols=widths.pop() if widths else 0)


def format_cell(cell: Cell, spec: str, nan_placeholder: str) -> str:
    """
    Render one cell to LaTeX text.

    NaN becomes nan_placeholder before any rewriting; afterwards every
    infinity token is wrapped in math mode, whatever the cell variant.

    Args:
        cell: Cell to render
        spec: printf specifier for numeric cells (e.g. "%.3g")
        nan_placeholder: Replacement for NaN values

    Returns:
        Cell text

    Examples:
        >>> format_cell(NumberCell(float("inf")), "%.2f", "-")
        '$\\\\infty$'
    """
    text = cell.render(spec, nan_placeholder)
    return text.replace(CellPatterns.INFINITY, CellPatterns.INFINITY_MATH)


def to_cell(value: Any) -> Cell:
    """
    Wrap a single value in its cell variant.

    Missing values (None, pandas NA/NaT) become NaN number cells.
    """
    if isinstance(value, Cell):
        return value
    if isinstance(value, sympy.Basic):
        return SymbolicCell(value)
    if isinstance(value, (bool, np.bool_)):
        return TextCell(str(bool(value)))
    if isinstance(value, numbers.Real):
        return NumberCell(float(value))
    if value is None or (np.ndim(value) == 0 and pd.isna(value)):
        return NumberCell(math.nan)
    return TextCell(str(value))


def to_cell_grid(source: Any, config: LayoutConfig) -> Tuple[CellGrid, LayoutConfig]:
    """
    Convert a supported data source into a cell grid.

    Supported sources:
        - numeric numpy arrays (0-D, 1-D as a single row, 2-D) and nested number lists
        - pandas DataFrames (empty label settings are filled from columns/index)
        - sympy matrices and single sympy expressions

    Args:
        source: Data to convert
        config: Layout settings (not modified)

    Returns:
        Tuple of (grid, config), where config is a copy enriched with the
        DataFrame's own labels when the caller left them empty

    Raises:
        UnsupportedDataTypeError: For any other source
    """
    enriched = False

    if isinstance(source, pd.DataFrame):
        grid = CellGrid.from_rows(
            [[to_cell(value) for value in row] for row in source.itertuples(index=False, name=None)],
            n_cols=len(source.columns),
        )
        updates = {}
        if not config.has_column_labels:
            updates["column_labels"] = [str(c) for c in source.columns]
        if not config.has_row_labels and not _is_default_index(source.index):
            updates["row_labels"] = [str(i) for i in source.index]
        if updates:
            config = dataclasses.replace(config, **updates)
            enriched = True
        source_type = "DataFrame"
    elif isinstance(source, sympy.MatrixBase):
        grid = CellGrid.from_rows(
            [[SymbolicCell(source[i, j]) for j in range(source.cols)] for i in range(source.rows)],
            n_cols=source.cols,
        )
        source_type = "sympy matrix"
    elif isinstance(source, sympy.Basic):
        grid = CellGrid.from_rows([[SymbolicCell(source)]])
        source_type = "sympy expression"
    else:
        array = _as_numeric_array(source)
        grid = CellGrid.from_rows(
            [[NumberCell(float(v)) for v in row] for row in array], n_cols=array.shape[1]
        )
        source_type = "numeric array"

    log_grid_conversion(source_type, grid.shape, enriched)
    return grid, config


def _as_numeric_array(source: Any) -> np.ndarray:
    """Coerce a numeric matrix to a 2-D float array."""
    if isinstance(source, (str, bytes, dict, set)) or source is None:
        raise UnsupportedDataTypeError(
            "Data type not supported", data_type=type(source).__name__
        )
    try:
        array = np.asarray(source)
    except ValueError:
        raise UnsupportedDataTypeError(
            "Could not interpret data as a matrix", data_type=type(source).__name__
        ) from None

    if array.dtype.kind not in "biuf":
        raise UnsupportedDataTypeError(
            f"Array dtype '{array.dtype}' is not numeric", data_type=type(source).__name__
        )
    if array.ndim > 2:
        raise UnsupportedDataTypeError(
            f"Expected at most 2 dimensions, got {array.ndim}", data_type=type(source).__name__
        )
    return np.atleast_2d(array).astype(float)


def _is_default_index(index: pd.Index) -> bool:
    """True for the implicit 0..n-1 RangeIndex pandas assigns when no row names are given."""
    return isinstance(index, pd.RangeIndex) and index.start == 0 and index.step == 1
