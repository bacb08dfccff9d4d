"""
LaTeX Table and Matrix Generation

Assembles formatted cells into a `table` float wrapping a `tabular`
environment, or into a display-math amsmath `bmatrix`.
"""

import dataclasses
from typing import Any, List, Optional, Tuple

from latextable.contexts.templating.cells import CellGrid, TextCell, format_cell, to_cell_grid
from latextable.contexts.templating.data_format import format_grid
from latextable.contexts.templating.exceptions import ShapeMismatchError
from latextable.contexts.templating.latex_patterns import (
    CellPatterns,
    MatrixPatterns,
    RulePatterns,
    TablePatterns,
)
from latextable.contexts.templating.layout_config import LayoutConfig
from latextable.contexts.templating.logger import _log_debug, log_build_result


def _format_rows(grid: CellGrid, config: LayoutConfig) -> List[List[str]]:
    """Render every data cell with its broadcast format specifier."""
    specs = format_grid(config.data_format, config.data_precision, grid.shape)
    return [
        [format_cell(cell, specs[i, j], config.nan_string) for j, cell in enumerate(row)]
        for i, row in enumerate(grid)
    ]


def _add_labels(rows: List[List[str]], config: LayoutConfig, shape: Tuple[int, int]) -> List[List[str]]:
    """Prepend the column-label row and/or row-label column."""
    n_rows, n_cols = shape

    def render_label(text: str) -> str:
        return format_cell(TextCell(text), "", config.nan_string)

    if config.has_column_labels and len(config.column_labels) != n_cols:
        raise ShapeMismatchError(
            "Number of column labels does not match number of columns",
            field_name="column_labels",
            expected_shape=(n_cols,),
            actual_shape=(len(config.column_labels),),
        )
    if config.has_row_labels and len(config.row_labels) != n_rows:
        raise ShapeMismatchError(
            "Number of row labels does not match number of rows",
            field_name="row_labels",
            expected_shape=(n_rows,),
            actual_shape=(len(config.row_labels),),
        )

    if config.has_row_labels:
        rows = [[render_label(label)] + row for label, row in zip(config.row_labels, rows)]
    if config.has_column_labels:
        header = [render_label(label) for label in config.column_labels]
        if config.has_row_labels:
            header = [""] + header
        rows = [header] + rows
    return rows


def _column_spec(n_cols: int, alignment: str, borders: str) -> str:
    """
    Build the tabular column specification.

    Examples:
        >>> _column_spec(3, "c", "none")
        'ccc'
        >>> _column_spec(3, "c", "single")
        'c|cc'
        >>> _column_spec(3, "c", "all")
        '|c|c|c|'
    """
    bar = RulePatterns.VERTICAL
    if borders == "all":
        return bar + (alignment + bar) * n_cols
    if borders == "single":
        return alignment + bar + alignment * max(n_cols - 1, 0)
    return alignment * n_cols


def _join_row(row: List[str]) -> str:
    return CellPatterns.SEPARATOR.join(row) + CellPatterns.ROW_END


def build_table(grid: CellGrid, config: LayoutConfig) -> str:
    """
    Generate a `table` float containing a `tabular` environment.

    Rules: with booktabs, \\toprule / \\midrule / \\bottomrule; otherwise
    \\hline after the first row for 'single' and 'all' borders, and for 'all'
    borders also before every row and after the last one.

    Args:
        grid: Data cells
        config: Layout settings (labels must already be resolved)

    Returns:
        LaTeX source, lines joined by "\\n"

    Raises:
        ShapeMismatchError: Format/precision/labels do not fit the data shape
        InvalidPrecisionError: A precision entry is not a non-negative integer
        InvalidConfigError: A mode entry is not a DataFormat
    """
    rows = _add_labels(_format_rows(grid, config), config, grid.shape)
    n_cols = len(rows[0]) if rows else grid.shape[1]

    column_spec = _column_spec(n_cols, config.column_alignment, config.borders)
    latex = [
        f"{TablePatterns.BEGIN_TABLE}[{config.placement}]",
        TablePatterns.CENTERING,
        f"{TablePatterns.BEGIN_TABULAR}{{{column_spec}}}",
    ]

    if config.booktabs:
        latex.append(RulePatterns.TOPRULE)

    for i, row in enumerate(rows):
        if i == 1:
            # Separates the first (header) row from the rest
            if config.booktabs:
                latex.append(RulePatterns.MIDRULE)
            elif config.borders in ("single", "all"):
                latex.append(RulePatterns.HLINE)
        elif config.borders == "all":
            latex.append(RulePatterns.HLINE)
        latex.append(_join_row(row))

    if config.booktabs:
        latex.append(RulePatterns.BOTTOMRULE)
    if config.borders == "all":
        latex.append(RulePatterns.HLINE)

    latex.extend(
        [
            TablePatterns.END_TABULAR,
            f"{TablePatterns.CAPTION}{{{config.caption}}}",
            f"{TablePatterns.LABEL}{{{TablePatterns.LABEL_PREFIX}{config.label}}}",
            TablePatterns.END_TABLE,
        ]
    )

    text = "\n".join(latex)
    log_build_result("table", grid.shape, text)
    return text


def build_bmatrix(grid: CellGrid, config: LayoutConfig) -> str:
    """
    Generate a display-math bmatrix.

    Only the number format settings and nan_string apply; labels, caption,
    borders and rules are ignored.

    Args:
        grid: Data cells
        config: Layout settings

    Returns:
        LaTeX source, lines joined by "\\n"
    """
    latex = [MatrixPatterns.BEGIN_BMATRIX]
    latex.extend(_join_row(row) for row in _format_rows(grid, config))
    latex.append(MatrixPatterns.END_BMATRIX)

    text = "\n".join(latex)
    log_build_result("bmatrix", grid.shape, text)
    return text


class LatexTable:
    """
    Data plus settings, with the most recently generated LaTeX kept in `text`.

    Example:
        >>> table = LatexTable(np.eye(2), borders="none", data_precision=0,
        ...                    data_format="fixedPoint")
        >>> print(table.make_table())
    """

    def __init__(self, data: Any = None, config: Optional[LayoutConfig] = None, **settings: Any):
        """
        Args:
            data: numpy array, pandas DataFrame or sympy matrix
            config: Settings to start from (copied, never modified; default: LayoutConfig())
            **settings: LayoutConfig fields to override
        """
        self.data = data
        self.config = dataclasses.replace(config) if config is not None else LayoutConfig()
        if settings:
            self.config.update(**settings)
        self.text = ""

    def __repr__(self) -> str:
        shape = getattr(self.data, "shape", None)
        return f"LatexTable(data={type(self.data).__name__}{list(shape) if shape else ''}, config={self.config!r})"

    def _cell_grid(self) -> CellGrid:
        if self.data is None:
            raise ValueError("No data to format. Set LatexTable.data first.")
        grid, self.config = to_cell_grid(self.data, self.config)
        return grid

    def make_table(self) -> str:
        """Generate table LaTeX, store it in `text` and return it."""
        text = build_table(self._cell_grid(), self.config)
        self.text = text
        return text

    def make_bmatrix(self) -> str:
        """Generate bmatrix LaTeX, store it in `text` and return it."""
        text = build_bmatrix(self._cell_grid(), self.config)
        self.text = text
        return text

    def preview(self, **kwargs: Any):
        """
        Render the last generated LaTeX to an image.

        Keyword arguments are passed to rendering.preview.render_preview.

        Returns:
            PreviewResult with the produced artifact paths
        """
        if not self.text:
            raise ValueError("Nothing to preview. Call make_table() or make_bmatrix() first.")

        from latextable.contexts.rendering.preview import render_preview

        _log_debug("Handing generated LaTeX to the preview pipeline")
        return render_preview(self.text, **kwargs)
