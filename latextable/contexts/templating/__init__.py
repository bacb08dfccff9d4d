"""
Templating Context

Responsibilities:
- Selects per-cell number formats (mode + precision, with broadcasting)
- Converts numpy arrays, pandas DataFrames and sympy matrices into cell grids
- Assembles LaTeX `table`/`tabular` and `bmatrix` source
- Validates layout settings and applies YAML presets

Owns: cell formatting, LaTeX assembly, layout settings
Never: Invokes external programs
"""

from latextable.contexts.templating.cells import (
    CellGrid,
    NumberCell,
    SymbolicCell,
    TextCell,
    format_cell,
    to_cell_grid,
)
from latextable.contexts.templating.config_resolver import apply_presets, load_table_presets
from latextable.contexts.templating.data_format import (
    DataFormat,
    broadcast_to_shape,
    format_grid,
    to_format,
)
from latextable.contexts.templating.latex_table import LatexTable, build_bmatrix, build_table
from latextable.contexts.templating.layout_config import LayoutConfig

__all__ = [
    # Format selection
    "DataFormat",
    "to_format",
    "broadcast_to_shape",
    "format_grid",
    # Cells
    "CellGrid",
    "NumberCell",
    "TextCell",
    "SymbolicCell",
    "format_cell",
    "to_cell_grid",
    # Assembly
    "build_table",
    "build_bmatrix",
    "LatexTable",
    # Settings
    "LayoutConfig",
    "apply_presets",
    "load_table_presets",
]
