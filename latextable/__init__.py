"""
latextable - LaTeX code generation for tables and matrices

Converts numeric arrays, labeled tables and symbolic matrices into LaTeX source
for a `table` float or an amsmath `bmatrix`, and optionally renders the result
to a PNG preview.

Architecture:
- Templating Context: cell formatting and LaTeX assembly
- Rendering Context: preview template injection, compilation and image conversion
"""

__version__ = "0.1.0"

from latextable.contexts.templating import (
    DataFormat,
    LatexTable,
    LayoutConfig,
    build_bmatrix,
    build_table,
    to_cell_grid,
)

__all__ = [
    "DataFormat",
    "LatexTable",
    "LayoutConfig",
    "build_bmatrix",
    "build_table",
    "to_cell_grid",
]
