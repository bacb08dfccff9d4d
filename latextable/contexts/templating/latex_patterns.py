"""
LaTeX Pattern Constants

Centralized LaTeX strings used for table and matrix generation.
Organized into frozen dataclasses by category for immutability and clear grouping.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class TablePatterns:
    """
    Float and tabular environment patterns.

    Used for the header and footer lines of generated tables.
    """
    BEGIN_TABLE: str = r'\begin{table}'
    END_TABLE: str = r'\end{table}'
    BEGIN_TABULAR: str = r'\begin{tabular}'
    END_TABULAR: str = r'\end{tabular}'
    CENTERING: str = r'\centering'
    CAPTION: str = r'\caption'
    LABEL: str = r'\label'
    LABEL_PREFIX: str = 'table:'


@dataclass(frozen=True)
class RulePatterns:
    """
    Horizontal and vertical rule patterns.

    HLINE is used for plain borders, the *RULE entries for booktabs styling.
    """
    HLINE: str = r'\hline'
    TOPRULE: str = r'\toprule'
    MIDRULE: str = r'\midrule'
    BOTTOMRULE: str = r'\bottomrule'
    VERTICAL: str = '|'


@dataclass(frozen=True)
class MatrixPatterns:
    """Display-math bmatrix patterns (amsmath)."""
    BEGIN_BMATRIX: str = r'$$\begin{bmatrix}'
    END_BMATRIX: str = r'\end{bmatrix}$$'


@dataclass(frozen=True)
class CellPatterns:
    """
    Cell and row separators plus special cell tokens.

    INFINITY is the token produced by formatting, INFINITY_MATH its rendered form.
    """
    SEPARATOR: str = ' & '
    ROW_END: str = r' \\'
    INFINITY: str = r'\infty'
    INFINITY_MATH: str = r'$\infty$'
