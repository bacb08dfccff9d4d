#!/usr/bin/env python3
"""
LaTeX Table CLI

Generates LaTeX tables and bmatrices from CSV or .npy files and renders previews.

Commands:
    table    - Print a table/tabular environment
    bmatrix  - Print a display-math bmatrix
    preview  - Render a table or bmatrix to PNG (PDF if ImageMagick is missing)
    presets  - List available presets

Examples:\n

    latex_table.py table results.csv --index-col 0 --booktabs     # Labeled table

    latex_table.py table data.npy -f fixedPoint -p 2 -b all       # Fully boxed table

    latex_table.py table data.csv --preset style_booktabs          # Apply a preset

    latex_table.py bmatrix data.npy -p 0 -f fixedPoint             # Integer matrix

    latex_table.py preview data.npy --bmatrix --open               # Render and open
"""

from pathlib import Path
from typing import List, Optional

import numpy as np
import pandas as pd
import typer
from typing_extensions import Annotated

from latextable import LatexTable, LayoutConfig
from latextable.contexts.rendering import render_preview
from latextable.contexts.rendering.exceptions import (
    ExternalToolFailedError,
    ExternalToolMissingError,
    PreviewTemplateError,
)
from latextable.contexts.templating import apply_presets, load_table_presets
from latextable.contexts.templating.exceptions import (
    InvalidConfigError,
    InvalidPrecisionError,
    ShapeMismatchError,
    UnsupportedDataTypeError,
)

GENERATION_ERRORS = (
    UnsupportedDataTypeError,
    ShapeMismatchError,
    InvalidPrecisionError,
    InvalidConfigError,
    ValueError,
)
PREVIEW_ERRORS = (ExternalToolMissingError, ExternalToolFailedError, PreviewTemplateError)


app = typer.Typer(
    help="Generate LaTeX tables and matrices from CSV/.npy data",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def load_data(input_path: Path, index_col: Optional[int] = None):
    """Load a .npy array or a .csv DataFrame."""
    suffix = input_path.suffix.lower()
    if suffix == ".npy":
        return np.load(input_path)
    if suffix == ".csv":
        return pd.read_csv(input_path, index_col=index_col)
    raise typer.BadParameter(f"Unsupported input file '{input_path.name}' (expected .csv or .npy)")


def build_config(presets: Optional[List[str]], **overrides) -> LayoutConfig:
    """Defaults, then presets in order, then explicitly given options."""
    config = LayoutConfig()
    if presets:
        apply_presets(config, presets)
    config.update(**{name: value for name, value in overrides.items() if value is not None})
    return config


def fail(message: str) -> None:
    typer.secho(f"Error: {message}\n", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


InputArg = Annotated[
    Path,
    typer.Argument(help="Input .csv (labeled table) or .npy (numeric matrix)", exists=True, dir_okay=False),
]
IndexColOpt = Annotated[
    Optional[int],
    typer.Option("--index-col", help="CSV column holding row labels"),
]
FormatOpt = Annotated[
    Optional[str],
    typer.Option(
        "--format",
        "-f",
        help="Number format: compact, Compact, fixedPoint, decimal, exponential, Exponential",
    ),
]
PrecisionOpt = Annotated[
    Optional[int],
    typer.Option("--precision", "-p", help="Digits of precision"),
]
NanOpt = Annotated[
    Optional[str],
    typer.Option("--nan", help="Text shown for NaN cells"),
]
PresetOpt = Annotated[
    Optional[List[str]],
    typer.Option("--preset", help="Preset to apply (repeatable, later wins)"),
]


@app.command("table")
def table_command(
    input_path: InputArg,
    index_col: IndexColOpt = None,
    data_format: FormatOpt = None,
    precision: PrecisionOpt = None,
    nan_string: NanOpt = None,
    caption: Annotated[Optional[str], typer.Option("--caption", "-c", help="Table caption")] = None,
    label: Annotated[Optional[str], typer.Option("--label", "-l", help="Table label (table:<label>)")] = None,
    borders: Annotated[
        Optional[str], typer.Option("--borders", "-b", help="Borders: none, single, all")
    ] = None,
    align: Annotated[
        Optional[str], typer.Option("--align", "-a", help="Column alignment: l, c, r")
    ] = None,
    booktabs: Annotated[
        Optional[bool], typer.Option("--booktabs/--no-booktabs", help="Use booktabs rules")
    ] = None,
    placement: Annotated[
        Optional[str], typer.Option("--placement", help="Float placement: h, t, p, b, H, ! or ''")
    ] = None,
    row_labels: Annotated[
        Optional[List[str]], typer.Option("--row-label", help="Row label (repeatable)")
    ] = None,
    column_labels: Annotated[
        Optional[List[str]], typer.Option("--column-label", help="Column label (repeatable)")
    ] = None,
    presets: PresetOpt = None,
    output: Annotated[
        Optional[Path], typer.Option("--output", "-o", help="Write LaTeX to this file")
    ] = None,
):
    """
    Print LaTeX for a table/tabular environment.

    Examples:\n

        $ latex_table.py table results.csv --index-col 0      # Row labels from first column

        $ latex_table.py table data.npy -b none --booktabs    # booktabs rules only
    """
    try:
        config = build_config(
            presets,
            data_format=data_format,
            data_precision=precision,
            nan_string=nan_string,
            caption=caption,
            label=label,
            borders=borders,
            column_alignment=align,
            booktabs=booktabs,
            placement=placement,
            row_labels=row_labels or None,
            column_labels=column_labels or None,
        )
        text = LatexTable(load_data(input_path, index_col), config=config).make_table()
    except GENERATION_ERRORS as e:
        fail(str(e))

    emit(text, output)


@app.command("bmatrix")
def bmatrix_command(
    input_path: InputArg,
    index_col: IndexColOpt = None,
    data_format: FormatOpt = None,
    precision: PrecisionOpt = None,
    nan_string: NanOpt = None,
    presets: PresetOpt = None,
    output: Annotated[
        Optional[Path], typer.Option("--output", "-o", help="Write LaTeX to this file")
    ] = None,
):
    """
    Print LaTeX for a display-math bmatrix.

    Examples:\n

        $ latex_table.py bmatrix data.npy -f fixedPoint -p 0
    """
    try:
        config = build_config(
            presets, data_format=data_format, data_precision=precision, nan_string=nan_string
        )
        text = LatexTable(load_data(input_path, index_col), config=config).make_bmatrix()
    except GENERATION_ERRORS as e:
        fail(str(e))

    emit(text, output)


@app.command("preview")
def preview_command(
    input_path: InputArg,
    index_col: IndexColOpt = None,
    data_format: FormatOpt = None,
    precision: PrecisionOpt = None,
    presets: PresetOpt = None,
    bmatrix: Annotated[bool, typer.Option("--bmatrix", help="Preview a bmatrix instead of a table")] = False,
    output_dir: Annotated[
        Optional[Path], typer.Option("--output-dir", "-d", help="Directory for preview files")
    ] = None,
    open_result: Annotated[
        bool, typer.Option("--open", help="Open the PNG (or PDF) when done")
    ] = False,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show detailed compiler output")
    ] = False,
):
    """
    Render a table or bmatrix to an image.

    Requires a LaTeX distribution; ImageMagick is optional (the PDF is kept
    as the preview when it is missing).

    Examples:\n

        $ latex_table.py preview data.npy --open

        $ latex_table.py preview data.csv --preset style_booktabs -d /tmp/preview
    """
    try:
        config = build_config(presets, data_format=data_format, data_precision=precision)
        table = LatexTable(load_data(input_path, index_col), config=config)
        text = table.make_bmatrix() if bmatrix else table.make_table()
    except GENERATION_ERRORS as e:
        fail(str(e))

    typer.secho(f"\nPreviewing: {input_path.name}", fg=typer.colors.BLUE, bold=True)
    try:
        result = render_preview(text, output_dir=output_dir, verbose=verbose)
    except PREVIEW_ERRORS as e:
        fail(str(e))

    typer.secho("✓ Preview rendered", fg=typer.colors.GREEN, bold=True)
    typer.echo(f"  TeX: {result.tex_path}")
    typer.echo(f"  PDF: {result.pdf_path}")
    if result.image_path is not None:
        typer.echo(f"  PNG: {result.image_path}")
    else:
        typer.secho("  PNG: skipped (ImageMagick not found)", fg=typer.colors.YELLOW)
    if result.log_file:
        typer.echo(f"  Log: {result.log_file}")

    if open_result:
        typer.launch(str(result.artifact))


@app.command("presets")
def presets_command(
    category: Annotated[
        Optional[str],
        typer.Argument(help="Category to filter (e.g., 'style', 'numbers')"),
    ] = None,
):
    """
    List available presets.

    Examples:\n

        $ latex_table.py presets            # All presets

        $ latex_table.py presets numbers    # Only number format presets
    """
    for name, settings in load_table_presets().items():
        if category and not name.startswith(f"{category}_"):
            continue
        values = ", ".join(f"{key}={value}" for key, value in settings.items())
        typer.echo(f"  {name:<20} {values}")


def emit(text: str, output: Optional[Path]) -> None:
    if output is None:
        typer.echo(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text + "\n", encoding="utf-8")
    typer.secho(f"✓ Wrote {output}", fg=typer.colors.GREEN, err=True)


if __name__ == "__main__":
    app()
