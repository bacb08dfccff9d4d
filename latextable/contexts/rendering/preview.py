"""
Preview Orchestration

Injects generated LaTeX into the preview template, compiles it, and converts
the PDF to PNG. A missing compiler is fatal; a missing converter degrades to
returning the PDF alone.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from latextable.contexts.rendering.compiler import (
    IMAGE_CONVERTER,
    LATEX_COMPILER,
    PREVIEW_DENSITY,
    PREVIEW_TIMEOUT_S,
    CompilationResult,
    compile_latex,
    convert_to_png,
    tool_version,
)
from latextable.contexts.rendering.exceptions import (
    ExternalToolFailedError,
    ExternalToolMissingError,
)
from latextable.contexts.rendering.logger import (
    _log_info,
    _log_success,
    _log_warning,
    setup_rendering_logger,
)
from latextable.contexts.rendering.preview_template import write_preview_document
from latextable.utils.timestamp import now

load_dotenv()
PREVIEW_PATH = Path(os.getenv("PREVIEW_PATH", "outs/preview"))
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

PREVIEW_STEM = "preview"


@dataclass
class PreviewResult:
    """
    Artifacts of a preview run.

    Attributes:
        tex_path: Populated preview document
        pdf_path: Compiled PDF
        image_path: Rasterized PNG (None when no converter is installed)
        compilation: Compiler diagnostics
        log_file: Session log file
    """

    tex_path: Path
    pdf_path: Path
    image_path: Optional[Path]
    compilation: CompilationResult
    log_file: Optional[Path] = None

    @property
    def artifact(self) -> Path:
        """The file to show: the PNG if available, otherwise the PDF."""
        return self.image_path if self.image_path is not None else self.pdf_path


def render_preview(
    text: str,
    output_dir: Optional[Path] = None,
    template_path: Optional[Path] = None,
    compiler: str = LATEX_COMPILER,
    converter: str = IMAGE_CONVERTER,
    density: int = PREVIEW_DENSITY,
    timeout: float = PREVIEW_TIMEOUT_S,
    log_dir: Optional[Path] = None,
    verbose: bool = False,
) -> PreviewResult:
    """
    Render generated LaTeX to a PNG preview.

    Steps:
        1. Write the template, populated with text, to <output_dir>/preview.tex
        2. Compile it to preview.pdf
        3. Convert preview.pdf to preview.png (skipped if the converter is missing)

    Args:
        text: LaTeX produced by build_table() or build_bmatrix()
        output_dir: Directory for preview artifacts (default: PREVIEW_PATH env, else outs/preview)
        template_path: Preview template (default: the shipped tex/preview.tex)
        compiler: LaTeX compiler executable
        converter: ImageMagick executable
        density: Rasterization density in DPI
        timeout: Per-tool timeout in seconds
        log_dir: Session log directory (default: LOGS_PATH/preview_<timestamp>)
        verbose: Echo debug output and full compiler output

    Returns:
        PreviewResult with artifact paths

    Raises:
        ExternalToolMissingError: If the compiler is not installed
        ExternalToolFailedError: If compilation or conversion fails
        PreviewTemplateError: If the template has no preview markers
    """
    output_dir = Path(output_dir) if output_dir is not None else PREVIEW_PATH
    if log_dir is None:
        log_dir = LOGS_PATH / f"preview_{now()}"
    log_file = setup_rendering_logger(log_dir, compiler, converter, verbose=verbose)

    compiler_version = tool_version(compiler)
    if compiler_version is None:
        raise ExternalToolMissingError(compiler, "LaTeX compilation")
    _log_info(f"Compiling with distribution: {compiler_version}")

    # Stale images from an earlier run must not survive a failed run
    png_path = output_dir / f"{PREVIEW_STEM}.png"
    if png_path.exists():
        png_path.unlink()

    tex_path = write_preview_document(text, output_dir / f"{PREVIEW_STEM}.tex", template_path)

    compilation = compile_latex(
        tex_path, output_dir, compiler=compiler, timeout=timeout, verbose=verbose
    )
    if not compilation.success:
        raise ExternalToolFailedError(
            "LaTeX compilation failed",
            tool=compiler,
            returncode=compilation.returncode,
            output=compilation.output,
        )

    image_path = None
    converter_version = tool_version(converter, "-version")
    if converter_version is None:
        _log_warning(f"No ImageMagick installation found ('{converter}'). Falling back to the PDF.")
    else:
        _log_info(f"Converting with ImageMagick: {converter_version}")
        image_path = convert_to_png(
            compilation.pdf_path, png_path, converter=converter, density=density, timeout=timeout
        )

    result = PreviewResult(
        tex_path=tex_path,
        pdf_path=compilation.pdf_path,
        image_path=image_path,
        compilation=compilation,
        log_file=log_file,
    )
    _log_success(f"Preview ready: {result.artifact}")
    return result
