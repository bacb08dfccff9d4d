"""
LaTeX Compilation and Image Conversion

Runs the LaTeX compiler on a preview document and converts the resulting PDF
to PNG with ImageMagick. Each external call is bounded by a timeout and its
combined stdout/stderr is captured for diagnostics.
"""

import os
import re
import shutil
import subprocess
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from dotenv import load_dotenv

from latextable.contexts.rendering.exceptions import (
    ExternalToolFailedError,
    ExternalToolMissingError,
)
from latextable.contexts.rendering.logger import (
    _log_debug,
    _log_info,
    log_compilation_result,
    log_compilation_start,
)
from latextable.utils.pdf_processing import page_count

load_dotenv()

LATEX_COMPILER = os.getenv("LATEX_COMPILER", "pdflatex")
IMAGE_CONVERTER = os.getenv("IMAGE_CONVERTER", "magick")
PREVIEW_DENSITY = int(os.getenv("PREVIEW_DENSITY", "600"))
PREVIEW_TIMEOUT_S = float(os.getenv("PREVIEW_TIMEOUT_S", "120"))

# LaTeX intermediate files created during compilation
LATEX_ARTIFACTS = [".aux", ".log", ".out"]

_ERROR_LINE = re.compile(r"^! (.+)$", re.MULTILINE)
_WARNING_PATTERNS = [
    re.compile(r"LaTeX Warning: (.+)"),
    re.compile(r"Package \w+ Warning: (.+)"),
    re.compile(r"Overfull \\hbox \((.+)\)"),
    re.compile(r"Underfull \\hbox \((.+)\)"),
]


@dataclass
class CompilationResult:
    """
    Result of LaTeX compilation.

    Attributes:
        success: Whether the compiler exited with status 0 and produced a PDF
        returncode: Compiler exit status
        pdf_path: Path to generated PDF (None if missing)
        output: Combined stdout/stderr from the compiler
        errors: Errors parsed from the .log file
        warnings: Warnings parsed from the .log file
        page_count: Number of pages in generated PDF (None if not available)
    """

    success: bool
    returncode: Optional[int] = None
    pdf_path: Optional[Path] = None
    output: str = ""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    page_count: Optional[int] = None


def _parse_latex_log(log_content: str) -> Tuple[List[str], List[str]]:
    """
    Parse LaTeX log file for errors and warnings.

    Args:
        log_content: Content of the .log file

    Returns:
        Tuple of (errors, warnings)
    """
    errors = [match.group(1).strip() for match in _ERROR_LINE.finditer(log_content)]

    warnings = []
    for pattern in _WARNING_PATTERNS:
        warnings.extend(match.group(1).strip() for match in pattern.finditer(log_content))

    return errors, warnings


def require_tool(executable: str, purpose: str) -> str:
    """
    Resolve an executable on PATH.

    Raises:
        ExternalToolMissingError: If the executable cannot be found
    """
    resolved = shutil.which(executable)
    if resolved is None:
        raise ExternalToolMissingError(executable, purpose)
    return resolved


def run_tool(
    cmd: Sequence[str],
    tool: str,
    failure_message: str,
    cwd: Optional[Path] = None,
    timeout: float = PREVIEW_TIMEOUT_S,
) -> subprocess.CompletedProcess:
    """
    Run an external program, capturing stdout and stderr together.

    Args:
        cmd: Command and arguments
        tool: Tool name for error reporting
        failure_message: Message used if the tool cannot complete
        cwd: Working directory
        timeout: Seconds before the process is killed

    Returns:
        CompletedProcess (the caller decides how to treat the exit status)

    Raises:
        ExternalToolMissingError: If the executable disappears between lookup and launch
        ExternalToolFailedError: If the process times out
    """
    _log_debug(f"Running: {' '.join(str(c) for c in cmd)}")
    try:
        return subprocess.run(
            [str(c) for c in cmd],
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            encoding="utf-8",
            errors="replace",  # Replace invalid UTF-8 bytes instead of crashing
            timeout=timeout,
        )
    except FileNotFoundError:
        raise ExternalToolMissingError(tool, failure_message) from None
    except subprocess.TimeoutExpired as e:
        output = e.output if isinstance(e.output, str) else (e.output or b"").decode("utf-8", "replace")
        raise ExternalToolFailedError(
            f"{failure_message} (timed out after {timeout:g}s)", tool=tool, output=output
        ) from e


def tool_version(executable: str, flag: str = "--version") -> Optional[str]:
    """First line of the tool's version output, or None if it is not installed."""
    if shutil.which(executable) is None:
        return None
    try:
        result = run_tool([executable, flag], tool=executable, failure_message="version check", timeout=30)
    except (ExternalToolMissingError, ExternalToolFailedError):
        return None
    lines = result.stdout.strip().splitlines()
    return lines[0] if lines else None


def remove_artifacts(tex_file: Path, output_dir: Path) -> None:
    """
    Remove intermediate LaTeX files.

    Args:
        tex_file: Path to the compiled .tex file
        output_dir: Directory the compiler wrote to
    """
    for ext in LATEX_ARTIFACTS:
        artifact_path = output_dir / f"{tex_file.stem}{ext}"
        if artifact_path.exists():
            artifact_path.unlink()


def compile_latex(
    tex_file: Path,
    output_dir: Optional[Path] = None,
    compiler: str = LATEX_COMPILER,
    keep_artifacts: bool = False,
    timeout: float = PREVIEW_TIMEOUT_S,
    verbose: bool = False,
) -> CompilationResult:
    """
    Compile a LaTeX file to PDF, non-interactively.

    Args:
        tex_file: Path to the .tex file to compile
        output_dir: Directory for the PDF and intermediates (default: tex_file's directory)
        compiler: Compiler executable (default: LATEX_COMPILER env, else pdflatex)
        keep_artifacts: Keep .aux/.log/.out files
        timeout: Seconds before the compiler is killed
        verbose: Log full diagnostics even on success

    Returns:
        CompilationResult with success status and diagnostic information

    Raises:
        FileNotFoundError: If tex_file does not exist
        ExternalToolMissingError: If the compiler is not installed
        ExternalToolFailedError: If the compiler times out
    """
    tex_file = Path(tex_file).resolve()
    if not tex_file.exists():
        raise FileNotFoundError(f"TeX file not found: {tex_file}")
    output_dir = Path(output_dir).resolve() if output_dir is not None else tex_file.parent
    output_dir.mkdir(parents=True, exist_ok=True)

    require_tool(compiler, "LaTeX compilation")

    # Clean previous outputs so a stale PDF is never mistaken for success
    pdf_path = output_dir / f"{tex_file.stem}.pdf"
    for ext in [".pdf"] + LATEX_ARTIFACTS:
        old_file = output_dir / f"{tex_file.stem}{ext}"
        if old_file.exists():
            old_file.unlink()

    log_compilation_start(tex_file, output_dir)
    start_time = time.time()

    cmd = [
        compiler,
        "-interaction=nonstopmode",
        "-file-line-error",
        f"-output-directory={output_dir}",
        tex_file.name,
    ]
    process = run_tool(cmd, tool=compiler, failure_message="LaTeX compilation", cwd=tex_file.parent, timeout=timeout)

    errors: List[str] = []
    warnings: List[str] = []
    log_file = output_dir / f"{tex_file.stem}.log"
    if log_file.exists():
        # pdflatex writes log files in latin-1 encoding
        errors, warnings = _parse_latex_log(log_file.read_text(encoding="latin-1"))

    success = process.returncode == 0 and pdf_path.exists()
    if not success and not pdf_path.exists() and not errors:
        errors.append("PDF file was not generated")

    if not keep_artifacts:
        remove_artifacts(tex_file, output_dir)

    result = CompilationResult(
        success=success,
        returncode=process.returncode,
        pdf_path=pdf_path if pdf_path.exists() else None,
        output=process.stdout or "",
        errors=errors,
        warnings=warnings,
        page_count=page_count(pdf_path) if pdf_path.exists() else None,
    )
    log_compilation_result(result, time.time() - start_time, verbose=verbose)
    return result


def convert_to_png(
    pdf_path: Path,
    png_path: Optional[Path] = None,
    converter: str = IMAGE_CONVERTER,
    density: int = PREVIEW_DENSITY,
    timeout: float = PREVIEW_TIMEOUT_S,
) -> Path:
    """
    Rasterize a PDF to PNG with ImageMagick.

    Args:
        pdf_path: PDF to convert
        png_path: Output image (default: pdf_path with .png suffix)
        converter: Converter executable (default: IMAGE_CONVERTER env, else magick)
        density: Rasterization density in DPI
        timeout: Seconds before the converter is killed

    Returns:
        Path to the PNG

    Raises:
        ExternalToolMissingError: If the converter is not installed
        ExternalToolFailedError: If conversion fails or times out
    """
    pdf_path = Path(pdf_path)
    png_path = Path(png_path) if png_path is not None else pdf_path.with_suffix(".png")

    require_tool(converter, "PNG conversion")

    if png_path.exists():
        png_path.unlink()

    _log_info(f"Converting {pdf_path.name} to PNG at {density} dpi")
    cmd = [converter, "-density", str(density), str(pdf_path), "+profile", "icc", str(png_path)]
    process = run_tool(cmd, tool=converter, failure_message="Conversion to PNG", timeout=timeout)

    if process.returncode != 0:
        raise ExternalToolFailedError(
            "Conversion to PNG failed",
            tool=converter,
            returncode=process.returncode,
            output=process.stdout or "",
        )
    if not png_path.exists():
        raise ExternalToolFailedError(
            f"Conversion reported success but {png_path.name} was not written",
            tool=converter,
            returncode=process.returncode,
            output=process.stdout or "",
        )

    _log_debug(f"  PNG: {png_path}")
    return png_path
