"""
Rendering context logger.

Provides logging interface for rendering context with automatic [preview] prefix.
All rendering modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from latextable.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[preview]"


def setup_rendering_logger(log_dir: Path, compiler: str, converter: str, verbose: bool = False) -> Path:
    """
    Setup logger for rendering context.

    Args:
        log_dir: Directory for this preview session
        compiler: LaTeX compiler executable (recorded in provenance)
        converter: Image converter executable (recorded in provenance)
        verbose: Echo DEBUG messages to the console

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="preview",
        log_dir=log_dir,
        extra_provenance={"LaTeX compiler": compiler, "Image converter": converter},
        console_level="DEBUG" if verbose else "INFO",
    )


# Wrapper functions with automatic [preview] prefix


def _log_info(message: str) -> None:
    """Log info message with [preview] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [preview] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [preview] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [preview] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [preview] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level rendering-specific logging helpers


def log_compilation_start(tex_file: Path, working_dir: Path) -> None:
    """Log start of compilation with context."""
    _log_info(f"Compiling {tex_file.name}")
    _log_debug(f"  Source: {tex_file}")
    _log_debug(f"  Output directory: {working_dir}")


def log_compilation_result(
    result,  # CompilationResult
    elapsed_time: float,
    verbose: bool = False,
) -> None:
    """
    Log compilation result with diagnostics.

    Args:
        result: CompilationResult from compile_latex()
        elapsed_time: Time taken to compile
        verbose: Show detailed warnings/errors (default: False)
    """
    if result.success:
        _log_success(f"Compilation succeeded: {len(result.warnings)} warnings ({elapsed_time:.2f}s)")
        if result.pdf_path:
            _log_debug(f"  PDF: {result.pdf_path}")
    else:
        _log_error(f"Compilation failed: {len(result.errors)} errors ({elapsed_time:.2f}s)")
        error_limit = 10 if verbose else 5
        for i, err in enumerate(result.errors[:error_limit], 1):
            _log_error(f"  Error {i}: {err}")
        if len(result.errors) > error_limit:
            _log_error(f"  ... and {len(result.errors) - error_limit} more errors")

    if result.warnings:
        warning_limit = 10 if verbose else 3
        for i, warn in enumerate(result.warnings[:warning_limit], 1):
            _log_debug(f"  Warning {i}: {warn}")
        if len(result.warnings) > warning_limit:
            _log_debug(f"  ... and {len(result.warnings) - warning_limit} more warnings")

    # Raw output bypasses the format template so multi-line output stays intact
    if (verbose or not result.success) and result.output:
        logger.opt(raw=True).debug(
            f"\n{'=' * 80}\nCOMPILER OUTPUT:\n{'=' * 80}\n{result.output}\n"
        )
