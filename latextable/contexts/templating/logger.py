"""
Templating context logger.

Provides logging interface for templating context with automatic [table] prefix.
All templating modules should import from this module.
"""

from typing import Tuple

from loguru import logger

CONTEXT_PREFIX = "[table]"


# Wrapper functions with automatic [table] prefix


def _log_info(message: str) -> None:
    """Log info message with [table] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [table] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [table] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [table] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [table] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level templating-specific logging helpers


def log_grid_conversion(source_type: str, shape: Tuple[int, int], enriched: bool) -> None:
    """Log conversion of a data source into a cell grid."""
    _log_debug(f"Converted {source_type} to {shape[0]}x{shape[1]} cell grid")
    if enriched:
        _log_debug("  Labels filled from source row/column names")


def log_build_result(shape_name: str, grid_shape: Tuple[int, int], text: str) -> None:
    """Log the outcome of a table or bmatrix build."""
    n_lines = text.count("\n") + 1
    _log_info(f"Generated {shape_name} for {grid_shape[0]}x{grid_shape[1]} data ({n_lines} lines)")
