"""Timestamp helpers for naming session directories."""

from datetime import datetime


def now() -> str:
    """Current local time as a sortable, filename-safe string (e.g. "20261018_142530")."""
    return datetime.now().strftime("%Y%m%d_%H%M%S")

