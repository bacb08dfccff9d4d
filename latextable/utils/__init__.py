"""
Shared utilities for latextable.

Common functionality used across contexts:
- Logger setup with provenance
- PDF inspection
- Timestamps for session directories
"""

from latextable.utils.timestamp import now

__all__ = ["now"]
