"""
Default values and closed option sets for table settings.

Shared by layout_config.py (field defaults and validation) and the CLI
(option help and choices).
"""

from typing import Any, Dict

BORDER_STYLES = ("none", "single", "all")

COLUMN_ALIGNMENTS = ("l", "c", "r")

# Long alignment names accepted on input, stored as the LaTeX letter
ALIGNMENT_ALIASES = {
    "left": "l",
    "center": "c",
    "right": "r",
}

PLACEMENTS = ("h", "t", "p", "b", "H", "!", "")

DEFAULT_SETTINGS: Dict[str, Any] = {
    "data_format": "compact",
    "data_precision": 3,
    "caption": "MyTableCaption",
    "label": "MyTableLabel",
    "borders": "single",
    "column_alignment": "c",
    "booktabs": False,
    "nan_string": "-",
    "placement": "h",
}

