"""
Table Layout Configuration

Plain settings bundle consumed by the table and bmatrix builders. Every
assignment (including construction) runs through a per-field validator, so an
invalid option fails at the point it is set rather than during generation.
"""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Callable, Dict, List

import numpy as np
from omegaconf import OmegaConf

from latextable.contexts.templating.data_format import DataFormat, validate_precision
from latextable.contexts.templating.defaults import (
    ALIGNMENT_ALIASES,
    BORDER_STYLES,
    COLUMN_ALIGNMENTS,
    DEFAULT_SETTINGS,
    PLACEMENTS,
)
from latextable.contexts.templating.exceptions import InvalidConfigError


@dataclass
class LayoutConfig:
    """
    Settings for table and bmatrix generation.

    Attributes:
        data_format: Mode name/DataFormat, or a row, column or full grid of them
        data_precision: Non-negative int, or a row, column or full grid of them
        caption: Table caption (verbatim LaTeX)
        label: Table label, emitted as \\label{table:<label>} (verbatim)
        borders: 'none', 'single' or 'all'
        column_alignment: 'l', 'c' or 'r' ('left', 'center', 'right' accepted)
        booktabs: Use \\toprule/\\midrule/\\bottomrule instead of \\hline
        nan_string: Replacement text for NaN cells
        placement: Float placement specifier ('h', 't', 'p', 'b', 'H', '!' or '')
        row_labels: Labels for an extra leading column
        column_labels: Labels for an extra leading row
    """

    data_format: Any = DEFAULT_SETTINGS["data_format"]
    data_precision: Any = DEFAULT_SETTINGS["data_precision"]
    caption: str = DEFAULT_SETTINGS["caption"]
    label: str = DEFAULT_SETTINGS["label"]
    borders: str = DEFAULT_SETTINGS["borders"]
    column_alignment: str = DEFAULT_SETTINGS["column_alignment"]
    booktabs: bool = DEFAULT_SETTINGS["booktabs"]
    nan_string: str = DEFAULT_SETTINGS["nan_string"]
    placement: str = DEFAULT_SETTINGS["placement"]
    row_labels: List[str] = field(default_factory=list)
    column_labels: List[str] = field(default_factory=list)

    def __setattr__(self, name: str, value: Any) -> None:
        validator = _VALIDATORS.get(name)
        if validator is not None:
            value = validator(value)
        super().__setattr__(name, value)

    @property
    def has_row_labels(self) -> bool:
        return len(self.row_labels) > 0

    @property
    def has_column_labels(self) -> bool:
        return len(self.column_labels) > 0

    def update(self, **settings: Any) -> "LayoutConfig":
        """
        Assign several settings at once (validated individually).

        Args:
            **settings: Field name/value pairs

        Returns:
            self, for chaining

        Raises:
            TypeError: If a name is not a LayoutConfig field
        """
        valid = setting_names()
        for name, value in settings.items():
            if name not in valid:
                raise TypeError(f"Unknown setting '{name}'. Valid settings: {sorted(valid)}")
            setattr(self, name, value)
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Plain-value view of the settings (modes as their names)."""
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data["data_format"] = _format_names(self.data_format)
        return data

    @classmethod
    def from_yaml(cls, config_path: Path) -> "LayoutConfig":
        """
        Load settings from a YAML file.

        Args:
            config_path: Path to a YAML mapping of LayoutConfig fields

        Returns:
            Validated LayoutConfig (missing fields keep their defaults)
        """
        settings = OmegaConf.to_container(OmegaConf.load(config_path), resolve=True)
        if not isinstance(settings, dict):
            raise ValueError(f"Config file must contain a mapping: {config_path}")
        return cls().update(**settings)


def setting_names() -> List[str]:
    """Names of all LayoutConfig fields."""
    return [f.name for f in fields(LayoutConfig)]


def _format_names(value: Any) -> Any:
    if isinstance(value, DataFormat):
        return value.value
    return [_format_names(v) for v in value]


def _elementwise(func: Callable[[Any], Any]) -> Callable[[Any], Any]:
    """Apply a scalar validator to a scalar or to every entry of a nested sequence."""

    def validate(value: Any) -> Any:
        if isinstance(value, (str, DataFormat)) or np.ndim(value) == 0:
            return func(value)
        return np.vectorize(func, otypes=[object])(np.array(value, dtype=object)).tolist()

    return validate


def _closed_set(field_name: str, allowed: tuple, aliases: Dict[str, str] = None):
    def validate(value: Any) -> str:
        if value is None:
            value = ""
        if aliases and value in aliases:
            value = aliases[value]
        if value not in allowed:
            raise InvalidConfigError(field_name, value, allowed)
        return value

    return validate


def _labels(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value else []
    return [str(v) for v in value]


_VALIDATORS: Dict[str, Callable[[Any], Any]] = {
    "data_format": _elementwise(DataFormat.parse),
    "data_precision": _elementwise(validate_precision),
    "caption": str,
    "label": str,
    "nan_string": str,
    "borders": _closed_set("borders", BORDER_STYLES),
    "column_alignment": _closed_set("column_alignment", COLUMN_ALIGNMENTS, ALIGNMENT_ALIASES),
    "placement": _closed_set("placement", PLACEMENTS),
    "booktabs": bool,
    "row_labels": _labels,
    "column_labels": _labels,
}
