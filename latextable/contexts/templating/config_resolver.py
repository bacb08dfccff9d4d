"""
Config Preset Resolution for Table Generation

Applies named configuration presets to a LayoutConfig. Presets are composable
and can override each other, allowing flexible combination of rules, alignment
and number formats.

Examples:
    # Apply multiple presets (later overrides earlier)
    >>> apply_presets(config, ["style_booktabs", "numbers_fixed2"])

    # Mix base preset with override
    >>> apply_presets(config, ["style_booktabs", "borders_single"])
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from omegaconf import OmegaConf

from latextable.contexts.templating.layout_config import LayoutConfig
from latextable.contexts.templating.logger import _log_debug

load_dotenv()
TABLE_PRESETS_PATH = Path(
    os.getenv("TABLE_PRESETS_PATH", Path(__file__).parent / "table_presets.yaml")
)


def load_table_presets(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load a presets YAML file and flatten it to a single-level dict.

    Collapses nested structure: style.booktabs -> style_booktabs

    Args:
        config_path: Optional path to presets file (defaults to TABLE_PRESETS_PATH)

    Returns:
        Flattened dict mapping preset names to settings
        Example: {"style_booktabs": {"booktabs": True, "borders": "none"}, ...}
    """
    if config_path is None:
        config_path = TABLE_PRESETS_PATH

    nested = OmegaConf.to_container(OmegaConf.load(config_path), resolve=True)

    flattened = {}
    for category, presets in nested.items():
        for name, settings in presets.items():
            flattened[f"{category}_{name}"] = settings

    return flattened


def apply_presets(
    config: LayoutConfig,
    preset_names: List[str],
    config_path: Optional[Path] = None,
) -> LayoutConfig:
    """
    Apply named presets to a LayoutConfig in place.

    Presets are applied in order, with later presets overriding earlier ones.
    Each value goes through the LayoutConfig validators.

    Args:
        config: Settings to modify
        preset_names: Preset names (e.g., ["style_booktabs", "numbers_fixed2"])
        config_path: Optional presets file (defaults to TABLE_PRESETS_PATH)

    Returns:
        The same config, for chaining

    Raises:
        ValueError: If a preset is not found
        InvalidConfigError: If a preset holds an invalid option value
    """
    presets_dict = load_table_presets(config_path)

    for preset_name in preset_names:
        if preset_name not in presets_dict:
            available = list(presets_dict.keys())
            raise ValueError(f"Preset '{preset_name}' not found. Available presets: {available}")

        _log_debug(f"Applying preset: {preset_name}")
        config.update(**presets_dict[preset_name])

    return config
