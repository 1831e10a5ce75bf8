"""YAML configuration loading.

The packaged ``robot_config.yaml`` provides defaults for every key; a user
file only needs to list the values it overrides.
"""

import copy
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "configs" / "robot_config.yaml"


def _read_yaml(path: Path) -> Dict[str, Any]:
    """Read a YAML mapping from disk."""
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping at the top level")
    return data


def merge_config(
    base: Dict[str, Any],
    override: Dict[str, Any],
) -> Dict[str, Any]:
    """Recursively merge ``override`` on top of ``base``.

    Args:
        base: Default configuration
        override: Values taking precedence over ``base``

    Returns:
        New merged dictionary; neither input is modified
    """
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def load_default_config() -> Dict[str, Any]:
    """Load the packaged default robot configuration."""
    return _read_yaml(DEFAULT_CONFIG_PATH)


def load_config(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """Load robot configuration.

    Args:
        path: Optional path to a YAML file with overrides. When omitted the
            packaged defaults are returned.

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If ``path`` does not exist
        ValueError: If the file does not contain a mapping
    """
    config = load_default_config()
    if path is None:
        return config

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    logger.info(f"Loading robot config from {path}")
    return merge_config(config, _read_yaml(path))
