"""Shared utilities: logging setup, config loading and geometry."""

from humanoid_control.utils.config_loader import load_config, merge_config
from humanoid_control.utils.logging_config import setup_logging

__all__ = [
    "load_config",
    "merge_config",
    "setup_logging",
]
