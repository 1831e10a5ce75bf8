"""Logging configuration for the project.

Control interfaces log through module-level loggers; this module wires
them to the console and, optionally, a log file.
"""

import logging
from pathlib import Path
from typing import Optional

LOG_FILE_NAME = "humanoid_control.log"


def setup_logging(
    log_dir: Optional[Path] = None,
    log_level: int = logging.INFO,
) -> None:
    """Configure logging for the project.

    Args:
        log_dir: Optional directory to save log files
        log_level: Logging level (default: INFO)
    """
    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / LOG_FILE_NAME
    else:
        log_file = None

    log_format = (
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    date_format = "%Y-%m-%d %H:%M:%S"

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file is not None:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt=date_format,
        handlers=handlers,
        force=True,
    )
