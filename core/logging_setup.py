"""
core/logging_setup.py

Central logging configuration.
Writes to console and, optionally, to a diagnostic log file.

This is the program's own diagnostic log. The user-facing motion event
log (evidence/event_log.py) is a separate plain-text file.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
) -> None:
    """
    Initialise root logging for motionwatch.

    Parameters
    ----------
    level : int or str
        Logging level for the root logger (default: INFO). Level names
        such as "DEBUG" (from YAML / CLI) are accepted too.
    log_file : str or Path, optional
        If given, log records are also appended to this file.
        Its parent directory is created when missing.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    if root.handlers:
        for h in list(root.handlers):
            root.removeHandler(h)

    root.setLevel(level)

    fmt = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    )

    ch = logging.StreamHandler()
    ch.setFormatter(fmt)
    root.addHandler(ch)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_path, encoding="utf-8")
        fh.setFormatter(fmt)
        root.addHandler(fh)
