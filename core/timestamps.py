"""
core/timestamps.py

Local-time formatting shared by the overlay, snapshot names and the
event log.
"""

from __future__ import annotations

from datetime import datetime

DISPLAY_FORMAT = "%Y-%m-%d %H:%M:%S"
FILENAME_FORMAT = "%Y%m%d_%H%M%S"


def format_display(ts: float) -> str:
    """2024-05-01 13:45:07"""
    return datetime.fromtimestamp(ts).strftime(DISPLAY_FORMAT)


def format_filename(ts: float) -> str:
    """20240501_134507"""
    return datetime.fromtimestamp(ts).strftime(FILENAME_FORMAT)
