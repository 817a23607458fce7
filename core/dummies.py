"""
core/dummies.py

No-op implementations of the collaborator interfaces.

These are used when a side effect is switched off (headless run, no
snapshots, no event log) so that the main loop never has to check
whether a collaborator exists.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import numpy as np

from schemas import Frame
from .interfaces import (
    Renderer,
    SnapshotSink,
    EventSink,
)


class NullRenderer(Renderer):
    """
    Renderer that shows nothing and never asks to exit.

    Used for --headless runs (servers, CI, tests).
    """

    def show(self, image: np.ndarray, mask: Optional[np.ndarray] = None) -> bool:
        return False


class NullSnapshotSink(SnapshotSink):
    """
    Snapshot sink that writes nothing.
    """

    def save(self, frame: Frame, fired_at: float) -> Optional[Path]:
        return None


class NullEventSink(EventSink):
    """
    Event sink that drops every line.
    """

    def motion(self, ts: float, region_count: int) -> None:
        return None

    def snapshot(self, ts: float, path: Path) -> None:
        return None
