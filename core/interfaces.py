"""
core/interfaces.py

Defines abstract interfaces (contracts) for the collaborators around the
motion-detection core.

We don't put any heavy logic here, only method signatures and docstrings.
Real implementations live in core/camera.py, ui/display.py and
evidence/; no-op versions live in core/dummies.py.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

import numpy as np

from schemas import Frame


class FrameSource(ABC):
    """
    Where frames come from (camera or video file).

    Responsibility:
      - Hand out frames one by one, blocking until one is available.
    """

    @abstractmethod
    def read(self) -> Optional[Frame]:
        """
        Return the next frame, or None at end-of-stream
        (including an empty frame from the device).
        """
        raise NotImplementedError

    def release(self) -> None:
        """Free the underlying device / file handle."""


class Renderer(ABC):
    """
    Display sink.

    Responsibility:
      - Show the (annotated) frame and optionally the binary mask.
      - Report whether the user asked to quit.
    """

    @abstractmethod
    def show(self, image: np.ndarray, mask: Optional[np.ndarray] = None) -> bool:
        """
        Display one frame.

        Returns True if the user requested exit.
        """
        raise NotImplementedError

    def close(self) -> None:
        """Tear down any windows."""


class SnapshotSink(ABC):
    """
    Evidence writer.

    Responsibility:
      - Persist a still image whenever the snapshot throttle fires.
    """

    @abstractmethod
    def save(self, frame: Frame, fired_at: float) -> Optional[Path]:
        """
        Write the frame. Returns the written path, or None if
        nothing was written.
        """
        raise NotImplementedError


class EventSink(ABC):
    """
    Append-only event log.

    Responsibility:
      - Record one line per motion frame and per snapshot.
    """

    @abstractmethod
    def motion(self, ts: float, region_count: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def snapshot(self, ts: float, path: Path) -> None:
        raise NotImplementedError

    def close(self) -> None:
        """Flush and close."""
