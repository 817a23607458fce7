"""
evidence/snapshots.py

Writes still images of frames where motion fired a snapshot.

File names: <directory>/motion_<YYYYMMDD_HHMMSS>.png, local time of the
fire timestamp. The snapshot throttle guarantees at most one fire per
second, so names do not collide within a run.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

import cv2

from core.errors import SnapshotDirectoryError
from core.interfaces import SnapshotSink
from core.timestamps import format_filename
from schemas import Frame

logger = logging.getLogger(__name__)


def snapshot_path(directory: Union[str, Path], fired_at: float) -> Path:
    return Path(directory) / f"motion_{format_filename(fired_at)}.png"


class SnapshotWriter(SnapshotSink):
    """
    Snapshot sink backed by cv2.imwrite.

    The directory is created up front; failing to create it is fatal
    (SnapshotDirectoryError) because the run was asked to keep evidence.
    """

    def __init__(self, directory: Union[str, Path] = "snapshots") -> None:
        self.directory = Path(directory)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise SnapshotDirectoryError(self.directory, str(e)) from e

        logger.info("Saving snapshots to %s", self.directory)

    def save(self, frame: Frame, fired_at: float) -> Optional[Path]:
        path = snapshot_path(self.directory, fired_at)
        ok = cv2.imwrite(str(path), frame.image)
        if not ok:
            logger.warning("cv2.imwrite failed for %s", path)
            return None
        return path
