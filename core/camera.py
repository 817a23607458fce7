"""
core/camera.py

Frame capture using OpenCV.

Responsibility:
  - Open a webcam (by index) or a video file (by path).
  - Hand out frames synchronously, one per read() call.
  - Stamp each frame with a capture timestamp.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional, Union

import cv2

from schemas import Frame
from .errors import SourceOpenError
from .interfaces import FrameSource

log = logging.getLogger(__name__)


def open_capture(target: Union[int, str]) -> cv2.VideoCapture:
    """
    Open a camera or a video file.

    - target : camera index (int) or path / URL (str)
    """
    if isinstance(target, int):
        return cv2.VideoCapture(target, cv2.CAP_ANY)
    return cv2.VideoCapture(str(target), cv2.CAP_ANY)


class VideoSource(FrameSource):
    """
    Synchronous frame source: read() blocks until the device or file
    delivers the next frame.

    Usage:
        src = VideoSource(0)            # or VideoSource("clip.mp4")
        frame = src.read()              # None at end-of-stream
        ...
        src.release()
    """

    def __init__(
        self,
        target: Union[int, str] = 0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.target = target
        self._clock = clock
        self._next_id = 0

        self.cap = open_capture(target)
        if not self.cap.isOpened():
            self.cap.release()
            raise SourceOpenError(target)

        log.info("Video source opened: %s", target)

    def read(self) -> Optional[Frame]:
        ok, image = self.cap.read()
        if not ok or image is None or image.size == 0:
            return None

        frame = Frame(frame_id=self._next_id, ts=self._clock(), image=image)
        self._next_id += 1
        return frame

    def release(self) -> None:
        """Release the camera / file."""
        self.cap.release()
