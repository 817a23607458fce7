"""
Frame scheduler

Purpose:
  Decide, per incoming frame, whether the full detection pipeline runs
  or the frame is only displayed (frame-skip policy), and fix the
  effective region of interest for the run.

Architecture:
  1. initialize(width, height) is called once, on the first frame,
     before steady-state processing. It resolves the configured ROI
     against the frame bounds and freezes it.
  2. next_action() is called for every frame read (first one included)
     and returns PROCESS or SKIP.

A SKIP is a separate outcome, not a shortened run of the pipeline: the
caller shows the raw frame and an empty mask and touches neither the
background model nor the snapshot throttle.

Frame indices start at 1, so with frame_skip=2 frames 3, 6, 9, ... are
processed.
"""

import logging
from enum import Enum
from typing import Optional

from schemas import Rect

logger = logging.getLogger(__name__)


class FrameAction(str, Enum):
    PROCESS = "process"
    SKIP = "skip"


def should_process(frame_index: int, skip_count: int) -> bool:
    """True iff skip_count == 0 or frame_index is a multiple of skip_count + 1."""
    if skip_count <= 0:
        return True
    return frame_index % (skip_count + 1) == 0


def resolve_roi(configured: Optional[Rect], width: int, height: int) -> Rect:
    """
    Clamp the configured ROI to the frame.

    Falls back to the full frame when the ROI is missing, has a
    non-positive size, or does not overlap the frame at all.
    """
    full = Rect.full(width, height)
    if configured is None or configured.is_empty:
        return full

    clipped = configured.intersect(full)
    if clipped.is_empty:
        return full
    return clipped


class FrameScheduler:
    """
    Frame-skip gate plus owner of the effective ROI.

        scheduler = FrameScheduler(skip_count=2, roi=cfg.detection.roi)
        scheduler.initialize(first.width, first.height)
        if scheduler.next_action() is FrameAction.PROCESS:
            ...
    """

    def __init__(self, skip_count: int = 0, roi: Optional[Rect] = None) -> None:
        self.skip_count = max(0, int(skip_count))
        self.configured_roi = roi
        self.frame_index = 0
        self._roi: Optional[Rect] = None

    @property
    def initialized(self) -> bool:
        return self._roi is not None

    @property
    def roi(self) -> Rect:
        """Effective ROI. Only valid after initialize()."""
        if self._roi is None:
            raise RuntimeError("FrameScheduler.roi used before initialize()")
        return self._roi

    def initialize(self, width: int, height: int) -> Rect:
        """One-time ROI resolution from the first frame's size."""
        if self._roi is not None:
            raise RuntimeError("FrameScheduler already initialized")

        self._roi = resolve_roi(self.configured_roi, width, height)

        if self.configured_roi is not None and self._roi != self.configured_roi:
            logger.warning(
                "ROI %s does not fit a %dx%d frame; using %s",
                self.configured_roi.as_tuple(),
                width,
                height,
                self._roi.as_tuple(),
            )
        logger.info(
            "FrameScheduler initialized | frame=%dx%d roi=%s skip=%d",
            width,
            height,
            self._roi.as_tuple(),
            self.skip_count,
        )
        return self._roi

    def next_action(self) -> FrameAction:
        """Advance the frame counter and decide what to do with this frame."""
        self.frame_index += 1
        if should_process(self.frame_index, self.skip_count):
            return FrameAction.PROCESS
        return FrameAction.SKIP
