"""
ui/overlay.py

Motion overlay.

Responsibilities:
  - draw one outlined rectangle per detected region
  - render the local timestamp in the top-left corner
  - render a "MOTION DETECTED" banner under it when motion is present
  - optionally outline the effective ROI (when it is not the full frame)

Colours are BGR, as everywhere in OpenCV.
"""

from __future__ import annotations

from typing import Optional, Tuple

import cv2
import numpy as np

from core.timestamps import format_display
from schemas import Frame, MotionVerdict, Rect

BOX_COLOR: Tuple[int, int, int] = (0, 255, 0)
TIMESTAMP_COLOR: Tuple[int, int, int] = (255, 255, 255)
BANNER_COLOR: Tuple[int, int, int] = (0, 0, 255)
ROI_COLOR: Tuple[int, int, int] = (255, 200, 0)


def draw_overlay(
    frame: Frame,
    verdict: MotionVerdict,
    roi: Optional[Rect] = None,
) -> np.ndarray:
    """
    Return an annotated copy (BGR) of frame.image; the frame is not touched.

    roi is drawn only when given and smaller than the frame.
    """
    if frame.image is None:
        raise ValueError("Frame.image is None inside draw_overlay")

    img = frame.image.copy()
    if img.ndim == 2:
        img = cv2.cvtColor(img, cv2.COLOR_GRAY2BGR)

    if roi is not None and roi != Rect.full(frame.width, frame.height):
        cv2.rectangle(img, (roi.x, roi.y), (roi.x2 - 1, roi.y2 - 1), ROI_COLOR, 1)

    for region in verdict.regions:
        box = region.box
        cv2.rectangle(img, (box.x, box.y), (box.x2 - 1, box.y2 - 1), BOX_COLOR, 2)

    cv2.putText(
        img,
        format_display(verdict.timestamp),
        (10, 30),
        cv2.FONT_HERSHEY_SIMPLEX,
        0.8,
        TIMESTAMP_COLOR,
        2,
    )

    if verdict.detected:
        cv2.putText(
            img,
            "MOTION DETECTED",
            (10, 60),
            cv2.FONT_HERSHEY_SIMPLEX,
            0.9,
            BANNER_COLOR,
            2,
        )

    return img
