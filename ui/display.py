"""
ui/display.py

OpenCV window renderer.

Opens "Motion Detection" (always) and "Foreground Mask" (only when the
mask view is enabled). ESC or 'q' in either window requests exit.
"""

from __future__ import annotations

import logging
from typing import Optional

import cv2
import numpy as np

from core.interfaces import Renderer

log = logging.getLogger(__name__)

MAIN_WINDOW = "Motion Detection"
MASK_WINDOW = "Foreground Mask"

EXIT_KEYS = (27, ord("q"))


class WindowRenderer(Renderer):
    def __init__(self, show_mask: bool = False) -> None:
        self.show_mask = show_mask

        if self.show_mask:
            cv2.namedWindow(MASK_WINDOW, cv2.WINDOW_NORMAL)
        cv2.namedWindow(MAIN_WINDOW, cv2.WINDOW_NORMAL)

    def show(self, image: np.ndarray, mask: Optional[np.ndarray] = None) -> bool:
        cv2.imshow(MAIN_WINDOW, image)
        if self.show_mask:
            if mask is None:
                mask = np.zeros(image.shape[:2], dtype=np.uint8)
            cv2.imshow(MASK_WINDOW, mask)

        key = cv2.waitKey(1) & 0xFF
        return key in EXIT_KEYS

    def close(self) -> None:
        cv2.destroyAllWindows()
