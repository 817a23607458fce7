from __future__ import annotations

import cv2
import numpy as np

from schemas import Rect


class MaskProcessor:
    """
    Likelihood mask -> clean binary mask (uint8, 0 or 255).

    Steps, in order:
      1. strict threshold: foreground iff likelihood > threshold
      2. erosion  (erode_iterations times, 3x3, skipped when 0)
      3. dilation (dilate_iterations times, 3x3, skipped when 0)
      4. everything outside the ROI forced to 0
    """

    def __init__(
        self,
        threshold: int = 25,
        erode_iterations: int = 0,
        dilate_iterations: int = 2,
    ) -> None:
        self.threshold = int(threshold)
        self.erode_iterations = int(erode_iterations)
        self.dilate_iterations = int(dilate_iterations)

    def binarize(self, likelihood: np.ndarray) -> np.ndarray:
        _, binary = cv2.threshold(likelihood, self.threshold, 255, cv2.THRESH_BINARY)
        return binary

    def morph(self, binary: np.ndarray) -> np.ndarray:
        out = binary
        if self.erode_iterations > 0:
            out = cv2.erode(out, None, iterations=self.erode_iterations)
        if self.dilate_iterations > 0:
            out = cv2.dilate(out, None, iterations=self.dilate_iterations)
        return out

    @staticmethod
    def restrict_to_roi(binary: np.ndarray, roi: Rect) -> np.ndarray:
        """New all-zero mask with only the ROI rectangle copied over."""
        out = np.zeros_like(binary)
        ys = slice(roi.y, roi.y2)
        xs = slice(roi.x, roi.x2)
        out[ys, xs] = binary[ys, xs]
        return out

    def process(self, likelihood: np.ndarray, roi: Rect) -> np.ndarray:
        return self.restrict_to_roi(self.morph(self.binarize(likelihood)), roi)
