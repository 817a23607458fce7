from __future__ import annotations

import logging

import cv2
import numpy as np

from schemas import Frame

logger = logging.getLogger(__name__)


class Preprocessor:
    """
    Turns raw frames into what the background model consumes.

    Two steps, kept separate because the scaled colour frame is also what
    gets displayed, saved as a snapshot and used to resolve the ROI:

        scaled = pre.scale(frame)          # every frame read
        gray   = pre.to_intensity(scaled)  # processed frames only

    kernel_size is expected to be odd already (see
    core.config.normalize_kernel_size); it is not re-checked per frame.
    """

    def __init__(self, resize_factor: float = 1.0, kernel_size: int = 21) -> None:
        self.resize_factor = float(resize_factor)
        self.kernel_size = int(kernel_size)

    def scale(self, frame: Frame) -> Frame:
        """Downscale by resize_factor; identity when the factor is 1."""
        if not 0.0 < self.resize_factor < 1.0:
            return frame

        resized = cv2.resize(
            frame.image,
            None,
            fx=self.resize_factor,
            fy=self.resize_factor,
            interpolation=cv2.INTER_LINEAR,
        )
        return frame.with_image(resized)

    def to_intensity(self, frame: Frame) -> np.ndarray:
        """Single-channel intensity image, Gaussian-smoothed."""
        img = frame.image
        if img.ndim == 3 and img.shape[2] == 3:
            gray = cv2.cvtColor(img, cv2.COLOR_BGR2GRAY)
        elif img.ndim == 3 and img.shape[2] == 4:
            gray = cv2.cvtColor(img, cv2.COLOR_BGRA2GRAY)
        elif img.ndim == 3:
            gray = img[:, :, 0]
        else:
            gray = img

        k = self.kernel_size
        return cv2.GaussianBlur(gray, (k, k), 0)
