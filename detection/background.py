"""
detection/background.py

Adaptive background estimators.

Both variants wrap an OpenCV BackgroundSubtractor and expose the same
call:

    model = create_background_model(cfg.detection.background)
    likelihood = model.apply(gray)   # uint8, 0..255, also updates the model

There is no separate training phase: every applied frame updates the
statistics. Callers must keep the frame size fixed for the whole run.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

import cv2
import numpy as np

from core.config import BACKGROUND_METHODS, BackgroundConfig
from core.errors import ConfigError

logger = logging.getLogger(__name__)


class BackgroundModel(ABC):
    """
    Stateful foreground-likelihood estimator.

    The OpenCV subtractors flag whole frames as foreground until they have
    enough statistics: one frame for MOG2, several for KNN. While
    frames_seen <= warmup_frames the frame is still learned but an all-zero
    mask is returned. warmup_frames=None uses default_warmup().
    """

    name: str = "base"

    def __init__(self, warmup_frames: Optional[int] = None) -> None:
        self._frames_seen = 0
        self._subtractor = self._create()
        if warmup_frames is None:
            warmup_frames = self.default_warmup()
        self.warmup_frames = int(warmup_frames)

    @abstractmethod
    def _create(self) -> Any:
        """Build the underlying OpenCV subtractor."""
        raise NotImplementedError

    def default_warmup(self) -> int:
        return 1

    @property
    def frames_seen(self) -> int:
        return self._frames_seen

    @property
    def warming_up(self) -> bool:
        return self._frames_seen < self.warmup_frames

    def apply(self, image: np.ndarray) -> np.ndarray:
        """Return the foreground likelihood mask for image and learn from it."""
        mask = self._subtractor.apply(image)
        self._frames_seen += 1

        if self._frames_seen <= self.warmup_frames:
            if self._frames_seen == self.warmup_frames:
                logger.debug("%s background model warmed up", self.name)
            return np.zeros_like(mask)
        return mask


class Mog2BackgroundModel(BackgroundModel):
    """Adaptive Gaussian mixture (cv2.createBackgroundSubtractorMOG2)."""

    name = "mog2"

    def __init__(
        self,
        history: int = 500,
        var_threshold: float = 16.0,
        detect_shadows: bool = True,
        warmup_frames: Optional[int] = None,
    ) -> None:
        self.history = history
        self.var_threshold = var_threshold
        self.detect_shadows = detect_shadows
        super().__init__(warmup_frames=warmup_frames)

    def _create(self) -> Any:
        return cv2.createBackgroundSubtractorMOG2(
            history=self.history,
            varThreshold=self.var_threshold,
            detectShadows=self.detect_shadows,
        )


class KnnBackgroundModel(BackgroundModel):
    """Non-parametric K-nearest-neighbours (cv2.createBackgroundSubtractorKNN)."""

    name = "knn"

    def __init__(
        self,
        history: int = 500,
        dist2_threshold: float = 400.0,
        detect_shadows: bool = True,
        warmup_frames: Optional[int] = None,
    ) -> None:
        self.history = history
        self.dist2_threshold = dist2_threshold
        self.detect_shadows = detect_shadows
        super().__init__(warmup_frames=warmup_frames)

    def _create(self) -> Any:
        return cv2.createBackgroundSubtractorKNN(
            history=self.history,
            dist2Threshold=self.dist2_threshold,
            detectShadows=self.detect_shadows,
        )

    def default_warmup(self) -> int:
        # a pixel needs enough matching samples before it can be background
        return max(1, int(self._subtractor.getNSamples()))


def create_background_model(cfg: BackgroundConfig) -> BackgroundModel:
    """Factory: pick the estimator variant named in cfg.method."""
    method = str(cfg.method).lower()

    if method == "knn":
        model: BackgroundModel = KnnBackgroundModel(
            history=cfg.history,
            dist2_threshold=cfg.dist2_threshold,
            detect_shadows=cfg.detect_shadows,
            warmup_frames=cfg.warmup_frames,
        )
    elif method == "mog2":
        model = Mog2BackgroundModel(
            history=cfg.history,
            var_threshold=cfg.var_threshold,
            detect_shadows=cfg.detect_shadows,
            warmup_frames=cfg.warmup_frames,
        )
    else:
        raise ConfigError(
            f"Unsupported background subtractor: {cfg.method}",
            details={"allowed": list(BACKGROUND_METHODS)},
        )

    logger.info(
        "Background model: %s (history=%d, shadows=%s, warmup=%d)",
        model.name,
        cfg.history,
        cfg.detect_shadows,
        model.warmup_frames,
    )
    return model
