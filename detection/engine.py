from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from core.config import Config
from schemas import Frame, MotionVerdict, Rect

from .background import BackgroundModel, create_background_model
from .decision import decide
from .mask import MaskProcessor
from .preprocess import Preprocessor
from .regions import extract_regions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DetectionResult:
    """
    Output of MotionEngine.detect for one frame.

      - verdict : MotionVerdict (the authoritative answer)
      - mask    : cleaned binary mask, for the optional mask view
    """

    verdict: MotionVerdict
    mask: np.ndarray


class MotionEngine:
    """
    Main entry point for per-frame motion detection.

        engine = MotionEngine(cfg)
        result = engine.detect(scaled_frame, roi)

    The frame must already be scaled (Preprocessor.scale) so that it
    lives in the same coordinates as the ROI. No I/O happens here; the
    only state is the background model.
    """

    def __init__(
        self,
        cfg: Optional[Config] = None,
        background: Optional[BackgroundModel] = None,
    ) -> None:
        self.cfg: Config = cfg or Config()
        det = self.cfg.detection

        self.preprocessor = Preprocessor(
            resize_factor=self.cfg.preprocess.resize_factor,
            kernel_size=self.cfg.preprocess.gaussian_kernel,
        )
        self.background: BackgroundModel = background or create_background_model(det.background)
        self.mask_processor = MaskProcessor(
            threshold=det.threshold,
            erode_iterations=det.erode_iterations,
            dilate_iterations=det.dilate_iterations,
        )
        self.min_area = det.min_area

        logger.info(
            "MotionEngine initialised | threshold=%d erode=%d dilate=%d "
            "min_area=%.1f kernel=%d",
            det.threshold,
            det.erode_iterations,
            det.dilate_iterations,
            det.min_area,
            self.cfg.preprocess.gaussian_kernel,
        )

    def detect(self, frame: Frame, roi: Rect) -> DetectionResult:
        gray = self.preprocessor.to_intensity(frame)
        likelihood = self.background.apply(gray)
        mask = self.mask_processor.process(likelihood, roi)
        regions = extract_regions(mask, self.min_area)
        verdict = decide(regions, frame.ts)

        if verdict.detected:
            logger.debug(
                "Frame %d: %d region(s) %s",
                frame.frame_id,
                verdict.region_count,
                [r.box.as_tuple() for r in verdict.regions],
            )

        return DetectionResult(verdict=verdict, mask=mask)
