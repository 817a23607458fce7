from __future__ import annotations

from typing import List

import cv2
import numpy as np

from schemas import Rect, Region


def extract_regions(mask: np.ndarray, min_area: float) -> List[Region]:
    """
    Connected foreground components of a binary mask, as bounding boxes.

    Only outer boundaries are considered (holes are not reported). A
    component is kept when its contour area is >= min_area. The order of
    the returned list carries no meaning.
    """
    if mask is None or mask.size == 0 or not np.any(mask):
        return []

    contours, _ = cv2.findContours(mask, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)

    regions: List[Region] = []
    for contour in contours:
        area = float(cv2.contourArea(contour))
        if area < min_area:
            continue
        x, y, w, h = cv2.boundingRect(contour)
        regions.append(Region(box=Rect(int(x), int(y), int(w), int(h)), area=area))

    return regions
