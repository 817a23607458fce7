"""
schemas/__init__.py
Central exports for lightweight data structures used across motionwatch.

We keep each schema in its own module (frame, region, motion_verdict)
and re-export them here for convenience:

    from schemas import Frame, Rect, Region, MotionVerdict

This file should remain VERY lightweight (no OpenCV imports or model code).
"""

from .frame import Frame
from .region import Rect, Region
from .motion_verdict import MotionVerdict

__all__ = [
    "Frame",
    "Rect",
    "Region",
    "MotionVerdict",
]
