from __future__ import annotations

from typing import Iterable

from schemas import MotionVerdict, Region


def decide(regions: Iterable[Region], timestamp: float) -> MotionVerdict:
    """
    The one place where "motion" is defined: at least one region.

    Overlay, snapshots and the event log all read this verdict instead of
    looking at masks themselves.
    """
    regions = tuple(regions)
    return MotionVerdict(
        detected=len(regions) > 0,
        regions=regions,
        timestamp=float(timestamp),
    )
