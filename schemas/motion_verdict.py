
from dataclasses import dataclass
from typing import Tuple

from .region import Region


@dataclass(frozen=True)
class MotionVerdict:
    """
    Result of motion detection for one processed frame.

    Attributes
    ----------
    detected  : bool
        True when at least one region survived the filters.
    regions   : tuple of Region
        Regions found in this frame. Order carries no meaning.
    timestamp : float
        Capture time of the frame the verdict belongs to.

    Produced once per processed frame and consumed right away by the
    side-effect stages (overlay, snapshots, event log). Never stored.
    """

    detected: bool
    regions: Tuple[Region, ...]
    timestamp: float

    @property
    def region_count(self) -> int:
        return len(self.regions)
