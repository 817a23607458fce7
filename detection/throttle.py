from __future__ import annotations

import logging
from typing import Optional

from schemas import MotionVerdict

logger = logging.getLogger(__name__)


class SnapshotThrottle:
    """
    Rate limit for snapshot side effects.

    Fires when the verdict says motion AND at least min_interval seconds
    (wall clock) passed since the last time it fired. Before the first
    fire there is no limit, so the first motion frame always fires.

    Only state: last_fired, changed only when firing.
    """

    def __init__(self, min_interval: float = 1.0) -> None:
        self.min_interval = float(min_interval)
        self._last_fired: Optional[float] = None

    @property
    def last_fired(self) -> Optional[float]:
        return self._last_fired

    def maybe_fire(self, verdict: MotionVerdict, now: float) -> bool:
        if not verdict.detected:
            return False

        if self._last_fired is not None and (now - self._last_fired) < self.min_interval:
            return False

        self._last_fired = float(now)
        logger.debug("Snapshot throttle fired at %.3f", now)
        return True
