from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class RunStats:
    """
    Counters for one run of the detection loop.

    Logged every log_every_frames frames (0 disables the periodic line)
    and once more as a summary when the loop ends.
    """

    log_every_frames: int = 100

    frames_read: int = 0
    frames_processed: int = 0
    frames_skipped: int = 0
    motion_frames: int = 0
    snapshots: int = 0
    event_lines: int = 0

    fps: float = 0.0
    started_at: float = field(default_factory=time.perf_counter)
    _window_start: Optional[float] = field(default=None, init=False, repr=False)
    _window_frames: int = field(default=0, init=False, repr=False)

    def tick(self, now: Optional[float] = None) -> None:
        """Count one frame read and refresh the FPS estimate."""
        now = time.perf_counter() if now is None else now
        self.frames_read += 1

        if self._window_start is None:
            self._window_start = now
            self._window_frames = 0
        self._window_frames += 1

        if self.log_every_frames > 0 and self.frames_read % self.log_every_frames == 0:
            elapsed = now - self._window_start
            if elapsed > 0:
                self.fps = self._window_frames / elapsed
            self._window_start = now
            self._window_frames = 0
            logger.info(
                "FPS=%.1f | frames=%d | processed=%d | skipped=%d | motion=%d | snapshots=%d",
                self.fps,
                self.frames_read,
                self.frames_processed,
                self.frames_skipped,
                self.motion_frames,
                self.snapshots,
            )

    def as_dict(self) -> Dict[str, float]:
        return {
            "frames_read": self.frames_read,
            "frames_processed": self.frames_processed,
            "frames_skipped": self.frames_skipped,
            "motion_frames": self.motion_frames,
            "snapshots": self.snapshots,
            "event_lines": self.event_lines,
            "fps": self.fps,
        }

    def log_summary(self) -> None:
        elapsed = time.perf_counter() - self.started_at
        logger.info(
            "Run finished after %.1fs | frames=%d processed=%d skipped=%d "
            "motion=%d snapshots=%d events=%d",
            elapsed,
            self.frames_read,
            self.frames_processed,
            self.frames_skipped,
            self.motion_frames,
            self.snapshots,
            self.event_lines,
        )
