"""
evidence/event_log.py

Append-only, human-readable log of motion events.

Line formats:
    2024-05-01 13:45:07: motion detected in 2 region(s).
    2024-05-01 13:45:07: snapshot saved to snapshots/motion_20240501_134507.png

Failures here never stop detection: if the file cannot be opened (or a
write fails later) a warning is logged and event logging is switched off.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, TextIO, Union

from core.interfaces import EventSink
from core.timestamps import format_display

logger = logging.getLogger(__name__)


class EventLog(EventSink):
    """
    Event sink writing plain text lines to a file (append mode).

    Each line is flushed immediately so the file can be tailed.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self._fh: Optional[TextIO] = None
        self.lines_written = 0

        try:
            self._fh = self.path.open("a", encoding="utf-8")
        except OSError as e:
            logger.warning("Failed to open log file %s (%s); event logging disabled", self.path, e)
            self._fh = None

    @property
    def enabled(self) -> bool:
        return self._fh is not None

    def _write(self, line: str) -> None:
        if self._fh is None:
            return
        try:
            self._fh.write(line + "\n")
            self._fh.flush()
            self.lines_written += 1
        except OSError as e:
            logger.warning("Writing to %s failed (%s); event logging disabled", self.path, e)
            self.close()

    def motion(self, ts: float, region_count: int) -> None:
        self._write(f"{format_display(ts)}: motion detected in {region_count} region(s).")

    def snapshot(self, ts: float, path: Path) -> None:
        self._write(f"{format_display(ts)}: snapshot saved to {path}")

    def close(self) -> None:
        if self._fh is None:
            return
        try:
            self._fh.close()
        except OSError:
            logger.exception("Error while closing event log %s", self.path)
        finally:
            self._fh = None
