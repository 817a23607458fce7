from __future__ import annotations

import itertools
import logging
import time
from typing import Callable, Iterator, Optional

import numpy as np

from detection.engine import MotionEngine
from detection.throttle import SnapshotThrottle
from evidence.event_log import EventLog
from evidence.snapshots import SnapshotWriter
from schemas import Frame, MotionVerdict
from ui.display import WindowRenderer
from ui.overlay import draw_overlay

from .camera import VideoSource
from .config import Config
from .dummies import NullEventSink, NullRenderer, NullSnapshotSink
from .interfaces import EventSink, FrameSource, Renderer, SnapshotSink
from .metrics import RunStats
from .scheduler import FrameAction, FrameScheduler

log = logging.getLogger("motionwatch.main")


class MotionMonitor:
    """
    Single-threaded detection loop.

    Pipeline per frame:
        Frame (source) ->
        scale ->
        scheduler gate (PROCESS / SKIP) ->
        MotionEngine (intensity, background model, mask, regions, verdict) ->
        snapshot throttle -> snapshot sink -> event log ->
        overlay -> renderer

    Side effects only happen here, after the verdict. Skipped frames are
    shown raw with an empty mask and never reach the engine or the
    throttle.
    """

    def __init__(
        self,
        cfg: Config,
        renderer: Optional[Renderer] = None,
        snapshots: Optional[SnapshotSink] = None,
        events: Optional[EventSink] = None,
        engine: Optional[MotionEngine] = None,
    ) -> None:
        self.cfg = cfg
        self.engine = engine or MotionEngine(cfg)
        self.preprocessor = self.engine.preprocessor
        self.scheduler = FrameScheduler(
            skip_count=cfg.schedule.frame_skip,
            roi=cfg.detection.roi,
        )
        self.throttle = SnapshotThrottle(min_interval=1.0)

        self.renderer: Renderer = renderer or NullRenderer()
        self.snapshots: SnapshotSink = snapshots or NullSnapshotSink()
        self.events: EventSink = events or NullEventSink()

        self.save_snapshots = cfg.output.save_snapshots
        self.show_mask = cfg.output.show_mask

        self.stats = RunStats(log_every_frames=cfg.logging.stats_every_frames)
        self.stop_requested = False

    def _scaled_frames(self, source: FrameSource) -> Iterator[Frame]:
        while True:
            frame = source.read()
            if frame is None:
                return
            yield self.preprocessor.scale(frame)

    def run(self, source: FrameSource) -> RunStats:
        """
        Process frames until end-of-stream or a user exit request.

        The first frame fixes the effective ROI before any frame is
        processed.
        """
        frames = self._scaled_frames(source)
        first = next(frames, None)
        if first is None:
            log.warning("Video source delivered no frames")
            return self.stats

        self.scheduler.initialize(first.width, first.height)

        try:
            for frame in itertools.chain([first], frames):
                self.step(frame)
                if self.stop_requested:
                    log.info("Exit requested by user")
                    break
            else:
                log.info("End of stream")
        except KeyboardInterrupt:
            log.info("Interrupted; stopping")

        self.stats.log_summary()
        return self.stats

    def step(self, frame: Frame) -> Optional[MotionVerdict]:
        """
        Handle one already-scaled frame.

        Returns the verdict for processed frames, None for skipped ones.
        """
        self.stats.tick()

        if self.scheduler.next_action() is FrameAction.SKIP:
            self.stats.frames_skipped += 1
            empty = np.zeros(frame.image.shape[:2], dtype=np.uint8) if self.show_mask else None
            if self.renderer.show(frame.image, empty):
                self.stop_requested = True
            return None

        roi = self.scheduler.roi
        result = self.engine.detect(frame, roi)
        verdict = result.verdict
        self.stats.frames_processed += 1

        if verdict.detected:
            self.stats.motion_frames += 1

            if self.save_snapshots and self.throttle.maybe_fire(verdict, verdict.timestamp):
                path = self.snapshots.save(frame, verdict.timestamp)
                if path is not None:
                    self.stats.snapshots += 1
                    log.info("Snapshot saved: %s", path)
                    self.events.snapshot(verdict.timestamp, path)
                    self.stats.event_lines += 1

            self.events.motion(verdict.timestamp, verdict.region_count)
            self.stats.event_lines += 1

        display = draw_overlay(frame, verdict, roi)
        if self.renderer.show(display, result.mask if self.show_mask else None):
            self.stop_requested = True

        return verdict


def run(cfg: Config, clock: Callable[[], float] = time.time) -> RunStats:
    """
    Run motionwatch with real collaborators built from cfg.

    Raises SourceOpenError / SnapshotDirectoryError before the loop
    starts. The source, windows and event log are always released.
    """
    source = VideoSource(cfg.source.target, clock=clock)

    events: EventSink = NullEventSink()
    renderer: Renderer = NullRenderer()
    try:
        if cfg.output.event_log:
            events = EventLog(cfg.output.event_log)

        snapshots: SnapshotSink = NullSnapshotSink()
        if cfg.output.save_snapshots:
            snapshots = SnapshotWriter(cfg.output.snapshot_dir)

        if not cfg.output.headless:
            renderer = WindowRenderer(show_mask=cfg.output.show_mask)

        monitor = MotionMonitor(
            cfg,
            renderer=renderer,
            snapshots=snapshots,
            events=events,
        )

        log.info(
            "motionwatch started (source=%s, headless=%s). Press ESC or q to exit.",
            cfg.source.target,
            cfg.output.headless,
        )
        return monitor.run(source)

    finally:
        try:
            source.release()
        except Exception:
            log.exception("Error while releasing video source")
        renderer.close()
        events.close()
        log.info("motionwatch stopped.")
