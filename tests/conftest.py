"""Shared fixtures: configs, synthetic frames and recording collaborators."""

import logging
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Tuple

import numpy as np
import pytest

from core.config import Config, load_config
from core.interfaces import EventSink, FrameSource, Renderer, SnapshotSink
from detection.background import Mog2BackgroundModel
from schemas import Frame, Rect

FRAME_W = 320
FRAME_H = 240
BACKGROUND_LEVEL = 50
BLOCK_LEVEL = 220
BLOCK_SIZE = 40


def make_image(
    block: Optional[Tuple[int, int]] = None,
    size: int = BLOCK_SIZE,
    width: int = FRAME_W,
    height: int = FRAME_H,
) -> np.ndarray:
    """Uniform grey BGR image, optionally with a bright square at block=(x, y)."""
    img = np.full((height, width, 3), BACKGROUND_LEVEL, dtype=np.uint8)
    if block is not None:
        x, y = block
        img[y:y + size, x:x + size] = BLOCK_LEVEL
    return img


def make_frame(frame_id: int, ts: float, block: Optional[Tuple[int, int]] = None) -> Frame:
    return Frame(frame_id=frame_id, ts=ts, image=make_image(block))


class ListSource(FrameSource):
    """Frame source over a prepared list; None afterwards."""

    def __init__(self, frames: List[Frame]) -> None:
        self._frames = list(frames)
        self.released = False

    def read(self) -> Optional[Frame]:
        if not self._frames:
            return None
        return self._frames.pop(0)

    def release(self) -> None:
        self.released = True


class RecordingRenderer(Renderer):
    def __init__(self, exit_after: Optional[int] = None) -> None:
        self.shown: List[Tuple[np.ndarray, Optional[np.ndarray]]] = []
        self.exit_after = exit_after

    def show(self, image, mask=None) -> bool:
        self.shown.append((image, mask))
        return self.exit_after is not None and len(self.shown) >= self.exit_after


class RecordingSnapshotSink(SnapshotSink):
    def __init__(self) -> None:
        self.saved: List[Tuple[Frame, float]] = []

    def save(self, frame, fired_at) -> Optional[Path]:
        self.saved.append((frame, fired_at))
        return Path("snapshots") / f"motion_{len(self.saved)}.png"


class RecordingEventSink(EventSink):
    def __init__(self) -> None:
        self.lines: List[Tuple[str, float, object]] = []

    def motion(self, ts, region_count) -> None:
        self.lines.append(("motion", ts, region_count))

    def snapshot(self, ts, path) -> None:
        self.lines.append(("snapshot", ts, path))


class CountingBackground(Mog2BackgroundModel):
    """MOG2 model that counts how often it was applied."""

    def __init__(self, **kw) -> None:
        super().__init__(**kw)
        self.calls = 0

    def apply(self, image):
        self.calls += 1
        return super().apply(image)


@pytest.fixture
def logger():
    return logging.getLogger("motionwatch.tests")


@pytest.fixture
def test_config() -> Config:
    """Defaults with snapshots on and no windows."""
    cfg = load_config(None, {"output": {"headless": True, "save_snapshots": True}})
    return cfg


@pytest.fixture
def roi_config(test_config) -> Config:
    return replace(
        test_config,
        detection=replace(test_config.detection, roi=Rect(80, 40, 160, 160)),
    )


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def snapshot_sink():
    return RecordingSnapshotSink()


@pytest.fixture
def event_sink():
    return RecordingEventSink()


class FakeClock:
    """Callable clock advancing by step on every call."""

    def __init__(self, start: float = 1_700_000_000.0, step: float = 0.04) -> None:
        self.now = start
        self.step = step

    def __call__(self) -> float:
        t = self.now
        self.now += self.step
        return t


@pytest.fixture
def fake_clock():
    return FakeClock()
