
from dataclasses import dataclass
from typing import Tuple

import numpy as np


@dataclass(frozen=True, eq=False)
class Frame:
    """
    One video frame coming from a frame source.

    Attributes
    ----------
    frame_id : int
        Incremental counter (0, 1, 2, ...) for this stream, as read.
    ts       : float
        Capture timestamp in seconds (time.time() domain).
    image    : np.ndarray
        Raw BGR image as a NumPy array (H, W, 3) in OpenCV format.
        Single-channel (H, W) images are accepted as well.

    NOTE:
    - Frames are never mutated once handed to a stage. A stage that needs
      different pixels (resize, overlay, ...) builds a new array or a new
      Frame via with_image().
    """

    frame_id: int
    ts: float
    image: np.ndarray

    @property
    def height(self) -> int:
        return int(self.image.shape[0])

    @property
    def width(self) -> int:
        return int(self.image.shape[1])

    @property
    def size(self) -> Tuple[int, int]:
        """(width, height) in pixels."""
        return self.width, self.height

    def with_image(self, image: np.ndarray) -> "Frame":
        """Same frame id and timestamp, different pixels."""
        return Frame(frame_id=self.frame_id, ts=self.ts, image=image)
