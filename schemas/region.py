
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Rect:
    """
    Axis-aligned rectangle in frame pixel coordinates.

    (x, y) is the top-left corner; the rectangle covers columns
    [x, x + width) and rows [y, y + height), like cv::Rect.
    """

    x: int
    y: int
    width: int
    height: int

    @classmethod
    def full(cls, width: int, height: int) -> "Rect":
        return cls(0, 0, int(width), int(height))

    @property
    def x2(self) -> int:
        return self.x + self.width

    @property
    def y2(self) -> int:
        return self.y + self.height

    @property
    def area(self) -> int:
        if self.is_empty:
            return 0
        return self.width * self.height

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def intersect(self, other: "Rect") -> "Rect":
        """
        Intersection of two rectangles.

        Returns a zero-sized Rect when they do not overlap.
        """
        x1 = max(self.x, other.x)
        y1 = max(self.y, other.y)
        x2 = min(self.x2, other.x2)
        y2 = min(self.y2, other.y2)
        if x2 <= x1 or y2 <= y1:
            return Rect(0, 0, 0, 0)
        return Rect(x1, y1, x2 - x1, y2 - y1)

    def contains(self, other: "Rect") -> bool:
        return (
            other.x >= self.x
            and other.y >= self.y
            and other.x2 <= self.x2
            and other.y2 <= self.y2
        )

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return self.x, self.y, self.width, self.height


@dataclass(frozen=True)
class Region:
    """
    One connected foreground component, reduced to its bounding box.

    Attributes
    ----------
    box  : Rect
        Minimal axis-aligned rectangle around the component.
    area : float
        Geometric area of the component outline (cv2.contourArea),
        not the area of the box.
    """

    box: Rect
    area: float
