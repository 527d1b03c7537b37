"""Detection results and the per-frame record that carries them through a pipeline."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

import numpy as np

Point = tuple[float, float]
Fence = list[tuple[float, float]]

# Corner offsets as fractions of (width, height): top-left, top-right,
# bottom-right, bottom-left before rotation.
_CORNERS = ((-0.5, -0.5), (0.5, -0.5), (0.5, 0.5), (-0.5, 0.5))


@dataclass
class OBBox:
    """An oriented bounding box given by centre, size and rotation in radians."""

    cx: float = 0.0
    cy: float = 0.0
    width: float = 0.0
    height: float = 0.0
    angle: float = 0.0
    score: float = 0.0
    class_id: int = -1
    class_name: str = ""

    def point(self, index: int) -> Point:
        """Corner ``index`` (0 to 3, wrapping) rotated about the centre.

        A negative index that is not a multiple of 4 yields the centre.
        """
        remainder = math.fmod(index, 4)
        if remainder < 0:
            return (self.cx, self.cy)
        fx, fy = _CORNERS[int(remainder)]
        dx = fx * self.width
        dy = fy * self.height
        cosa = math.cos(self.angle)
        sina = math.sin(self.angle)
        return (
            self.cx + dx * cosa - dy * sina,
            self.cy + dx * sina + dy * cosa,
        )

    def _corners(self) -> list[Point]:
        return [self.point(i) for i in range(4)]

    def left_top(self) -> Point:
        """Smallest x and y over the four corners."""
        corners = self._corners()
        return (min(x for x, _ in corners), min(y for _, y in corners))

    def right_bottom(self) -> Point:
        """Largest x and y over the four corners."""
        corners = self._corners()
        return (max(x for x, _ in corners), max(y for _, y in corners))


@dataclass
class Box:
    """An axis-aligned box in image coordinates."""

    left: float = 0.0
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0
    score: float = 0.0
    class_id: int = -1
    class_name: str = ""

    def width(self) -> float:
        return self.right - self.left

    def height(self) -> float:
        return self.bottom - self.top

    def get_rect(self) -> tuple[int, int, int, int]:
        """Integer ``(x, y, width, height)`` with coordinates truncated toward zero."""
        x1, y1 = int(self.left), int(self.top)
        x2, y2 = int(self.right), int(self.bottom)
        x, y = min(x1, x2), min(y1, y2)
        return (x, y, max(x1, x2) - x, max(y1, y2) - y)


@dataclass
class KeyPoint:
    x: float = 0.0
    y: float = 0.0
    score: float = 0.0

    def to_point(self) -> tuple[int, int]:
        """Integer pixel position, truncated toward zero."""
        return (int(self.x), int(self.y))


@dataclass
class PoseInstance:
    box: Box = field(default_factory=Box)
    keypoints: list[KeyPoint] = field(default_factory=list)


class SegmentMap:
    """A single-channel mask of ``height`` rows by ``width`` columns."""

    def __init__(self, width: int, height: int) -> None:
        if width < 0 or height < 0:
            raise ValueError(f"mask size must be non-negative, got {width}x{height}")
        self.width = width
        self.height = height
        self.data = np.zeros((height, width), dtype=np.uint8)

    def __repr__(self) -> str:
        return f"SegmentMap(width={self.width}, height={self.height})"


@dataclass
class SegmentationInstance:
    box: Box = field(default_factory=Box)
    seg: SegmentMap | None = None


@dataclass
class TrackingInstance:
    box: Box = field(default_factory=Box)
    track_id: int = -1


@dataclass
class FrameData:
    """One frame and every result attached to it along the pipeline."""

    pipeline_id: str = ""
    timestamp: int = 0  # milliseconds
    image: Any = None
    osd_image: Any = None
    width: int = 0
    height: int = 0
    source: str = ""
    fps: int = 0

    detection_results: list[Box] = field(default_factory=list)
    detection_obb_results: list[OBBox] = field(default_factory=list)
    pose_results: list[PoseInstance] = field(default_factory=list)
    segmentation_results: list[SegmentationInstance] = field(default_factory=list)
    tracking_results: list[TrackingInstance] = field(default_factory=list)

    fences: list[Fence] = field(default_factory=list)
    results: list[Box] = field(default_factory=list)