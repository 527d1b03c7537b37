"""Analysis node that turns detections into task results such as fence entry."""

from __future__ import annotations

import dataclasses
import logging
from abc import ABC, abstractmethod
from typing import Sequence

from framepipe.config import AnalyzeConfigData
from framepipe.nodes.base import BaseNode
from framepipe.objects import FrameData
from framepipe.polygon import Polygon

log = logging.getLogger(__name__)

Fence = Sequence[tuple[float, float]]

_MIN_BOX_AREA = 1e-6
_INSIDE_RATIO = 0.5


class TaskAnalyzer(ABC):
    """Analyses a batch of frames against a set of fences."""

    @abstractmethod
    def analyze(self, batch_datas: list[FrameData | None], fences: Sequence[Fence]) -> None:
        """Add results to the frames in ``batch_datas`` in place."""


class EnteredAnalyzer(TaskAnalyzer):
    """Marks people whose box lies more than half inside any fence as "entered".

    With no fences every person counts as entered.
    """

    def analyze(self, batch_datas: list[FrameData | None], fences: Sequence[Fence]) -> None:
        fence_polygons = [
            Polygon(coords, f"fence_{i}") for i, coords in enumerate(fences)
        ]
        for frame in batch_datas:
            if frame is None:
                log.warning("Encountered an empty frame in batch.")
                continue
            frame.fences = [list(fence) for fence in fences]
            for detection in frame.pose_results:
                box = detection.box
                if box.class_name != "person":
                    continue
                if fence_polygons and not self._inside_any(box, fence_polygons):
                    continue
                frame.results.append(dataclasses.replace(box, class_name="entered"))

    @staticmethod
    def _inside_any(box, fence_polygons: list[Polygon]) -> bool:
        box_polygon = Polygon(
            [
                (box.left, box.top),
                (box.right, box.top),
                (box.right, box.bottom),
                (box.left, box.bottom),
            ],
            "detection_box",
        )
        box_area = box_polygon.area()
        if box_area < _MIN_BOX_AREA:
            return False
        return any(
            box_polygon.intersection_area(fence) / box_area > _INSIDE_RATIO
            for fence in fence_polygons
        )


class AnalyzeNode(BaseNode):
    """Runs the analyzer named by the config's ``task_name`` on each batch."""

    def __init__(self, name: str, config_data: AnalyzeConfigData) -> None:
        super().__init__(name, config_data)
        self.analyzers: dict[str, TaskAnalyzer] = {"entered": EnteredAnalyzer()}

    def handle_data(self, batch_datas: list[FrameData]) -> None:
        config = self.config_data
        task_name = config.task_name
        analyzer = self.analyzers.get(task_name)
        if analyzer is None:
            log.error("Task name %s not found in analyze map.", task_name)
            return
        analyzer.analyze(batch_datas, config.fences)