"""A single tracked object, its box and its Kalman state."""

from __future__ import annotations

import itertools
from enum import IntEnum
from typing import Iterable, Sequence

import numpy as np

from framepipe.tracking.kalman import KalmanFilter

_id_counter = itertools.count(1)


def _next_id() -> int:
    """Next track id, shared by every track in the process."""
    return next(_id_counter)


class TrackState(IntEnum):
    NEW = 0
    TRACKED = 1
    LOST = 2
    REMOVED = 3


class STrack:
    """A track built from a detection box in (top, left, width, height) form."""

    def __init__(self, tlwh: Sequence[float], score: float) -> None:
        self._tlwh = [float(v) for v in tlwh]
        if len(self._tlwh) != 4:
            raise ValueError("tlwh needs exactly 4 values")
        self.is_activated = False
        self.track_id = 0
        self.state = TrackState.NEW
        self.mean: np.ndarray | None = None
        self.covariance: np.ndarray | None = None
        self.tlwh: list[float] = list(self._tlwh)
        self.tlbr: list[float] = []
        self._refresh()
        self.frame_id = 0
        self.tracklet_len = 0
        self.score = float(score)
        self.start_frame = 0
        self.kalman_filter = KalmanFilter()

    @staticmethod
    def tlbr_to_tlwh(tlbr: Sequence[float]) -> list[float]:
        """(x1, y1, x2, y2) to (x, y, width, height)."""
        x1, y1, x2, y2 = (float(v) for v in tlbr)
        return [x1, y1, x2 - x1, y2 - y1]

    @staticmethod
    def tlwh_to_xyah(tlwh: Sequence[float]) -> list[float]:
        """(x, y, width, height) to (centre x, centre y, aspect w/h, height)."""
        x, y, w, h = (float(v) for v in tlwh)
        return [x + w / 2, y + h / 2, w / h, h]

    @staticmethod
    def multi_predict(stracks: Iterable["STrack"], kalman_filter: KalmanFilter) -> None:
        """Advance every track by one step; tracks not being tracked lose height velocity."""
        for track in stracks:
            mean = track.mean
            if track.state != TrackState.TRACKED:
                mean = np.array(mean, dtype=np.float64)
                mean[7] = 0.0
            track.mean, track.covariance = kalman_filter.predict(mean, track.covariance)
            track._refresh()

    def _refresh(self) -> None:
        """Recompute ``tlwh`` and ``tlbr`` from the detection or the Kalman mean."""
        if self.state == TrackState.NEW or self.mean is None:
            self.tlwh = list(self._tlwh)
        else:
            cx, cy, aspect, h = (float(v) for v in self.mean[:4])
            w = aspect * h
            self.tlwh = [cx - w / 2, cy - h / 2, w, h]
        x, y, w, h = self.tlwh
        self.tlbr = [x, y, x + w, y + h]

    def to_xyah(self) -> list[float]:
        return self.tlwh_to_xyah(self.tlwh)

    def mark_lost(self) -> None:
        self.state = TrackState.LOST

    def mark_removed(self) -> None:
        self.state = TrackState.REMOVED

    def end_frame(self) -> int:
        return self.frame_id

    def activate(self, kalman_filter: KalmanFilter, frame_id: int) -> None:
        """Start a new track; it is confirmed at once only on the first frame."""
        self.kalman_filter = kalman_filter
        self.track_id = _next_id()
        self.mean, self.covariance = kalman_filter.initiate(self.tlwh_to_xyah(self._tlwh))
        self._refresh()
        self.tracklet_len = 0
        self.state = TrackState.TRACKED
        if frame_id == 1:
            self.is_activated = True
        self.frame_id = frame_id
        self.start_frame = frame_id

    def re_activate(self, new_track: "STrack", frame_id: int, new_id: bool = False) -> None:
        """Resume a lost track with a new detection."""
        self.mean, self.covariance = self.kalman_filter.update(
            self.mean, self.covariance, self.tlwh_to_xyah(new_track.tlwh)
        )
        self._refresh()
        self.tracklet_len = 0
        self.state = TrackState.TRACKED
        self.is_activated = True
        self.frame_id = frame_id
        self.score = new_track.score
        if new_id:
            self.track_id = _next_id()

    def update(self, new_track: "STrack", frame_id: int) -> None:
        """Correct a tracked track with a matched detection."""
        self.frame_id = frame_id
        self.tracklet_len += 1
        self.mean, self.covariance = self.kalman_filter.update(
            self.mean, self.covariance, self.tlwh_to_xyah(new_track.tlwh)
        )
        self._refresh()
        self.state = TrackState.TRACKED
        self.is_activated = True
        self.score = new_track.score

    def __repr__(self) -> str:
        return (
            f"STrack(id={self.track_id}, state={self.state.name}, "
            f"tlwh={[round(v, 2) for v in self.tlwh]}, score={self.score:.3f})"
        )