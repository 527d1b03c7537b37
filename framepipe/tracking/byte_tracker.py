"""Multi-object tracker that associates high and low confidence detections in turn."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from framepipe.tracking.kalman import KalmanFilter
from framepipe.tracking.matching import (
    iou_distance,
    joint_stracks,
    linear_assignment,
    remove_duplicate_stracks,
    sub_stracks,
)
from framepipe.tracking.strack import STrack, TrackState


@dataclass
class TrackedObject:
    """A detection to track: ``rect`` is (x, y, width, height)."""

    rect: tuple[float, float, float, float]
    label: int = 0
    prob: float = 0.0


class ByteTracker:
    """Keeps track identities across frames from per-frame detections."""

    def __init__(self, frame_rate: int = 30, track_buffer: int = 30) -> None:
        self.track_thresh = 0.5
        self.high_thresh = 0.6
        self.match_thresh = 0.8
        self.frame_id = 0
        self.max_time_lost = int(frame_rate / 30.0 * track_buffer)
        self.tracked_stracks: list[STrack] = []
        self.lost_stracks: list[STrack] = []
        self.removed_stracks: list[STrack] = []
        self.kalman_filter = KalmanFilter()

    def _associate(
        self,
        tracks: list[STrack],
        detections: list[STrack],
        thresh: float,
        activated: list[STrack],
        refind: list[STrack],
    ) -> tuple[list[int], list[int]]:
        dists = iou_distance(tracks, detections)
        matches, u_track, u_detection = linear_assignment(
            dists, len(tracks), len(detections), thresh
        )
        for itrack, idet in matches:
            track = tracks[itrack]
            det = detections[idet]
            if track.state == TrackState.TRACKED:
                track.update(det, self.frame_id)
                activated.append(track)
            else:
                track.re_activate(det, self.frame_id, False)
                refind.append(track)
        return u_track, u_detection

    def update(self, objects: Iterable[TrackedObject]) -> list[STrack]:
        """Feed one frame of detections; returns the confirmed tracks."""
        self.frame_id += 1
        activated: list[STrack] = []
        refind: list[STrack] = []
        lost: list[STrack] = []
        removed: list[STrack] = []

        detections: list[STrack] = []
        detections_low: list[STrack] = []
        for obj in objects:
            x, y, w, h = obj.rect
            track = STrack(STrack.tlbr_to_tlwh([x, y, x + w, y + h]), obj.prob)
            if obj.prob >= self.track_thresh:
                detections.append(track)
            else:
                detections_low.append(track)

        unconfirmed = [t for t in self.tracked_stracks if not t.is_activated]
        tracked = [t for t in self.tracked_stracks if t.is_activated]

        # First association, high score detections.
        pool = joint_stracks(tracked, self.lost_stracks)
        STrack.multi_predict(pool, self.kalman_filter)
        u_track, u_detection = self._associate(
            pool, detections, self.match_thresh, activated, refind
        )

        # Second association, low score detections.
        remaining = [detections[i] for i in u_detection]
        r_tracked = [pool[i] for i in u_track if pool[i].state == TrackState.TRACKED]
        u_track, _ = self._associate(r_tracked, detections_low, 0.5, activated, refind)
        for i in u_track:
            track = r_tracked[i]
            if track.state != TrackState.LOST:
                track.mark_lost()
                lost.append(track)

        # Unconfirmed tracks, usually with only their first frame.
        dists = iou_distance(unconfirmed, remaining)
        matches, u_unconfirmed, u_detection = linear_assignment(
            dists, len(unconfirmed), len(remaining), 0.7
        )
        for itrack, idet in matches:
            unconfirmed[itrack].update(remaining[idet], self.frame_id)
            activated.append(unconfirmed[itrack])
        for i in u_unconfirmed:
            track = unconfirmed[i]
            track.mark_removed()
            removed.append(track)

        # New tracks.
        for i in u_detection:
            track = remaining[i]
            if track.score < self.high_thresh:
                continue
            track.activate(self.kalman_filter, self.frame_id)
            activated.append(track)

        # State bookkeeping.
        for track in self.lost_stracks:
            if self.frame_id - track.end_frame() > self.max_time_lost:
                track.mark_removed()
                removed.append(track)

        self.tracked_stracks = [
            t for t in self.tracked_stracks if t.state == TrackState.TRACKED
        ]
        self.tracked_stracks = joint_stracks(self.tracked_stracks, activated)
        self.tracked_stracks = joint_stracks(self.tracked_stracks, refind)

        self.lost_stracks = sub_stracks(self.lost_stracks, self.tracked_stracks)
        self.lost_stracks.extend(lost)
        self.lost_stracks = sub_stracks(self.lost_stracks, self.removed_stracks)
        self.removed_stracks.extend(removed)

        self.tracked_stracks, self.lost_stracks = remove_duplicate_stracks(
            self.tracked_stracks, self.lost_stracks
        )
        return [t for t in self.tracked_stracks if t.is_activated]