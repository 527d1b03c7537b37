"""Helpers that associate tracks with detections: IoU costs, assignment and list merging."""

from __future__ import annotations

from typing import Protocol, Sequence, TypeVar

from framepipe.tracking.lapjv import lapjv

_DUPLICATE_DISTANCE = 0.15


class _Boxed(Protocol):
    tlbr: Sequence[float]


class _Identified(Protocol):
    track_id: int


class _Aged(Protocol):
    tlbr: Sequence[float]
    frame_id: int
    start_frame: int


T = TypeVar("T", bound=_Identified)
A = TypeVar("A", bound=_Aged)


def ious(
    atlbrs: Sequence[Sequence[float]], btlbrs: Sequence[Sequence[float]]
) -> list[list[float]]:
    """Pairwise IoU of (x1, y1, x2, y2) boxes, counting pixels inclusively.

    Returns an empty list when either side is empty.
    """
    if not atlbrs or not btlbrs:
        return []
    result = [[0.0] * len(btlbrs) for _ in atlbrs]
    for k, b in enumerate(btlbrs):
        bx1, by1, bx2, by2 = (float(v) for v in b[:4])
        box_area = (bx2 - bx1 + 1) * (by2 - by1 + 1)
        for n, a in enumerate(atlbrs):
            ax1, ay1, ax2, ay2 = (float(v) for v in a[:4])
            iw = min(ax2, bx2) - max(ax1, bx1) + 1
            if iw <= 0:
                continue
            ih = min(ay2, by2) - max(ay1, by1) + 1
            if ih <= 0:
                continue
            union = (ax2 - ax1 + 1) * (ay2 - ay1 + 1) + box_area - iw * ih
            result[n][k] = iw * ih / union
    return result


def iou_distance(atracks: Sequence[_Boxed], btracks: Sequence[_Boxed]) -> list[list[float]]:
    """Cost matrix of ``1 - IoU`` between two track lists; empty if either is empty."""
    overlap = ious([t.tlbr for t in atracks], [t.tlbr for t in btracks])
    return [[1.0 - value for value in row] for row in overlap]


def linear_assignment(
    cost_matrix: Sequence[Sequence[float]], num_rows: int, num_cols: int, thresh: float
) -> tuple[list[tuple[int, int]], list[int], list[int]]:
    """Match rows to columns, leaving pairs costing more than ``thresh`` unmatched.

    Returns ``(matches, unmatched_rows, unmatched_cols)``. An empty cost
    matrix leaves all ``num_rows`` rows and ``num_cols`` columns unmatched.
    """
    if not cost_matrix:
        return [], list(range(num_rows)), list(range(num_cols))
    _, rowsol, colsol = lapjv(cost_matrix, extend_cost=True, cost_limit=thresh)
    matches = [(i, j) for i, j in enumerate(rowsol) if j >= 0]
    unmatched_a = [i for i, j in enumerate(rowsol) if j < 0]
    unmatched_b = [j for j, i in enumerate(colsol) if i < 0]
    return matches, unmatched_a, unmatched_b


def joint_stracks(tlista: Sequence[T], tlistb: Sequence[T]) -> list[T]:
    """All of ``tlista`` followed by tracks of ``tlistb`` whose id is not yet present."""
    seen = {t.track_id for t in tlista}
    result = list(tlista)
    for track in tlistb:
        if track.track_id not in seen:
            seen.add(track.track_id)
            result.append(track)
    return result


def sub_stracks(tlista: Sequence[T], tlistb: Sequence[T]) -> list[T]:
    """Tracks of ``tlista`` whose id is absent from ``tlistb``, one per id, ordered by id."""
    by_id: dict[int, T] = {}
    for track in tlista:
        by_id.setdefault(track.track_id, track)
    for track in tlistb:
        by_id.pop(track.track_id, None)
    return [by_id[tid] for tid in sorted(by_id)]


def remove_duplicate_stracks(
    stracksa: Sequence[A], stracksb: Sequence[A]
) -> tuple[list[A], list[A]]:
    """Drop the younger of every pair of nearly identical tracks across the two lists."""
    distances = iou_distance(stracksa, stracksb)
    dupa: set[int] = set()
    dupb: set[int] = set()
    for i, row in enumerate(distances):
        for j, dist in enumerate(row):
            if dist >= _DUPLICATE_DISTANCE:
                continue
            timep = stracksa[i].frame_id - stracksa[i].start_frame
            timeq = stracksb[j].frame_id - stracksb[j].start_frame
            if timep > timeq:
                dupb.add(j)
            else:
                dupa.add(i)
    resa = [t for i, t in enumerate(stracksa) if i not in dupa]
    resb = [t for j, t in enumerate(stracksb) if j not in dupb]
    return resa, resb


def _c_mod(value: int, divisor: int) -> int:
    """Remainder that keeps the sign of ``value``."""
    remainder = abs(value) % divisor
    return remainder if value >= 0 else -remainder


def get_color(idx: int) -> tuple[int, int, int]:
    """A stable colour for a track id."""
    idx += 3
    return (_c_mod(37 * idx, 255), _c_mod(17 * idx, 255), _c_mod(29 * idx, 255))