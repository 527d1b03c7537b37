import pytest

from framepipe.tracking.matching import (
    get_color,
    iou_distance,
    ious,
    joint_stracks,
    linear_assignment,
    remove_duplicate_stracks,
    sub_stracks,
)
from framepipe.tracking.strack import STrack


def _track(track_id, tlwh=(0.0, 0.0, 10.0, 10.0), frame_id=0, start_frame=0):
    track = STrack(list(tlwh), 0.9)
    track.track_id = track_id
    track.frame_id = frame_id
    track.start_frame = start_frame
    return track


def test_ious_identical_boxes_is_one():
    result = ious([[0, 0, 9, 9]], [[0, 0, 9, 9]])
    assert result == [[pytest.approx(1.0)]]


def test_ious_disjoint_boxes_is_zero():
    result = ious([[0, 0, 9, 9]], [[100, 100, 120, 120]])
    assert result == [[0.0]]


def test_ious_empty_side_gives_empty():
    assert ious([], [[0, 0, 1, 1]]) == []
    assert ious([[0, 0, 1, 1]], []) == []


def test_ious_is_symmetric_and_bounded():
    a = [[0, 0, 10, 10], [5, 5, 20, 20]]
    b = [[3, 3, 12, 12], [0, 0, 4, 30], [50, 50, 60, 60]]
    ab = ious(a, b)
    ba = ious(b, a)
    assert len(ab) == 2 and all(len(row) == 3 for row in ab)
    for i in range(2):
        for j in range(3):
            assert ab[i][j] == pytest.approx(ba[j][i])
            assert 0.0 <= ab[i][j] <= 1.0


def test_iou_distance_is_one_minus_iou():
    a = [_track(1, (0, 0, 10, 10)), _track(2, (30, 30, 10, 10))]
    b = [_track(3, (2, 2, 10, 10))]
    dist = iou_distance(a, b)
    overlap = ious([t.tlbr for t in a], [t.tlbr for t in b])
    assert len(dist) == 2
    for drow, orow in zip(dist, overlap):
        for d, o in zip(drow, orow):
            assert d == pytest.approx(1.0 - o)
    assert dist[1][0] == pytest.approx(1.0)


def test_iou_distance_empty():
    assert iou_distance([], [_track(1)]) == []


def test_linear_assignment_empty_cost_all_unmatched():
    matches, ua, ub = linear_assignment([], 3, 2, 0.8)
    assert matches == []
    assert ua == [0, 1, 2]
    assert ub == [0, 1]


def test_linear_assignment_picks_cheap_pairs():
    matches, ua, ub = linear_assignment([[0.1, 0.9], [0.9, 0.1]], 2, 2, 0.8)
    assert sorted(matches) == [(0, 0), (1, 1)]
    assert ua == []
    assert ub == []


def test_linear_assignment_rejects_costs_over_threshold():
    matches, ua, ub = linear_assignment([[0.9]], 1, 1, 0.5)
    assert matches == []
    assert ua == [0]
    assert ub == [0]


def test_linear_assignment_rectangular():
    matches, ua, ub = linear_assignment([[0.9, 0.1, 0.9]], 1, 3, 0.8)
    assert matches == [(0, 1)]
    assert ua == []
    assert ub == [0, 2]


def test_joint_stracks_keeps_first_and_dedupes_by_id():
    a = [_track(1), _track(2)]
    b = [_track(2), _track(3), _track(3)]
    result = joint_stracks(a, b)
    assert [t.track_id for t in result] == [1, 2, 3]
    assert result[1] is a[1]


def test_sub_stracks_removes_ids_and_sorts():
    a = [_track(5), _track(2), _track(9), _track(2)]
    b = [_track(9)]
    result = sub_stracks(a, b)
    assert [t.track_id for t in result] == [2, 5]
    assert result[0] is a[1]


def test_remove_duplicate_stracks_drops_younger():
    older = _track(1, (0, 0, 10, 10), frame_id=10, start_frame=1)
    younger = _track(2, (0, 0, 10, 10), frame_id=10, start_frame=8)
    other = _track(3, (100, 100, 10, 10), frame_id=10, start_frame=9)
    resa, resb = remove_duplicate_stracks([older], [younger, other])
    assert resa == [older]
    assert resb == [other]

    resa, resb = remove_duplicate_stracks([younger], [older])
    assert resa == []
    assert resb == [older]


def test_get_color_is_periodic_and_in_range():
    for idx in (0, 7, 100):
        color = get_color(idx)
        assert color == get_color(idx + 255)
        assert all(0 <= c < 255 for c in color)