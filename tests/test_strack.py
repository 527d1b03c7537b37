import numpy as np
import pytest

from framepipe.tracking.kalman import KalmanFilter
from framepipe.tracking.strack import STrack, TrackState

TLBR = [10.0, 20.0, 40.0, 60.0]


def _track(tlbr=TLBR, score=0.9):
    return STrack(STrack.tlbr_to_tlwh(tlbr), score)


def test_tlbr_to_tlwh():
    assert STrack.tlbr_to_tlwh(TLBR) == [10.0, 20.0, 30.0, 40.0]


def test_tlbr_to_tlwh_does_not_modify_input():
    tlbr = list(TLBR)
    STrack.tlbr_to_tlwh(tlbr)
    assert tlbr == TLBR


def test_tlwh_to_xyah_centre_and_height():
    x, y, a, h = STrack.tlwh_to_xyah([10.0, 20.0, 30.0, 40.0])
    assert h == 40.0
    assert a * h == pytest.approx(30.0)
    assert (x - a * h / 2, y - h / 2) == pytest.approx((10.0, 20.0))


def test_new_track_round_trips_box():
    track = _track()
    assert track.state == TrackState.NEW
    assert track.tlbr == pytest.approx(TLBR)
    assert not track.is_activated
    assert track.track_id == 0
    assert track.to_xyah() == STrack.tlwh_to_xyah(track.tlwh)


def test_wrong_box_length_rejected():
    with pytest.raises(ValueError):
        STrack([1.0, 2.0, 3.0], 0.5)


def test_activate_on_first_frame_confirms():
    track = _track()
    track.activate(KalmanFilter(), 1)
    assert track.state == TrackState.TRACKED
    assert track.is_activated
    assert track.frame_id == 1
    assert track.start_frame == 1
    assert track.end_frame() == 1
    assert track.tlbr == pytest.approx(TLBR)
    assert track.mean.shape == (8,)


def test_activate_later_frame_is_unconfirmed():
    track = _track()
    track.activate(KalmanFilter(), 5)
    assert track.state == TrackState.TRACKED
    assert not track.is_activated
    assert track.start_frame == 5


def test_track_ids_increase():
    kf = KalmanFilter()
    first, second = _track(), _track()
    first.activate(kf, 2)
    second.activate(kf, 2)
    assert second.track_id > first.track_id > 0


def test_update_follows_detection():
    kf = KalmanFilter()
    track = _track()
    track.activate(kf, 1)
    detection = _track([12.0, 20.0, 42.0, 60.0], score=0.7)
    track.update(detection, 2)
    assert track.frame_id == 2
    assert track.tracklet_len == 1
    assert track.score == pytest.approx(0.7)
    assert track.state == TrackState.TRACKED
    assert TLBR[0] < track.tlbr[0] <= 12.0


def test_mark_lost_and_removed():
    track = _track()
    track.activate(KalmanFilter(), 1)
    track.mark_lost()
    assert track.state == TrackState.LOST
    track.mark_removed()
    assert track.state == TrackState.REMOVED


def test_re_activate_keeps_or_renews_id():
    kf = KalmanFilter()
    track = _track()
    track.activate(kf, 3)
    track.mark_lost()
    old_id = track.track_id
    track.re_activate(_track(score=0.6), 4)
    assert track.track_id == old_id
    assert track.state == TrackState.TRACKED
    assert track.is_activated
    assert track.tracklet_len == 0
    assert track.score == pytest.approx(0.6)
    track.re_activate(_track(), 5, new_id=True)
    assert track.track_id > old_id


def test_multi_predict_stationary_track_stays_put():
    kf = KalmanFilter()
    track = _track()
    track.activate(kf, 1)
    STrack.multi_predict([track], kf)
    assert track.tlbr == pytest.approx(TLBR)


def test_multi_predict_zeroes_height_velocity_of_lost_tracks():
    kf = KalmanFilter()
    lost = _track()
    lost.activate(kf, 1)
    lost.mean = lost.mean.copy()
    lost.mean[7] = 5.0
    lost.mark_lost()
    tracked = _track()
    tracked.activate(kf, 1)
    tracked.mean = tracked.mean.copy()
    tracked.mean[7] = 5.0
    STrack.multi_predict([lost, tracked], kf)
    assert lost.mean[7] == 0.0
    assert lost.mean[3] == pytest.approx(40.0)
    assert tracked.mean[7] == 5.0
    assert tracked.mean[3] == pytest.approx(45.0)
    assert np.all(np.isfinite(lost.covariance))