"""ByteTrack-style multi-object tracking: Kalman filter, assignment, matching and tracker."""