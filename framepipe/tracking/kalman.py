"""Constant-velocity Kalman filter over boxes in (x, y, aspect, height) form."""

from __future__ import annotations

from typing import Iterable, Sequence

import numpy as np

# 0.95 quantile of the chi-square distribution with N degrees of freedom,
# indexed by N (index 0 unused).
CHI2INV95 = (
    0.0,
    3.8415,
    5.9915,
    7.8147,
    9.4877,
    11.070,
    12.592,
    14.067,
    15.507,
    16.919,
)

_NDIM = 4
_DT = 1.0


class KalmanFilter:
    """Tracks an 8-dimensional state: box centre, aspect, height and their velocities.

    The filter holds no per-track state; means and covariances are passed in
    and new ones are returned.
    """

    chi2inv95 = CHI2INV95

    def __init__(self) -> None:
        self._motion_mat = np.eye(2 * _NDIM)
        for i in range(_NDIM):
            self._motion_mat[i, _NDIM + i] = _DT
        self._update_mat = np.eye(_NDIM, 2 * _NDIM)
        self._std_weight_position = 1.0 / 20
        self._std_weight_velocity = 1.0 / 160

    def initiate(self, measurement: Sequence[float]) -> tuple[np.ndarray, np.ndarray]:
        """Create a track state from an unassociated (x, y, a, h) measurement."""
        m = np.asarray(measurement, dtype=np.float64).reshape(_NDIM)
        mean = np.concatenate([m, np.zeros(_NDIM)])
        h = m[3]
        std = np.array(
            [
                2 * self._std_weight_position * h,
                2 * self._std_weight_position * h,
                1e-2,
                2 * self._std_weight_position * h,
                10 * self._std_weight_velocity * h,
                10 * self._std_weight_velocity * h,
                1e-5,
                10 * self._std_weight_velocity * h,
            ]
        )
        return mean, np.diag(np.square(std))

    def predict(self, mean, covariance) -> tuple[np.ndarray, np.ndarray]:
        """Advance a state by one time step."""
        mean = np.asarray(mean, dtype=np.float64)
        covariance = np.asarray(covariance, dtype=np.float64)
        h = mean[3]
        std_pos = [
            self._std_weight_position * h,
            self._std_weight_position * h,
            1e-2,
            self._std_weight_position * h,
        ]
        std_vel = [
            self._std_weight_velocity * h,
            self._std_weight_velocity * h,
            1e-5,
            self._std_weight_velocity * h,
        ]
        motion_cov = np.diag(np.square(np.array(std_pos + std_vel)))
        new_mean = self._motion_mat @ mean
        new_cov = self._motion_mat @ covariance @ self._motion_mat.T + motion_cov
        return new_mean, new_cov

    def project(self, mean, covariance) -> tuple[np.ndarray, np.ndarray]:
        """Project a state into measurement space."""
        mean = np.asarray(mean, dtype=np.float64)
        covariance = np.asarray(covariance, dtype=np.float64)
        h = mean[3]
        std = np.array(
            [
                self._std_weight_position * h,
                self._std_weight_position * h,
                1e-1,
                self._std_weight_position * h,
            ]
        )
        projected_mean = self._update_mat @ mean
        projected_cov = (
            self._update_mat @ covariance @ self._update_mat.T + np.diag(np.square(std))
        )
        return projected_mean, projected_cov

    def update(self, mean, covariance, measurement) -> tuple[np.ndarray, np.ndarray]:
        """Correct a state with an associated (x, y, a, h) measurement."""
        mean = np.asarray(mean, dtype=np.float64)
        covariance = np.asarray(covariance, dtype=np.float64)
        measurement = np.asarray(measurement, dtype=np.float64).reshape(_NDIM)
        projected_mean, projected_cov = self.project(mean, covariance)
        b = (covariance @ self._update_mat.T).T
        kalman_gain = np.linalg.solve(projected_cov, b).T
        innovation = measurement - projected_mean
        new_mean = mean + innovation @ kalman_gain.T
        new_cov = covariance - kalman_gain @ projected_cov @ kalman_gain.T
        return new_mean, new_cov

    def gating_distance(
        self,
        mean,
        covariance,
        measurements: Iterable[Sequence[float]],
        only_position: bool = False,
    ) -> np.ndarray:
        """Squared distance between the state and each measurement.

        With ``only_position`` only the box centre (x, y) is compared.
        """
        projected_mean, projected_cov = self.project(mean, covariance)
        d = np.asarray(list(measurements), dtype=np.float64).reshape(-1, _NDIM)
        if only_position:
            projected_mean = projected_mean[:2]
            projected_cov = projected_cov[:2, :2]
            d = d[:, :2]
        d = d - projected_mean
        factor = np.linalg.cholesky(projected_cov)
        # Solve z @ L = d for z, then sum the squares of each row.
        z = np.linalg.solve(factor.T, d.T)
        return np.sum(z * z, axis=0)