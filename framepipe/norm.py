"""Pixel normalisation settings applied before inference."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Sequence

import numpy as np


class NormType(IntEnum):
    NONE = 0
    MEAN_STD = 1
    ALPHA_BETA = 2


class ChannelType(IntEnum):
    NONE = 0
    SWAP_RB = 1


def _triple(values: Sequence[float], what: str) -> tuple[float, float, float]:
    items = tuple(float(v) for v in values)
    if len(items) != 3:
        raise ValueError(f"{what} needs exactly 3 values, got {len(items)}")
    return items  # type: ignore[return-value]


@dataclass(frozen=True)
class Norm:
    """How to turn raw pixel values into network input values."""

    mean: tuple[float, float, float] = (0.0, 0.0, 0.0)
    std: tuple[float, float, float] = (1.0, 1.0, 1.0)
    alpha: float = 1.0
    beta: float = 0.0
    type: NormType = NormType.NONE
    channel_type: ChannelType = ChannelType.NONE

    def apply(self, values) -> np.ndarray:
        """Normalise an array whose last axis holds the 3 colour channels."""
        arr = np.asarray(values, dtype=np.float32)
        needs_channels = (
            self.channel_type is ChannelType.SWAP_RB or self.type is NormType.MEAN_STD
        )
        if needs_channels and (arr.ndim == 0 or arr.shape[-1] != 3):
            raise ValueError("values must have 3 channels on the last axis")
        if self.channel_type is ChannelType.SWAP_RB:
            arr = arr[..., ::-1]
        if self.type is NormType.MEAN_STD:
            mean = np.asarray(self.mean, dtype=np.float32)
            std = np.asarray(self.std, dtype=np.float32)
            return (arr * np.float32(self.alpha) - mean) / std
        if self.type is NormType.ALPHA_BETA:
            return arr * np.float32(self.alpha) + np.float32(self.beta)
        return arr.copy()


def mean_std(
    mean: Sequence[float],
    std: Sequence[float],
    alpha: float = 1 / 255.0,
    channel_type: ChannelType = ChannelType.NONE,
) -> Norm:
    """out = (x * alpha - mean) / std"""
    return Norm(
        mean=_triple(mean, "mean"),
        std=_triple(std, "std"),
        alpha=alpha,
        type=NormType.MEAN_STD,
        channel_type=channel_type,
    )


def alpha_beta(
    alpha: float, beta: float = 0.0, channel_type: ChannelType = ChannelType.NONE
) -> Norm:
    """out = x * alpha + beta"""
    return Norm(
        alpha=alpha, beta=beta, type=NormType.ALPHA_BETA, channel_type=channel_type
    )


def no_norm() -> Norm:
    """A normalisation that leaves values unchanged."""
    return Norm()