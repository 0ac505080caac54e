from __future__ import annotations

from enum import IntEnum

import numpy as np


class NoiseQuality(IntEnum):
    """Interpolation curve used between lattice points."""

    FAST = 0
    STANDARD = 1
    BEST = 2


def s_curve3(t: np.ndarray) -> np.ndarray:
    """Cubic s-curve, 3t^2 - 2t^3."""
    return t * t * (3.0 - 2.0 * t)


def s_curve5(t: np.ndarray) -> np.ndarray:
    """Quintic s-curve, 6t^5 - 15t^4 + 10t^3."""
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def lerp(a: np.ndarray, b: np.ndarray, t: np.ndarray) -> np.ndarray:
    # Exact at both t == 0 and t == 1.
    return (1.0 - t) * a + t * b


def interp_curve(t: np.ndarray, quality: NoiseQuality) -> np.ndarray:
    quality = NoiseQuality(quality)
    if quality is NoiseQuality.FAST:
        return t
    if quality is NoiseQuality.STANDARD:
        return s_curve3(t)
    return s_curve5(t)
