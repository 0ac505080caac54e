from __future__ import annotations

from typing import Callable

import numpy as np

from .core import NoiseQuality, interp_curve, lerp
from .vectortable import RANDOM_VECTORS

X_NOISE_GEN = 1619
Y_NOISE_GEN = 31337
Z_NOISE_GEN = 6971
SEED_NOISE_GEN = 1013
SHIFT_NOISE_GEN = 8

# Gradient dot products are scaled into roughly [-1, 1].
GRADIENT_SCALE = 2.12

_MASK31 = 0x7FFFFFFF


def lattice_floor(v: np.ndarray) -> np.ndarray:
    """Lower lattice coordinate of `v`.

    Truncates toward zero for positive input and steps one cell down
    otherwise, so 0.0 lands in cell -1. Valid for |v| < 2**63; larger
    coordinates overflow the int64 lattice index.
    """

    v = np.asarray(v, dtype=np.float64)
    vi = np.trunc(v).astype(np.int64)
    return np.where(v > 0.0, vi, vi - 1)


def _int32(v: int) -> int:
    v = int(v) & 0xFFFFFFFF
    return v - 0x100000000 if v & 0x80000000 else v


def _lattice_sum(
    x: np.ndarray, y: np.ndarray, z: np.ndarray, seed: int
) -> np.ndarray:
    # Only the low 32 bits of the seed reach the hash.
    seed = _int32(seed)
    return (
        X_NOISE_GEN * np.asarray(x, dtype=np.int64)
        + Y_NOISE_GEN * np.asarray(y, dtype=np.int64)
        + Z_NOISE_GEN * np.asarray(z, dtype=np.int64)
        + SEED_NOISE_GEN * seed
    )


def int_hash_3d(
    x: np.ndarray, y: np.ndarray, z: np.ndarray, seed: int = 0
) -> np.ndarray:
    """Integer hash of a lattice point, in [0, 2^31 - 1]."""
    n = _lattice_sum(x, y, z, seed) & _MASK31
    n = (n >> 13) ^ n
    # Only the low 31 bits survive, so every intermediate product is masked
    # to keep it inside int64.
    t = (n * n) & _MASK31
    t = (t * 60493 + 19990303) & _MASK31
    return (n * t + 1376312589) & _MASK31


def gradient_noise_3d(
    fx: np.ndarray,
    fy: np.ndarray,
    fz: np.ndarray,
    ix: np.ndarray,
    iy: np.ndarray,
    iz: np.ndarray,
    seed: int = 0,
) -> np.ndarray:
    """Gradient noise contribution of lattice point (ix, iy, iz) at (fx, fy, fz).

    Each component of the displacement `(fx - ix, fy - iy, fz - iz)` must lie
    in [-1, 1] for the result to stay within [-1, 1].
    """

    ix = np.asarray(ix, dtype=np.int64)
    iy = np.asarray(iy, dtype=np.int64)
    iz = np.asarray(iz, dtype=np.int64)

    n = _lattice_sum(ix, iy, iz, seed)
    index = (n ^ (n >> SHIFT_NOISE_GEN)) & 0xFF
    g = RANDOM_VECTORS[index]

    dx = np.asarray(fx, dtype=np.float64) - ix
    dy = np.asarray(fy, dtype=np.float64) - iy
    dz = np.asarray(fz, dtype=np.float64) - iz
    return (g[..., 0] * dx + g[..., 1] * dy + g[..., 2] * dz) * GRADIENT_SCALE


def value_noise_3d(
    x: np.ndarray, y: np.ndarray, z: np.ndarray, seed: int = 0
) -> np.ndarray:
    """Lattice value in [-1, 1]."""
    return 1.0 - int_hash_3d(x, y, z, seed).astype(np.float64) / 1073741824.0


def _coherent_noise_3d(
    x: np.ndarray,
    y: np.ndarray,
    z: np.ndarray,
    quality: NoiseQuality,
    corner: Callable[[np.ndarray, np.ndarray, np.ndarray], np.ndarray],
) -> np.ndarray:
    x0 = lattice_floor(x)
    y0 = lattice_floor(y)
    z0 = lattice_floor(z)
    x1 = x0 + 1
    y1 = y0 + 1
    z1 = z0 + 1

    xs = interp_curve(x - x0, quality)
    ys = interp_curve(y - y0, quality)
    zs = interp_curve(z - z0, quality)

    def along_x(iy: np.ndarray, iz: np.ndarray) -> np.ndarray:
        return lerp(corner(x0, iy, iz), corner(x1, iy, iz), xs)

    iy0 = lerp(along_x(y0, z0), along_x(y1, z0), ys)
    iy1 = lerp(along_x(y0, z1), along_x(y1, z1), ys)
    return lerp(iy0, iy1, zs)


def gradient_coherent_noise_3d(
    x: np.ndarray,
    y: np.ndarray,
    z: np.ndarray,
    seed: int = 0,
    quality: NoiseQuality = NoiseQuality.STANDARD,
) -> np.ndarray:
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    z = np.asarray(z, dtype=np.float64)

    def corner(ix: np.ndarray, iy: np.ndarray, iz: np.ndarray) -> np.ndarray:
        return gradient_noise_3d(x, y, z, ix, iy, iz, seed)

    return _coherent_noise_3d(x, y, z, quality, corner)


def value_coherent_noise_3d(
    x: np.ndarray,
    y: np.ndarray,
    z: np.ndarray,
    seed: int = 0,
    quality: NoiseQuality = NoiseQuality.STANDARD,
) -> np.ndarray:
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    z = np.asarray(z, dtype=np.float64)

    def corner(ix: np.ndarray, iy: np.ndarray, iz: np.ndarray) -> np.ndarray:
        return value_noise_3d(ix, iy, iz, seed)

    return _coherent_noise_3d(x, y, z, quality, corner)
