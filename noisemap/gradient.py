from __future__ import annotations

import bisect
import math
from dataclasses import dataclass

import numpy as np

from coherent.exceptions import InvalidParamError

from .buffers import Color


@dataclass(frozen=True)
class GradientPoint:
    pos: float
    color: Color


class GradientColor:
    """Piecewise-linear color ramp over a 1D position.

    Points are kept strictly increasing by position. Positions at or beyond
    either end of the table take the end color; there is no extrapolation.
    """

    def __init__(self) -> None:
        self._points: list[GradientPoint] = []
        self._positions = np.zeros(0, dtype=np.float64)
        self._colors = np.zeros((0, 4), dtype=np.uint8)

    @property
    def points(self) -> tuple[GradientPoint, ...]:
        return tuple(self._points)

    @property
    def gradient_point_count(self) -> int:
        return len(self._points)

    def __len__(self) -> int:
        return len(self._points)

    def add_gradient_point(self, pos: float, color: Color) -> None:
        pos = float(pos)
        if math.isnan(pos):
            raise InvalidParamError("gradient position must not be NaN")

        positions = [p.pos for p in self._points]
        index = bisect.bisect_left(positions, pos)
        if index < len(positions) and positions[index] == pos:
            raise InvalidParamError(f"duplicate gradient position: {pos}")

        self._points.insert(index, GradientPoint(pos=pos, color=color))
        self._sync()

    def clear(self) -> None:
        self._points = []
        self._sync()

    def _sync(self) -> None:
        self._positions = np.array([p.pos for p in self._points], dtype=np.float64)
        self._colors = np.array(
            [p.color.as_tuple() for p in self._points], dtype=np.uint8
        ).reshape(-1, 4)

    def get_colors(self, values: np.ndarray) -> np.ndarray:
        """Vectorized lookup; returns uint8 RGBA with shape `values.shape + (4,)`."""
        count = len(self._points)
        if count < 2:
            raise InvalidParamError("gradient needs at least two points")

        values = np.asarray(values, dtype=np.float64)

        # First point strictly greater than the value.
        index = np.searchsorted(self._positions, values, side="right")
        i0 = np.clip(index - 1, 0, count - 1)
        i1 = np.clip(index, 0, count - 1)
        same = i0 == i1

        p0 = self._positions[i0]
        p1 = self._positions[i1]
        with np.errstate(divide="ignore", invalid="ignore"):
            alpha = np.where(same, 0.0, (values - p0) / (p1 - p0))
        a = alpha.astype(np.float32)[..., None]

        c0 = self._colors[i0].astype(np.float32) / np.float32(255.0)
        c1 = self._colors[i1].astype(np.float32) / np.float32(255.0)
        blended = ((c1 * a) + (c0 * (np.float32(1.0) - a))) * np.float32(255.0)
        out = np.where(same[..., None], self._colors[i1], blended.astype(np.int32))
        return np.clip(out, 0, 255).astype(np.uint8)

    def get_color(self, pos: float) -> Color:
        r, g, b, a = self.get_colors(pos).tolist()
        return Color(r, g, b, a)
