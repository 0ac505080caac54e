from __future__ import annotations

import logging
from dataclasses import astuple, dataclass
from typing import Any, ClassVar

import numpy as np

from coherent.exceptions import InvalidParamError, OutOfMemoryError

logger = logging.getLogger(__name__)

RASTER_STRIDE_BOUNDARY = 4
RASTER_MAX_WIDTH = 32767
RASTER_MAX_HEIGHT = 32767


def calc_stride(width: int) -> int:
    """Row length in elements, rounded up to the stride boundary."""
    b = RASTER_STRIDE_BOUNDARY
    return ((int(width) + b - 1) // b) * b


def _clamp_channel(v: int) -> int:
    return min(max(int(v), 0), 255)


@dataclass(frozen=True)
class Color:
    red: int
    green: int
    blue: int
    alpha: int = 255

    def __post_init__(self) -> None:
        object.__setattr__(self, "red", _clamp_channel(self.red))
        object.__setattr__(self, "green", _clamp_channel(self.green))
        object.__setattr__(self, "blue", _clamp_channel(self.blue))
        object.__setattr__(self, "alpha", _clamp_channel(self.alpha))

    def as_tuple(self) -> tuple[int, int, int, int]:
        return astuple(self)


class _Raster:
    """Row-major 2D buffer with a padded stride and a border value.

    Element (x, y) lives at `x + y * stride` of the flat buffer. Queries
    outside the grid return the border value; writes outside it are ignored.
    """

    _dtype: ClassVar[type[np.generic]]
    _channels: ClassVar[tuple[int, ...]] = ()

    def __init__(self, width: int = 0, height: int = 0):
        self._border_value = self._default_border()
        self._reset()
        if width or height:
            self.set_size(width, height)

    def _default_border(self) -> Any:
        raise NotImplementedError

    def _to_element(self, value: Any) -> Any:
        raise NotImplementedError

    def _from_element(self, element: Any) -> Any:
        raise NotImplementedError

    def _reset(self) -> None:
        self._buffer: np.ndarray | None = None
        self._width = 0
        self._height = 0
        self._stride = 0
        self._mem_used = 0

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def stride(self) -> int:
        return self._stride

    @property
    def mem_used(self) -> int:
        """Allocated storage, in elements."""
        return self._mem_used

    @property
    def border_value(self) -> Any:
        return self._border_value

    @border_value.setter
    def border_value(self, value: Any) -> None:
        self._border_value = value

    def set_size(self, width: int, height: int) -> None:
        width = int(width)
        height = int(height)
        if (
            width < 0
            or height < 0
            or width > RASTER_MAX_WIDTH
            or height > RASTER_MAX_HEIGHT
        ):
            raise InvalidParamError(
                f"raster size must be within [0, {RASTER_MAX_WIDTH}] x "
                f"[0, {RASTER_MAX_HEIGHT}], got {width}x{height}"
            )
        if width == 0 or height == 0:
            self._reset()
            return

        stride = calc_stride(width)
        needed = stride * height
        if self._mem_used < needed:
            self._reset()
            try:
                self._buffer = np.zeros((needed,) + self._channels, dtype=self._dtype)
            except MemoryError as exc:
                raise OutOfMemoryError(
                    f"cannot allocate a {width}x{height} raster"
                ) from exc
            self._mem_used = needed
            logger.debug("allocated %d elements for %dx%d raster", needed, width, height)

        self._width = width
        self._height = height
        self._stride = stride

    @property
    def buffer(self) -> np.ndarray:
        """Flat row-major storage covering `stride * height` elements."""
        if self._buffer is None:
            return np.zeros((0,) + self._channels, dtype=self._dtype)
        return self._buffer[: self._stride * self._height]

    @property
    def array(self) -> np.ndarray:
        """Writable (height, width) view of the buffer, padding excluded."""
        shape = (self._height, self._stride) + self._channels
        return self.buffer.reshape(shape)[:, : self._width]

    def row(self, y: int) -> np.ndarray:
        y = int(y)
        if not 0 <= y < self._height:
            raise InvalidParamError(f"row {y} out of range [0, {self._height})")
        start = y * self._stride
        return self.buffer[start : start + self._width]

    def _in_range(self, x: int, y: int) -> bool:
        return (
            self._buffer is not None
            and 0 <= x < self._width
            and 0 <= y < self._height
        )

    def get_value(self, x: int, y: int) -> Any:
        x = int(x)
        y = int(y)
        if self._in_range(x, y):
            return self._from_element(self._buffer[x + y * self._stride])
        return self._border_value

    def set_value(self, x: int, y: int, value: Any) -> None:
        x = int(x)
        y = int(y)
        if self._in_range(x, y):
            self._buffer[x + y * self._stride] = self._to_element(value)

    def clear(self, value: Any) -> None:
        if self._buffer is not None:
            self._buffer[...] = self._to_element(value)

    def reclaim_mem(self) -> None:
        """Shrink the allocation to exactly `stride * height` elements."""
        needed = self._stride * self._height
        if self._buffer is not None and self._mem_used > needed:
            self._buffer = self._buffer[:needed].copy()
            self._mem_used = needed

    def take_ownership(self, source: _Raster) -> None:
        """Move the storage of `source` into this raster; `source` is emptied."""
        if source is self:
            return
        if type(source) is not type(self):
            raise InvalidParamError(
                f"cannot take ownership of a {type(source).__name__}"
            )
        self._buffer = source._buffer
        self._width = source._width
        self._height = source._height
        self._stride = source._stride
        self._mem_used = source._mem_used
        self._border_value = source._border_value
        source._reset()

    def copy(self) -> _Raster:
        out = type(self)()
        out._border_value = self._border_value
        if self._buffer is not None:
            out._buffer = self._buffer.copy()
            out._width = self._width
            out._height = self._height
            out._stride = self._stride
            out._mem_used = self._mem_used
        return out


class NoiseMap(_Raster):
    """Single-precision 2D map of noise values."""

    _dtype = np.float32

    def _default_border(self) -> float:
        return 0.0

    def _to_element(self, value: float) -> np.float32:
        return np.float32(value)

    def _from_element(self, element: np.float32) -> float:
        return float(element)


class Image(_Raster):
    """2D grid of RGBA byte colors."""

    _dtype = np.uint8
    _channels = (4,)

    def _default_border(self) -> Color:
        return Color(0, 0, 0, 0)

    def _to_element(self, value: Color) -> np.ndarray:
        return np.array(value.as_tuple(), dtype=np.uint8)

    def _from_element(self, element: np.ndarray) -> Color:
        r, g, b, a = (int(c) for c in element)
        return Color(r, g, b, a)
