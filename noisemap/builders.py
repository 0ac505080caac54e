from __future__ import annotations

import logging
from typing import Callable

import numpy as np

from coherent.core import lerp
from coherent.exceptions import InvalidParamError
from coherent.models import Plane, Sphere
from coherent.module import Module

from .buffers import NoiseMap

logger = logging.getLogger(__name__)

RowCallback = Callable[[int], None]


class NoiseMapBuilder:
    """Fills a `NoiseMap` with values sampled from a source module.

    `build()` validates every precondition before touching the destination
    map, resizes it to the destination size, and writes it one row at a
    time, calling `callback(row)` after each completed row.
    """

    def __init__(self) -> None:
        self._source_module: Module | None = None
        self._dest_noise_map: NoiseMap | None = None
        self._callback: RowCallback | None = None
        self._dest_width = 0
        self._dest_height = 0

    @property
    def source_module(self) -> Module | None:
        return self._source_module

    @source_module.setter
    def source_module(self, module: Module | None) -> None:
        self._source_module = module

    @property
    def dest_noise_map(self) -> NoiseMap | None:
        return self._dest_noise_map

    @dest_noise_map.setter
    def dest_noise_map(self, noise_map: NoiseMap | None) -> None:
        self._dest_noise_map = noise_map

    @property
    def callback(self) -> RowCallback | None:
        return self._callback

    @callback.setter
    def callback(self, callback: RowCallback | None) -> None:
        self._callback = callback

    @property
    def dest_width(self) -> int:
        return self._dest_width

    @property
    def dest_height(self) -> int:
        return self._dest_height

    def set_dest_size(self, width: int, height: int) -> None:
        self._dest_width = int(width)
        self._dest_height = int(height)

    def _check_common(self) -> None:
        if self._dest_width <= 0 or self._dest_height <= 0:
            raise InvalidParamError(
                f"destination size must be positive, got "
                f"{self._dest_width}x{self._dest_height}"
            )
        if self._source_module is None:
            raise InvalidParamError("no source module set")
        if self._dest_noise_map is None:
            raise InvalidParamError("no destination noise map set")

    def _fill_rows(self, rows) -> None:
        dest = self._dest_noise_map
        dest.set_size(self._dest_width, self._dest_height)
        out = dest.array
        for y, values in enumerate(rows):
            out[y] = values
            if self._callback is not None:
                self._callback(y)

    def build(self) -> None:
        raise NotImplementedError


class NoiseMapBuilderPlane(NoiseMapBuilder):
    """Samples the module over the rectangle [lower_x, upper_x) x [lower_z, upper_z).

    With seamless mode on, each sample blends the module at the point and at
    its translates by one full extent along x, z and both, so the map tiles
    with the given bounds as its period. Seamless samples span the closed
    period, which makes the first and last columns (and rows) coincide.
    """

    def __init__(self) -> None:
        super().__init__()
        self._lower_x = 0.0
        self._upper_x = 0.0
        self._lower_z = 0.0
        self._upper_z = 0.0
        self._seamless = False

    @property
    def lower_x_bound(self) -> float:
        return self._lower_x

    @property
    def upper_x_bound(self) -> float:
        return self._upper_x

    @property
    def lower_z_bound(self) -> float:
        return self._lower_z

    @property
    def upper_z_bound(self) -> float:
        return self._upper_z

    @property
    def is_seamless_enabled(self) -> bool:
        return self._seamless

    def enable_seamless(self, enable: bool = True) -> None:
        self._seamless = bool(enable)

    def set_bounds(
        self, lower_x: float, upper_x: float, lower_z: float, upper_z: float
    ) -> None:
        lower_x = float(lower_x)
        upper_x = float(upper_x)
        lower_z = float(lower_z)
        upper_z = float(upper_z)
        if not (lower_x < upper_x and lower_z < upper_z):
            raise InvalidParamError(
                f"plane bounds must be ordered, got x=[{lower_x}, {upper_x}] "
                f"z=[{lower_z}, {upper_z}]"
            )
        self._lower_x = lower_x
        self._upper_x = upper_x
        self._lower_z = lower_z
        self._upper_z = upper_z

    def build(self) -> None:
        if not (self._lower_x < self._upper_x and self._lower_z < self._upper_z):
            raise InvalidParamError("plane bounds are not set")
        self._check_common()

        width = self._dest_width
        height = self._dest_height
        x_extent = self._upper_x - self._lower_x
        z_extent = self._upper_z - self._lower_z
        logger.debug(
            "building %dx%d plane map over x=[%g, %g) z=[%g, %g) seamless=%s",
            width,
            height,
            self._lower_x,
            self._upper_x,
            self._lower_z,
            self._upper_z,
            self._seamless,
        )

        plane = Plane(self._source_module)

        if not self._seamless:
            xs = self._lower_x + np.arange(width, dtype=np.float64) * (x_extent / width)
            zs = self._lower_z + np.arange(height, dtype=np.float64) * (z_extent / height)
            rows = (plane.get_value(xs, z) for z in zs)
        else:
            xs = np.linspace(self._lower_x, self._upper_x, width, dtype=np.float64)
            zs = np.linspace(self._lower_z, self._upper_z, height, dtype=np.float64)
            x_blend = 1.0 - (xs - self._lower_x) / x_extent

            def seamless_row(z: float) -> np.ndarray:
                sw = plane.get_value(xs, z)
                se = plane.get_value(xs + x_extent, z)
                nw = plane.get_value(xs, z + z_extent)
                ne = plane.get_value(xs + x_extent, z + z_extent)
                z_blend = 1.0 - (z - self._lower_z) / z_extent
                z0 = lerp(sw, se, x_blend)
                z1 = lerp(nw, ne, x_blend)
                return lerp(z0, z1, z_blend)

            rows = (seamless_row(z) for z in zs)

        self._fill_rows(rows)


class NoiseMapBuilderSphere(NoiseMapBuilder):
    """Samples the module on the unit sphere over a latitude/longitude window.

    Rows run from the south bound toward the north bound and columns from the
    west bound toward the east bound, all in degrees.
    """

    def __init__(self) -> None:
        super().__init__()
        self._south = 0.0
        self._north = 0.0
        self._west = 0.0
        self._east = 0.0

    @property
    def south_lat_bound(self) -> float:
        return self._south

    @property
    def north_lat_bound(self) -> float:
        return self._north

    @property
    def west_lon_bound(self) -> float:
        return self._west

    @property
    def east_lon_bound(self) -> float:
        return self._east

    def set_bounds(self, south: float, north: float, west: float, east: float) -> None:
        south = float(south)
        north = float(north)
        west = float(west)
        east = float(east)
        if not (south < north and west < east):
            raise InvalidParamError(
                f"sphere bounds must be ordered, got lat=[{south}, {north}] "
                f"lon=[{west}, {east}]"
            )
        self._south = south
        self._north = north
        self._west = west
        self._east = east

    def build(self) -> None:
        if not (self._south < self._north and self._west < self._east):
            raise InvalidParamError("sphere bounds are not set")
        self._check_common()

        width = self._dest_width
        height = self._dest_height
        logger.debug(
            "building %dx%d sphere map over lat=[%g, %g] lon=[%g, %g]",
            width,
            height,
            self._south,
            self._north,
            self._west,
            self._east,
        )

        sphere = Sphere(self._source_module)
        lon_delta = (self._east - self._west) / width
        lat_delta = (self._north - self._south) / height
        lons = self._west + np.arange(width, dtype=np.float64) * lon_delta
        lats = self._south + np.arange(height, dtype=np.float64) * lat_delta

        self._fill_rows(sphere.get_value(lat, lons) for lat in lats)
