from __future__ import annotations

import numpy as np

from .exceptions import NoModuleError
from .module import Module


def lat_lon_to_xyz(
    lat: np.ndarray, lon: np.ndarray
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Point on the unit sphere for a latitude/longitude in degrees."""
    lat_r = np.deg2rad(np.asarray(lat, dtype=np.float64))
    lon_r = np.deg2rad(np.asarray(lon, dtype=np.float64))
    r = np.cos(lat_r)
    return r * np.cos(lon_r), np.sin(lat_r), r * np.sin(lon_r)


class _Model:
    def __init__(self, module: Module | None = None):
        self._module = module

    @property
    def module(self) -> Module:
        if self._module is None:
            raise NoModuleError("model has no module")
        return self._module

    @module.setter
    def module(self, module: Module | None) -> None:
        self._module = module


class Plane(_Model):
    """Samples a module on the y = 0 plane."""

    def get_value(self, x: np.ndarray, z: np.ndarray) -> np.ndarray:
        return self.module.get_value(x, 0.0, z)


class Sphere(_Model):
    """Samples a module on the surface of the unit sphere."""

    def get_value(self, lat: np.ndarray, lon: np.ndarray) -> np.ndarray:
        x, y, z = lat_lon_to_xyz(lat, lon)
        return self.module.get_value(x, y, z)
