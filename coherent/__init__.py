from .core import NoiseQuality
from .exceptions import InvalidParamError, NoiseError, NoModuleError, OutOfMemoryError
from .models import Plane, Sphere, lat_lon_to_xyz
from .module import Module, Perlin
from .noisegen import (
    gradient_coherent_noise_3d,
    gradient_noise_3d,
    int_hash_3d,
    value_coherent_noise_3d,
    value_noise_3d,
)

__all__ = [
    "InvalidParamError",
    "Module",
    "NoModuleError",
    "NoiseError",
    "NoiseQuality",
    "OutOfMemoryError",
    "Perlin",
    "Plane",
    "Sphere",
    "gradient_coherent_noise_3d",
    "gradient_noise_3d",
    "int_hash_3d",
    "lat_lon_to_xyz",
    "value_coherent_noise_3d",
    "value_noise_3d",
]
