from __future__ import annotations

from typing import ClassVar

import numpy as np

from .core import NoiseQuality
from .exceptions import InvalidParamError, NoModuleError
from .noisegen import _int32, gradient_coherent_noise_3d

DEFAULT_PERLIN_FREQUENCY = 1.0
DEFAULT_PERLIN_LACUNARITY = 2.0
DEFAULT_PERLIN_OCTAVE_COUNT = 6
DEFAULT_PERLIN_PERSISTENCE = 0.5
DEFAULT_PERLIN_QUALITY = NoiseQuality.STANDARD
DEFAULT_PERLIN_SEED = 0
PERLIN_MAX_OCTAVE = 30


class Module:
    """A node in a noise module graph.

    Every concrete module type declares its arity in `source_module_count`;
    an instance holds exactly that many source slots for its lifetime. Slots
    reference other modules without owning them, and all slots a module reads
    must be filled before `get_value` is called.
    """

    source_module_count: ClassVar[int] = 0

    def __init__(self) -> None:
        self._source_modules: list[Module | None] = [None] * self.source_module_count

    def get_source_module_count(self) -> int:
        return self.source_module_count

    def get_source_module(self, index: int) -> Module:
        index = int(index)
        if not 0 <= index < self.source_module_count:
            raise NoModuleError(f"source module index out of range: {index}")
        module = self._source_modules[index]
        if module is None:
            raise NoModuleError(f"source module {index} is not set")
        return module

    def set_source_module(self, index: int, module: Module | None) -> None:
        index = int(index)
        if not 0 <= index < self.source_module_count:
            raise InvalidParamError(
                f"source module index must be in [0, {self.source_module_count})"
            )
        self._source_modules[index] = module

    def get_value(self, x: np.ndarray, y: np.ndarray, z: np.ndarray) -> np.ndarray:
        raise NotImplementedError


class Perlin(Module):
    """Fractal gradient noise: the sum of `octave_count` coherent-noise octaves.

    Each octave samples at `lacunarity` times the previous frequency and
    `persistence` times the previous amplitude, with the seed offset by the
    octave index. The sum is not normalized.
    """

    source_module_count = 0

    def __init__(
        self,
        *,
        frequency: float = DEFAULT_PERLIN_FREQUENCY,
        lacunarity: float = DEFAULT_PERLIN_LACUNARITY,
        octave_count: int = DEFAULT_PERLIN_OCTAVE_COUNT,
        persistence: float = DEFAULT_PERLIN_PERSISTENCE,
        seed: int = DEFAULT_PERLIN_SEED,
        noise_quality: NoiseQuality = DEFAULT_PERLIN_QUALITY,
    ):
        super().__init__()
        self.frequency = frequency
        self.lacunarity = lacunarity
        self.octave_count = octave_count
        self.persistence = persistence
        self.seed = seed
        self.noise_quality = noise_quality

    @property
    def frequency(self) -> float:
        return self._frequency

    @frequency.setter
    def frequency(self, value: float) -> None:
        self._frequency = float(value)

    @property
    def lacunarity(self) -> float:
        return self._lacunarity

    @lacunarity.setter
    def lacunarity(self, value: float) -> None:
        self._lacunarity = float(value)

    @property
    def octave_count(self) -> int:
        return self._octave_count

    @octave_count.setter
    def octave_count(self, value: int) -> None:
        value = int(value)
        if value < 1 or value > PERLIN_MAX_OCTAVE:
            raise InvalidParamError(
                f"octave_count must be in [1, {PERLIN_MAX_OCTAVE}], got {value}"
            )
        self._octave_count = value

    @property
    def persistence(self) -> float:
        return self._persistence

    @persistence.setter
    def persistence(self, value: float) -> None:
        self._persistence = float(value)

    @property
    def seed(self) -> int:
        return self._seed

    @seed.setter
    def seed(self, value: int) -> None:
        self._seed = int(value)

    @property
    def noise_quality(self) -> NoiseQuality:
        return self._noise_quality

    @noise_quality.setter
    def noise_quality(self, value: NoiseQuality) -> None:
        self._noise_quality = NoiseQuality(value)

    def get_value(self, x: np.ndarray, y: np.ndarray, z: np.ndarray) -> np.ndarray:
        x = np.asarray(x, dtype=np.float64) * self._frequency
        y = np.asarray(y, dtype=np.float64) * self._frequency
        z = np.asarray(z, dtype=np.float64) * self._frequency

        value = np.zeros(np.broadcast(x, y, z).shape, dtype=np.float64)
        amp = 1.0
        for octave in range(self._octave_count):
            seed = _int32(self._seed + octave)
            signal = gradient_coherent_noise_3d(x, y, z, seed, self._noise_quality)
            value += signal * amp
            x = x * self._lacunarity
            y = y * self._lacunarity
            z = z * self._lacunarity
            amp *= self._persistence

        if value.ndim == 0:
            return float(value)
        return value
