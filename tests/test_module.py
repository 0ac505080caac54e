import numpy as np
import pytest

from coherent.core import NoiseQuality
from coherent.exceptions import InvalidParamError, NoModuleError
from coherent.module import (
    DEFAULT_PERLIN_OCTAVE_COUNT,
    PERLIN_MAX_OCTAVE,
    Module,
    Perlin,
)


class _Sum(Module):
    source_module_count = 2

    def get_value(self, x, y, z):
        a = self.get_source_module(0).get_value(x, y, z)
        b = self.get_source_module(1).get_value(x, y, z)
        return a + b


def test_perlin_reference_values():
    p = Perlin()
    assert p.get_value(1.25, 0.75, 0.50) == pytest.approx(0.686347, abs=9e-7)
    assert p.get_value(1.2501, 0.7501, 0.5001) == pytest.approx(0.685644, abs=9e-7)
    assert p.get_value(14.50, 20.25, 75.75) == pytest.approx(-0.972999, abs=9e-7)


def test_perlin_defaults():
    p = Perlin()
    assert p.frequency == 1.0
    assert p.lacunarity == 2.0
    assert p.octave_count == DEFAULT_PERLIN_OCTAVE_COUNT == 6
    assert p.persistence == 0.5
    assert p.seed == 0
    assert p.noise_quality is NoiseQuality.STANDARD
    assert p.get_source_module_count() == 0


def test_perlin_scalar_returns_float_and_array_returns_array():
    p = Perlin(seed=3)
    assert isinstance(p.get_value(0.3, 0.4, 0.5), float)
    xs = np.array([0.3, 1.3, 2.3])
    out = p.get_value(xs, 0.4, 0.5)
    assert out.shape == (3,)
    assert out[0] == p.get_value(0.3, 0.4, 0.5)


def test_perlin_deterministic_and_seed_sensitive():
    x = np.array([0.1, 1.25, 10.5])
    y = np.array([0.2, 2.75, 9.0])
    z = np.array([0.3, 0.5, 1.0])
    p1 = Perlin(seed=123)
    p2 = Perlin(seed=123)
    assert np.array_equal(p1.get_value(x, y, z), p2.get_value(x, y, z))
    p3 = Perlin(seed=1)
    p4 = Perlin(seed=2)
    assert not np.allclose(p3.get_value(x, y, z), p4.get_value(x, y, z))


def test_perlin_single_octave_is_scaled_coherent_noise():
    from coherent.noisegen import gradient_coherent_noise_3d

    p = Perlin(octave_count=1, frequency=2.0, seed=8, noise_quality=NoiseQuality.BEST)
    expected = float(gradient_coherent_noise_3d(0.8, 1.4, -0.6, 8, NoiseQuality.BEST))
    assert p.get_value(0.4, 0.7, -0.3) == pytest.approx(expected)


def test_perlin_octave_count_validation():
    p = Perlin()
    with pytest.raises(InvalidParamError):
        p.octave_count = 0
    with pytest.raises(InvalidParamError):
        p.octave_count = PERLIN_MAX_OCTAVE + 1
    assert p.octave_count == 6
    p.octave_count = PERLIN_MAX_OCTAVE
    assert p.octave_count == 30
    with pytest.raises(InvalidParamError):
        Perlin(octave_count=31)


def test_perlin_other_setters_accept_anything():
    p = Perlin()
    p.frequency = -4.0
    p.lacunarity = 0.0
    p.persistence = 3.5
    p.seed = 2**40
    assert (p.frequency, p.lacunarity, p.persistence, p.seed) == (-4.0, 0.0, 3.5, 2**40)
    assert np.isfinite(p.get_value(0.5, 0.5, 0.5))


def test_perlin_has_no_source_slots():
    p = Perlin()
    with pytest.raises(InvalidParamError):
        p.set_source_module(0, Perlin())
    with pytest.raises(NoModuleError):
        p.get_source_module(0)


def test_source_module_slots():
    s = _Sum()
    assert s.get_source_module_count() == 2
    with pytest.raises(NoModuleError):
        s.get_source_module(0)

    a = Perlin(seed=1)
    b = Perlin(seed=2)
    s.set_source_module(0, a)
    s.set_source_module(1, b)
    assert s.get_source_module(0) is a
    assert s.get_source_module(1) is b
    assert s.get_value(0.3, 0.2, 0.1) == pytest.approx(
        a.get_value(0.3, 0.2, 0.1) + b.get_value(0.3, 0.2, 0.1)
    )

    s.set_source_module(0, b)
    assert s.get_source_module(0) is b


def test_source_module_index_out_of_range():
    s = _Sum()
    with pytest.raises(InvalidParamError):
        s.set_source_module(2, Perlin())
    with pytest.raises(InvalidParamError):
        s.set_source_module(-1, Perlin())
    with pytest.raises(NoModuleError):
        s.get_source_module(5)
    with pytest.raises(NoModuleError):
        s.get_source_module(-1)


def test_base_module_get_value_is_abstract():
    with pytest.raises(NotImplementedError):
        Module().get_value(0.0, 0.0, 0.0)
