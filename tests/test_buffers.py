import numpy as np
import pytest

from coherent.exceptions import InvalidParamError, OutOfMemoryError
from noisemap import buffers
from noisemap.buffers import RASTER_MAX_WIDTH, Color, Image, NoiseMap, calc_stride


def test_color_clamps_channels():
    c = Color(300, -5, 128, 999)
    assert c.as_tuple() == (255, 0, 128, 255)
    assert Color(1, 2, 3).alpha == 255


def test_calc_stride_rounds_to_four():
    assert [calc_stride(w) for w in (1, 4, 5, 7, 8, 9)] == [4, 4, 8, 8, 8, 12]


def test_noise_map_set_size_and_stride():
    m = NoiseMap()
    assert (m.width, m.height, m.stride, m.mem_used) == (0, 0, 0, 0)
    m.set_size(5, 3)
    assert (m.width, m.height, m.stride) == (5, 3, 8)
    assert m.mem_used == 24
    assert m.array.shape == (3, 5)
    assert m.buffer.shape == (24,)


def test_noise_map_row_major_addressing():
    m = NoiseMap(5, 3)
    m.set_value(2, 1, 7.5)
    assert m.get_value(2, 1) == 7.5
    assert m.buffer[2 + 1 * m.stride] == np.float32(7.5)
    assert m.array[1, 2] == np.float32(7.5)
    assert m.row(1)[2] == np.float32(7.5)


def test_noise_map_border_value():
    m = NoiseMap(4, 4)
    m.clear(1.0)
    assert m.get_value(-1, 0) == 0.0
    m.border_value = -9.0
    assert m.get_value(4, 0) == -9.0
    assert m.get_value(0, 4) == -9.0
    assert m.get_value(3, 3) == 1.0
    m.set_value(10, 10, 5.0)
    assert np.all(m.array == 1.0)


def test_set_size_rejects_bad_sizes_without_change():
    m = NoiseMap(4, 2)
    with pytest.raises(InvalidParamError):
        m.set_size(-1, 2)
    with pytest.raises(InvalidParamError):
        m.set_size(RASTER_MAX_WIDTH + 1, 2)
    assert (m.width, m.height) == (4, 2)


def test_set_size_zero_resets():
    m = NoiseMap(4, 2)
    m.set_size(0, 7)
    assert (m.width, m.height, m.stride, m.mem_used) == (0, 0, 0, 0)
    assert m.array.shape == (0, 0)


def test_set_size_reuses_larger_allocation():
    m = NoiseMap(16, 16)
    m.set_size(4, 4)
    assert m.mem_used == 256
    m.reclaim_mem()
    assert m.mem_used == 16
    assert m.array.shape == (4, 4)


def test_out_of_memory_resets(monkeypatch):
    m = NoiseMap(4, 4)

    def fail(*args, **kwargs):
        raise MemoryError

    monkeypatch.setattr(buffers.np, "zeros", fail)
    with pytest.raises(OutOfMemoryError):
        m.set_size(100, 100)
    assert (m.width, m.height, m.mem_used) == (0, 0, 0)


def test_take_ownership_and_copy():
    a = NoiseMap(3, 2)
    a.clear(2.0)
    b = a.copy()
    c = NoiseMap()
    c.take_ownership(a)
    assert (a.width, a.height) == (0, 0)
    assert (c.width, c.height) == (3, 2)
    assert np.all(c.array == 2.0)
    c.set_value(0, 0, 4.0)
    assert b.get_value(0, 0) == 2.0


def test_image_values_and_border():
    img = Image(3, 3)
    assert img.stride == 4
    assert img.array.shape == (3, 3, 4)
    img.set_value(1, 2, Color(10, 20, 30, 40))
    assert img.get_value(1, 2) == Color(10, 20, 30, 40)
    assert img.array[2, 1].tolist() == [10, 20, 30, 40]
    assert img.get_value(3, 0) == Color(0, 0, 0, 0)
    img.clear(Color(1, 2, 3, 4))
    assert img.get_value(2, 2) == Color(1, 2, 3, 4)


def test_take_ownership_rejects_other_raster_type():
    with pytest.raises(InvalidParamError):
        Image().take_ownership(NoiseMap(2, 2))
