import math

import numpy as np
import pytest

from coherent.exceptions import InvalidParamError
from noisemap.buffers import Color, Image, NoiseMap
from noisemap.renderer import TERRAIN_GRADIENT, RendererImage, light_state

WHITE = Color(255, 255, 255, 255)


def _map(values) -> NoiseMap:
    values = np.asarray(values, dtype=np.float32)
    m = NoiseMap(values.shape[1], values.shape[0])
    m.array[...] = values
    return m


def _renderer(source: NoiseMap) -> RendererImage:
    r = RendererImage()
    r.source_noise_map = source
    r.dest_image = Image()
    return r


def _white_gradient(r: RendererImage) -> None:
    r.clear_gradient()
    r.add_gradient_point(-10.0, WHITE)
    r.add_gradient_point(10.0, WHITE)


def test_defaults():
    r = RendererImage()
    assert not r.is_light_enabled
    assert not r.is_wrap_enabled
    assert r.light_azimuth == 45.0
    assert r.light_elev == 45.0
    assert r.light_brightness == 1.0
    assert r.light_contrast == 1.0
    assert r.light_intensity == 1.0
    assert r.light_color == WHITE
    assert [p.pos for p in r.gradient.points] == [-1.0, 1.0]


def test_grayscale_render_endpoints_and_size():
    r = _renderer(_map([[-1.0, 1.0, -3.0], [2.0, -1.0, 1.0]]))
    r.render()
    img = r.dest_image
    assert (img.width, img.height) == (3, 2)
    assert img.get_value(0, 0) == Color(0, 0, 0, 255)
    assert img.get_value(1, 0) == Color(255, 255, 255, 255)
    assert img.get_value(2, 0) == Color(0, 0, 0, 255)
    assert img.get_value(0, 1) == Color(255, 255, 255, 255)


def test_grayscale_midpoint_is_gray():
    r = _renderer(_map([[0.0]]))
    r.render()
    c = r.dest_image.get_value(0, 0)
    assert 126 <= c.red <= 128
    assert c.red == c.green == c.blue
    assert c.alpha == 255


def test_transparent_gradient_shows_background():
    source = _map(np.zeros((3, 4)))
    bg = Image(4, 3)
    bg.clear(Color(0, 255, 0, 100))
    r = _renderer(source)
    r.background_image = bg
    r.clear_gradient()
    r.add_gradient_point(-1.0, Color(255, 0, 0, 0))
    r.add_gradient_point(1.0, Color(255, 0, 0, 0))
    r.render()
    assert np.all(r.dest_image.array == np.array([0, 255, 0, 100], dtype=np.uint8))


def test_transparent_gradient_without_background_is_white():
    r = _renderer(_map(np.zeros((2, 2))))
    r.clear_gradient()
    r.add_gradient_point(-1.0, Color(0, 0, 0, 0))
    r.add_gradient_point(1.0, Color(0, 0, 0, 0))
    r.render()
    assert np.all(r.dest_image.array == 255)


def test_output_alpha_is_max_of_inputs():
    bg = Image(1, 1)
    bg.clear(Color(0, 0, 0, 10))
    r = _renderer(_map([[0.0]]))
    r.background_image = bg
    r.clear_gradient()
    r.add_gradient_point(-1.0, Color(0, 0, 0, 0))
    r.add_gradient_point(1.0, Color(0, 0, 0, 0))
    r.render()
    assert r.dest_image.get_value(0, 0).alpha == 10


def test_dest_may_alias_background():
    bg = Image(4, 4)
    bg.clear(Color(0, 0, 255, 255))
    r = _renderer(_map(np.zeros((4, 4))))
    r.background_image = bg
    r.dest_image = bg
    r.clear_gradient()
    r.add_gradient_point(-1.0, Color(255, 0, 0, 0))
    r.add_gradient_point(1.0, Color(255, 0, 0, 0))
    r.render()
    assert bg.get_value(3, 3) == Color(0, 0, 255, 255)


def test_flat_map_lit_by_elevation_only():
    r = _renderer(_map(np.ones((4, 4))))
    r.enable_light()
    r.render()
    # io = sqrt(2) * sin(45) / 2 = 0.5
    c = r.dest_image.get_value(2, 2)
    assert c.red == c.green == c.blue == 127
    assert c.alpha == 255

    r.light_brightness = 3.0
    r.render()
    assert r.dest_image.get_value(2, 2) == WHITE


def test_light_color_tints_output():
    r = _renderer(_map(np.ones((2, 2))))
    r.enable_light()
    r.light_brightness = 3.0
    r.light_color = Color(255, 0, 0, 255)
    r.render()
    assert r.dest_image.get_value(0, 0) == Color(255, 0, 0, 255)


def test_bump_map_edges_clamp_or_wrap():
    ramp = np.tile(np.array([0.0, 0.1, 0.2, 0.3]), (3, 1))
    r = _renderer(_map(ramp))
    _white_gradient(r)
    r.enable_light()
    r.light_azimuth = 0.0
    s = r.lighting
    assert s.io == pytest.approx(0.5)
    assert s.ix == pytest.approx(0.5)
    assert s.iy == pytest.approx(0.0, abs=1e-12)

    r.render()
    clamped = r.dest_image.array.copy()
    r.enable_wrap()
    r.render()
    wrapped = r.dest_image.array.copy()

    # x = 0: clamped left is the pixel itself, wrapped left is x = 3.
    assert abs(int(clamped[1, 0, 0]) - 0.45 * 255) <= 1
    assert abs(int(wrapped[1, 0, 0]) - 0.60 * 255) <= 1
    # x = 1: left - right = -0.2 either way.
    assert abs(int(clamped[1, 1, 0]) - 0.40 * 255) <= 1
    assert np.array_equal(clamped[:, 1:3], wrapped[:, 1:3])
    assert not np.array_equal(clamped[:, 3], wrapped[:, 3])


def test_intensity_never_negative():
    steep = np.tile(np.array([0.0, 50.0, 100.0]), (3, 1))
    r = _renderer(_map(steep))
    _white_gradient(r)
    r.enable_light()
    r.light_azimuth = 180.0
    r.render()
    assert r.dest_image.array[..., :3].min() >= 0
    assert r.dest_image.get_value(1, 1) == Color(255, 255, 255, 255)

    r.light_azimuth = 0.0
    r.render()
    assert r.dest_image.get_value(1, 1) == Color(0, 0, 0, 255)


def test_light_state_is_pure():
    a = light_state(30.0, 60.0, 2.0)
    b = light_state(30.0, 60.0, 2.0)
    assert a == b
    io = math.sqrt(2.0) * math.sin(math.radians(60.0)) / 2.0
    scale = (1.0 - io) * 2.0 * math.sqrt(2.0) * math.cos(math.radians(60.0))
    assert a.io == pytest.approx(io)
    assert a.ix == pytest.approx(scale * math.cos(math.radians(30.0)))
    assert a.iy == pytest.approx(scale * math.sin(math.radians(30.0)))


def test_light_setters_refresh_lighting_state():
    r = RendererImage()
    r.light_azimuth = 120.0
    r.light_elev = 10.0
    r.light_contrast = 4.0
    assert r.lighting == light_state(120.0, 10.0, 4.0)


def test_light_parameter_validation():
    r = RendererImage()
    with pytest.raises(InvalidParamError):
        r.light_contrast = 0.0
    with pytest.raises(InvalidParamError):
        r.light_intensity = -0.1
    assert r.light_contrast == 1.0
    assert r.light_intensity == 1.0
    r.light_intensity = 0.0
    assert r.light_intensity == 0.0


def test_render_validation_leaves_dest_untouched():
    dest = Image(2, 2)
    dest.clear(Color(1, 2, 3, 4))
    before = dest.array.copy()

    r = RendererImage()
    r.dest_image = dest
    with pytest.raises(InvalidParamError):
        r.render()

    r.source_noise_map = NoiseMap()
    with pytest.raises(InvalidParamError):
        r.render()

    r.source_noise_map = _map(np.zeros((3, 3)))
    r.background_image = Image(2, 3)
    with pytest.raises(InvalidParamError):
        r.render()

    r.background_image = None
    r.clear_gradient()
    r.add_gradient_point(0.0, WHITE)
    with pytest.raises(InvalidParamError):
        r.render()

    r.dest_image = None
    r.build_grayscale_gradient()
    with pytest.raises(InvalidParamError):
        r.render()

    assert (dest.width, dest.height) == (2, 2)
    assert np.array_equal(dest.array, before)


def test_terrain_gradient():
    r = _renderer(_map(np.linspace(-1.0, 1.0, 16).reshape(4, 4)))
    r.build_terrain_gradient()
    assert len(r.gradient) == len(TERRAIN_GRADIENT) == 9
    r.render()
    deep = r.dest_image.get_value(0, 0)
    assert (deep.red, deep.green, deep.alpha) == (0, 0, 255)
    assert 126 <= deep.blue <= 128
    assert r.dest_image.get_value(3, 3) == WHITE
