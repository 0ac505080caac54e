from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np

from coherent.exceptions import InvalidParamError

from .buffers import Color, Image, NoiseMap
from .gradient import GradientColor

logger = logging.getLogger(__name__)

DEFAULT_LIGHT_AZIMUTH = 45.0
DEFAULT_LIGHT_ELEVATION = 45.0
DEFAULT_LIGHT_BRIGHTNESS = 1.0
DEFAULT_LIGHT_CONTRAST = 1.0
DEFAULT_LIGHT_INTENSITY = 1.0
DEFAULT_LIGHT_COLOR = Color(255, 255, 255, 255)

TERRAIN_GRADIENT = (
    (-1.00, Color(0, 0, 128, 255)),
    (-0.20, Color(32, 64, 128, 255)),
    (-0.04, Color(64, 96, 192, 255)),
    (-0.02, Color(192, 192, 128, 255)),
    (0.00, Color(0, 192, 0, 255)),
    (0.25, Color(192, 192, 0, 255)),
    (0.50, Color(160, 96, 64, 255)),
    (0.75, Color(128, 255, 255, 255)),
    (1.00, Color(255, 255, 255, 255)),
)


@dataclass(frozen=True)
class LightingState:
    """Bump-map lighting coefficients derived from the light direction."""

    io: float
    ix: float
    iy: float


def light_state(azimuth: float, elevation: float, contrast: float) -> LightingState:
    """Coefficients for `max(0, ix*(left-right) + iy*(down-up) + io)`.

    Angles are in degrees.
    """

    az = math.radians(float(azimuth))
    elev = math.radians(float(elevation))
    io = math.sqrt(2.0) * math.sin(elev) / 2.0
    scale = (1.0 - io) * float(contrast) * math.sqrt(2.0) * math.cos(elev)
    return LightingState(io=io, ix=scale * math.cos(az), iy=scale * math.sin(az))


def _neighbours(
    values: np.ndarray, wrap: bool
) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    # left = x - 1, right = x + 1, down = y - 1, up = y + 1
    if wrap:
        left = np.roll(values, 1, axis=1)
        right = np.roll(values, -1, axis=1)
        down = np.roll(values, 1, axis=0)
        up = np.roll(values, -1, axis=0)
        return left, right, down, up

    p = np.pad(values, 1, mode="edge")
    return p[1:-1, :-2], p[1:-1, 2:], p[:-2, 1:-1], p[2:, 1:-1]


class RendererImage:
    """Renders a noise map into a color image.

    Each value is mapped through the color gradient, blended over the
    background image (opaque white when none is set) using the gradient
    color's alpha, and optionally lit by treating the map as a bump map.
    """

    def __init__(self) -> None:
        self._source_noise_map: NoiseMap | None = None
        self._dest_image: Image | None = None
        self._background_image: Image | None = None

        self._light_enabled = False
        self._wrap_enabled = False
        self._light_azimuth = DEFAULT_LIGHT_AZIMUTH
        self._light_elev = DEFAULT_LIGHT_ELEVATION
        self._light_brightness = DEFAULT_LIGHT_BRIGHTNESS
        self._light_contrast = DEFAULT_LIGHT_CONTRAST
        self._light_intensity = DEFAULT_LIGHT_INTENSITY
        self._light_color = DEFAULT_LIGHT_COLOR
        self._lighting = light_state(
            self._light_azimuth, self._light_elev, self._light_contrast
        )

        self._gradient = GradientColor()
        self.build_grayscale_gradient()

    # Inputs and outputs.

    @property
    def source_noise_map(self) -> NoiseMap | None:
        return self._source_noise_map

    @source_noise_map.setter
    def source_noise_map(self, noise_map: NoiseMap | None) -> None:
        self._source_noise_map = noise_map

    @property
    def dest_image(self) -> Image | None:
        return self._dest_image

    @dest_image.setter
    def dest_image(self, image: Image | None) -> None:
        self._dest_image = image

    @property
    def background_image(self) -> Image | None:
        return self._background_image

    @background_image.setter
    def background_image(self, image: Image | None) -> None:
        self._background_image = image

    # Gradient.

    @property
    def gradient(self) -> GradientColor:
        return self._gradient

    def add_gradient_point(self, pos: float, color: Color) -> None:
        self._gradient.add_gradient_point(pos, color)

    def clear_gradient(self) -> None:
        self._gradient.clear()

    def build_grayscale_gradient(self) -> None:
        self.clear_gradient()
        self._gradient.add_gradient_point(-1.0, Color(0, 0, 0, 255))
        self._gradient.add_gradient_point(1.0, Color(255, 255, 255, 255))

    def build_terrain_gradient(self) -> None:
        self.clear_gradient()
        for pos, color in TERRAIN_GRADIENT:
            self._gradient.add_gradient_point(pos, color)

    # Lighting.

    @property
    def is_light_enabled(self) -> bool:
        return self._light_enabled

    def enable_light(self, enable: bool = True) -> None:
        self._light_enabled = bool(enable)

    @property
    def is_wrap_enabled(self) -> bool:
        return self._wrap_enabled

    def enable_wrap(self, enable: bool = True) -> None:
        self._wrap_enabled = bool(enable)

    @property
    def lighting(self) -> LightingState:
        return self._lighting

    def _update_lighting(self) -> None:
        self._lighting = light_state(
            self._light_azimuth, self._light_elev, self._light_contrast
        )

    @property
    def light_azimuth(self) -> float:
        return self._light_azimuth

    @light_azimuth.setter
    def light_azimuth(self, value: float) -> None:
        self._light_azimuth = float(value)
        self._update_lighting()

    @property
    def light_elev(self) -> float:
        return self._light_elev

    @light_elev.setter
    def light_elev(self, value: float) -> None:
        self._light_elev = float(value)
        self._update_lighting()

    @property
    def light_contrast(self) -> float:
        return self._light_contrast

    @light_contrast.setter
    def light_contrast(self, value: float) -> None:
        value = float(value)
        if value <= 0.0:
            raise InvalidParamError(f"light contrast must be > 0, got {value}")
        self._light_contrast = value
        self._update_lighting()

    @property
    def light_brightness(self) -> float:
        return self._light_brightness

    @light_brightness.setter
    def light_brightness(self, value: float) -> None:
        self._light_brightness = float(value)

    @property
    def light_intensity(self) -> float:
        return self._light_intensity

    @light_intensity.setter
    def light_intensity(self, value: float) -> None:
        value = float(value)
        if value < 0.0:
            raise InvalidParamError(f"light intensity must be >= 0, got {value}")
        self._light_intensity = value

    @property
    def light_color(self) -> Color:
        return self._light_color

    @light_color.setter
    def light_color(self, color: Color) -> None:
        self._light_color = color

    # Rendering.

    def _light_intensity_map(self, values: np.ndarray) -> np.ndarray:
        left, right, down, up = _neighbours(values, self._wrap_enabled)
        s = self._lighting
        intensity = s.ix * (left - right) + s.iy * (down - up) + s.io
        return np.maximum(intensity, 0.0) * self._light_brightness

    def render(self) -> None:
        src = self._source_noise_map
        dest = self._dest_image
        bg = self._background_image
        if src is None:
            raise InvalidParamError("no source noise map set")
        if dest is None:
            raise InvalidParamError("no destination image set")
        if src.width <= 0 or src.height <= 0:
            raise InvalidParamError("source noise map is empty")
        if self._gradient.gradient_point_count < 2:
            raise InvalidParamError("gradient needs at least two points")

        width = src.width
        height = src.height
        if bg is not None and (bg.width != width or bg.height != height):
            raise InvalidParamError(
                f"background image is {bg.width}x{bg.height}, "
                f"source map is {width}x{height}"
            )

        logger.debug(
            "rendering %dx%d image light=%s wrap=%s background=%s",
            width,
            height,
            self._light_enabled,
            self._wrap_enabled,
            bg is not None,
        )

        values = src.array.astype(np.float64)
        source_rgba = self._gradient.get_colors(values)
        if bg is not None:
            background_rgba = bg.array.copy()
        else:
            background_rgba = np.full((height, width, 4), 255, dtype=np.uint8)
        colors = source_rgba.astype(np.float64) / 255.0
        background = background_rgba.astype(np.float64) / 255.0

        src_alpha = colors[..., 3:4]
        rgb = background[..., :3] * (1.0 - src_alpha) + colors[..., :3] * src_alpha

        if self._light_enabled:
            intensity = self._light_intensity_map(values)
            light_rgb = (
                np.array(self._light_color.as_tuple()[:3], dtype=np.float64) / 255.0
            )
            rgb = rgb * (intensity[..., None] * light_rgb)

        rgb = np.clip(rgb, 0.0, 1.0)
        out = np.empty((height, width, 4), dtype=np.uint8)
        out[..., :3] = (rgb * 255.0).astype(np.uint8)
        out[..., 3] = np.maximum(source_rgba[..., 3], background_rgba[..., 3])

        if dest is not bg:
            dest.set_size(width, height)
        dest.array[...] = out
