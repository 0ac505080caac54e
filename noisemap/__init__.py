from .buffers import Color, Image, NoiseMap
from .builders import NoiseMapBuilder, NoiseMapBuilderPlane, NoiseMapBuilderSphere
from .gradient import GradientColor, GradientPoint
from .renderer import LightingState, RendererImage, light_state

__all__ = [
    "Color",
    "GradientColor",
    "GradientPoint",
    "Image",
    "LightingState",
    "NoiseMap",
    "NoiseMapBuilder",
    "NoiseMapBuilderPlane",
    "NoiseMapBuilderSphere",
    "RendererImage",
    "light_state",
]
