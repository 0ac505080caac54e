from __future__ import annotations

import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from coherent.module import Perlin  # noqa: E402
from noisemap.buffers import Image, NoiseMap  # noqa: E402
from noisemap.builders import NoiseMapBuilderPlane, NoiseMapBuilderSphere  # noqa: E402
from noisemap.renderer import RendererImage  # noqa: E402


def _timeit(label: str, fn) -> float:
    t0 = time.perf_counter()
    fn()
    t1 = time.perf_counter()
    ms = (t1 - t0) * 1000.0
    print(f"{label}: {ms:.2f} ms")
    return ms


def main() -> None:
    """Quick CPU benchmark of the build and render stages."""

    module = Perlin()
    height_map = NoiseMap()

    plane = NoiseMapBuilderPlane()
    plane.source_module = module
    plane.dest_noise_map = height_map
    plane.set_dest_size(512, 512)
    plane.set_bounds(2.0, 6.0, 1.0, 5.0)
    _timeit("plane build 512x512", plane.build)

    plane.enable_seamless()
    _timeit("plane build 512x512 (seamless)", plane.build)

    sphere = NoiseMapBuilderSphere()
    sphere.source_module = module
    sphere.dest_noise_map = NoiseMap()
    sphere.set_dest_size(512, 256)
    sphere.set_bounds(-90.0, 90.0, -180.0, 180.0)
    _timeit("sphere build 512x256", sphere.build)

    renderer = RendererImage()
    renderer.source_noise_map = height_map
    renderer.dest_image = Image()
    renderer.build_terrain_gradient()
    _timeit("render 512x512", renderer.render)

    renderer.enable_light()
    _timeit("render 512x512 (lit)", renderer.render)


if __name__ == "__main__":
    main()
