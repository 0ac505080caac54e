from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path


def main() -> None:
    root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(root))

    from coherent.module import Perlin
    from noisemap.buffers import Color, Image, NoiseMap
    from noisemap.builders import NoiseMapBuilderPlane, NoiseMapBuilderSphere
    from noisemap.export import write_image
    from noisemap.renderer import RendererImage

    parser = argparse.ArgumentParser(description="Render the reference noise scenes.")
    parser.add_argument("--out", type=Path, default=root / "assets")
    parser.add_argument("--size", type=int, default=256)
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    out_dir = args.out
    out_dir.mkdir(parents=True, exist_ok=True)
    size = int(args.size)

    terrain = (
        (-1.0000, Color(0, 0, 128)),  # deeps
        (-0.2500, Color(0, 0, 255)),  # shallow
        (0.0000, Color(0, 128, 255)),  # shore
        (0.0625, Color(240, 240, 64)),  # sand
        (0.1250, Color(32, 160, 0)),  # grass
        (0.3750, Color(224, 224, 0)),  # dirt
        (0.7500, Color(128, 128, 128)),  # rock
        (1.0000, Color(255, 255, 255)),  # snow
    )

    def plane_map(module: Perlin, bounds: tuple[float, float, float, float]) -> NoiseMap:
        height_map = NoiseMap()
        builder = NoiseMapBuilderPlane()
        builder.source_module = module
        builder.dest_noise_map = height_map
        builder.set_dest_size(size, size)
        builder.set_bounds(*bounds)
        builder.build()
        return height_map

    def render(height_map: NoiseMap, *, colored: bool, lit: bool) -> Image:
        renderer = RendererImage()
        image = Image()
        renderer.source_noise_map = height_map
        renderer.dest_image = image
        if colored:
            renderer.clear_gradient()
            for pos, color in terrain:
                renderer.add_gradient_point(pos, color)
        if lit:
            renderer.enable_light()
            renderer.light_contrast = 3.0
            renderer.light_brightness = 2.0
        renderer.render()
        return image

    def save(image: Image, name: str) -> None:
        path = write_image(image, out_dir / name)
        print(f"wrote {path}")

    module = Perlin()
    west = plane_map(module, (2.0, 6.0, 1.0, 5.0))
    save(render(west, colored=False, lit=False), "plane_gray.png")
    save(render(west, colored=True, lit=False), "plane_terrain.png")
    save(render(west, colored=True, lit=True), "plane_terrain_lit.png")

    # The eastern neighbour continues the western tile without a seam.
    east = plane_map(module, (6.0, 10.0, 1.0, 5.0))
    save(render(east, colored=True, lit=True), "plane_terrain_lit_east.png")

    for octaves in (1, 6):
        module = Perlin(octave_count=octaves)
        save(
            render(plane_map(module, (6.0, 10.0, 1.0, 5.0)), colored=True, lit=True),
            f"plane_octaves_{octaves}.png",
        )

    for persistence in (0.25, 0.75):
        module = Perlin(persistence=persistence)
        save(
            render(plane_map(module, (6.0, 10.0, 1.0, 5.0)), colored=True, lit=True),
            f"plane_persistence_{int(persistence * 100)}.png",
        )

    module = Perlin(octave_count=10)
    globe = NoiseMap()
    builder = NoiseMapBuilderSphere()
    builder.source_module = module
    builder.dest_noise_map = globe
    builder.set_dest_size(2 * size, size)
    builder.set_bounds(-90.0, 90.0, -180.0, 180.0)
    builder.build()
    save(render(globe, colored=True, lit=True), "sphere_terrain_lit.png")


if __name__ == "__main__":
    main()
