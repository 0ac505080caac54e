from __future__ import annotations

import io
from pathlib import Path

import numpy as np
from PIL import Image as PILImage

from coherent.exceptions import InvalidParamError

from .buffers import Image, NoiseMap


def image_to_pil(image: Image) -> PILImage.Image:
    if image.width <= 0 or image.height <= 0:
        raise InvalidParamError("image is empty")
    rgba = np.ascontiguousarray(image.array)
    return PILImage.fromarray(rgba)


def image_to_png_bytes(image: Image) -> bytes:
    out = io.BytesIO()
    image_to_pil(image).save(out, format="PNG")
    return out.getvalue()


def image_to_bmp_bytes(image: Image) -> bytes:
    """24-bit BMP; the alpha channel is dropped."""
    out = io.BytesIO()
    image_to_pil(image).convert("RGB").save(out, format="BMP")
    return out.getvalue()


def write_image(image: Image, path: str | Path) -> Path:
    """Write `image` to `path`; the format follows the file suffix."""
    path = Path(path)
    pil = image_to_pil(image)
    if path.suffix.lower() in {".bmp", ".jpg", ".jpeg"}:
        pil = pil.convert("RGB")
    pil.save(path)
    return path


def noise_map_to_png_bytes(noise_map: NoiseMap) -> bytes:
    """Convert a noise map to an 8-bit grayscale PNG.

    Values are min/max normalized to [0, 255]. Constant maps become all
    zeros.
    """

    if noise_map.width <= 0 or noise_map.height <= 0:
        raise InvalidParamError("noise map is empty")

    z = noise_map.array.astype(np.float64)
    zmin = float(np.min(z))
    zmax = float(np.max(z))
    if zmax == zmin:
        img = np.zeros(z.shape, dtype=np.uint8)
    else:
        zn = (z - zmin) / (zmax - zmin)
        img = np.clip(zn * 255.0, 0.0, 255.0).astype(np.uint8)

    out = io.BytesIO()
    PILImage.fromarray(img).save(out, format="PNG")
    return out.getvalue()


def noise_map_to_npy_bytes(noise_map: NoiseMap) -> bytes:
    out = io.BytesIO()
    np.save(out, np.ascontiguousarray(noise_map.array))
    return out.getvalue()
