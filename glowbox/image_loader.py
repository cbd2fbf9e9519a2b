"""Loading PNG textures as bottom-up RGBA pixel data."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from PIL import Image

__all__ = ["ImageLoadError", "PNGImage", "flip_rows", "load_png_file"]

_BYTES_PER_PIXEL = 4


class ImageLoadError(ValueError):
    """Raised when an image file cannot be read or decoded."""


@dataclass(frozen=True)
class PNGImage:
    """RGBA pixels, 8 bits per channel, with the first row at the bottom."""

    width: int
    height: int
    pixels: bytes


def flip_rows(pixels: bytes, width: int, height: int) -> bytes:
    """Reverse the row order of tightly packed RGBA pixel data."""
    stride = _BYTES_PER_PIXEL * width
    if width < 0 or height < 0 or len(pixels) != stride * height:
        raise ValueError(
            f"expected {stride * height} bytes for a {width}x{height} RGBA image, "
            f"got {len(pixels)}"
        )
    rows = [pixels[start:start + stride] for start in range(0, len(pixels), stride)]
    return b"".join(reversed(rows))


def load_png_file(file_name: str | Path) -> PNGImage:
    """Decode an image file to RGBA with the origin at the bottom left."""
    try:
        with Image.open(file_name) as img:
            rgba = img.convert("RGBA")
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        raise ImageLoadError(f"cannot decode image {file_name}: {exc}") from exc

    width, height = rgba.size
    return PNGImage(width, height, flip_rows(rgba.tobytes(), width, height))