"""Reading and writing headerless RGB byte files."""

from __future__ import annotations

import os
import struct

from .image import Image, Pixel

_PIXEL = struct.Struct("3B")


def load_raw(path: str | os.PathLike, width: int, height: int) -> Image:
    """Load packed RGB bytes of the given size; missing bytes stay black."""
    image = Image(width, height)
    size = width * height * _PIXEL.size
    with open(path, "rb") as stream:
        data = stream.read(size).ljust(size, b"\0")
    image.framebuffer = [Pixel(r, g, b) for r, g, b in _PIXEL.iter_unpack(data)]
    return image


def save_raw(image: Image, path: str | os.PathLike) -> None:
    """Write the image as packed RGB bytes with no header."""
    with open(path, "wb") as stream:
        stream.write(image.to_bytes())