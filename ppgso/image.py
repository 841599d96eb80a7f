"""In-memory RGB images with 8-bit channels."""

from __future__ import annotations

from dataclasses import dataclass, replace


def clamp(value: float) -> int:
    """Map a colour channel in the range <0, 1> to a byte, clamping outside values."""
    return int(min(max(value, 0.0), 1.0) * 255.0)


@dataclass
class Pixel:
    """A single RGB pixel; each channel holds a value from 0 to 255."""

    r: int = 0
    g: int = 0
    b: int = 0


class Image:
    """A width x height grid of pixels stored row by row, top row first."""

    def __init__(self, width: int, height: int) -> None:
        if width < 0 or height < 0:
            raise ValueError(f"Image size must not be negative: {width}x{height}")
        self.width = width
        self.height = height
        self.framebuffer: list[Pixel] = [Pixel() for _ in range(width * height)]

    def __repr__(self) -> str:
        return f"Image(width={self.width}, height={self.height})"

    def _index(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(
                f"Pixel ({x}, {y}) lies outside a {self.width}x{self.height} image"
            )
        return x + y * self.width

    def get_pixel(self, x: int, y: int) -> Pixel:
        """Return the pixel at (x, y); changing it changes the image."""
        return self.framebuffer[self._index(x, y)]

    def set_pixel(self, x: int, y: int, color: Pixel) -> None:
        """Store a copy of ``color`` at (x, y)."""
        self.framebuffer[self._index(x, y)] = replace(color)

    def set_pixel_rgb(self, x: int, y: int, r: int, g: int, b: int) -> None:
        """Set the pixel at (x, y) from byte channels, keeping the low 8 bits of each."""
        self.set_pixel(x, y, Pixel(r & 0xFF, g & 0xFF, b & 0xFF))

    def set_pixel_float(self, x: int, y: int, r: float, g: float, b: float) -> None:
        """Set the pixel at (x, y) from channels in the range <0, 1>."""
        self.set_pixel(x, y, Pixel(clamp(r), clamp(g), clamp(b)))

    def clear(self, color: Pixel | None = None) -> None:
        """Fill the whole image with one colour, black by default."""
        fill = color if color is not None else Pixel()
        self.framebuffer = [replace(fill) for _ in self.framebuffer]

    def to_bytes(self) -> bytes:
        """Return the pixels as packed RGB bytes, row by row from the top."""
        return bytes(
            channel for pixel in self.framebuffer for channel in (pixel.r, pixel.g, pixel.b)
        )