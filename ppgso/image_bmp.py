"""Reading and writing uncompressed 24-bit BMP files."""

from __future__ import annotations

import os
import struct

from .image import Image, Pixel

_FILE_HEADER = struct.Struct("<HIHHI")
_INFO_HEADER = struct.Struct("<IiiHHIIiiII")
_HEADERS_SIZE = _FILE_HEADER.size + _INFO_HEADER.size

_BMP_MAGIC = 19778
_DATA_OFFSET = 122
_INFO_SIZE_WRITTEN = 108
_PELS_PER_METER = 2835
_PIXEL = struct.Struct("3B")


class BMPError(ValueError):
    """Raised when a file is not a BMP this module can read."""


def _row_padded(width: int) -> int:
    return (width * 3 + 3) & ~3


def load_bmp(path: str | os.PathLike) -> Image:
    """Load an uncompressed 24-bit BMP file."""
    with open(path, "rb") as stream:
        headers = stream.read(_HEADERS_SIZE).ljust(_HEADERS_SIZE, b"\0")
        bf_type, _size, _res1, _res2, off_bits = _FILE_HEADER.unpack_from(headers, 0)
        (
            _info_size,
            width,
            raw_height,
            _planes,
            bit_count,
            compression,
            *_rest,
        ) = _INFO_HEADER.unpack_from(headers, _FILE_HEADER.size)

        if bf_type != _BMP_MAGIC:
            raise BMPError(f"BMP file does not contain supported BMP format. {path}")
        if bit_count != 24:
            raise BMPError(f"BMP file does not contain supported bit count. {path}")
        if compression != 0:
            raise BMPError(f"BMP file does not use expected compression method. {path}")

        height = abs(raw_height)
        top_down = raw_height < 0
        if width == 0 or height == 0:
            raise BMPError(f"BMP file does not contain any data. {path}")
        if width < 0:
            raise BMPError(f"BMP file has a negative width. {path}")

        stream.seek(off_bits)
        padded = _row_padded(width)
        rows = []
        for _ in range(height):
            chunk = stream.read(padded).ljust(padded, b"\0")
            rows.append(
                [Pixel(r, g, b) for b, g, r in _PIXEL.iter_unpack(chunk[: width * 3])]
            )

    if not top_down:
        rows.reverse()
    image = Image(width, height)
    image.framebuffer = [pixel for row in rows for pixel in row]
    return image


def save_bmp(image: Image, path: str | os.PathLike) -> None:
    """Save an image as an uncompressed 24-bit bottom-up BMP file."""
    width, height = image.width, image.height
    padded = _row_padded(width)
    data_size = padded * height

    file_header = _FILE_HEADER.pack(_BMP_MAGIC, data_size + _DATA_OFFSET, 0, 0, _DATA_OFFSET)
    info_header = _INFO_HEADER.pack(
        _INFO_SIZE_WRITTEN,
        width,
        height,
        1,
        24,
        0,
        data_size,
        _PELS_PER_METER,
        _PELS_PER_METER,
        0,
        0,
    )
    gap = bytes(_DATA_OFFSET - _HEADERS_SIZE)

    rows = []
    for y in reversed(range(height)):
        line = image.framebuffer[y * width : (y + 1) * width]
        row = b"".join(bytes((p.b, p.g, p.r)) for p in line)
        rows.append(row.ljust(padded, b"\0"))

    with open(path, "wb") as stream:
        stream.write(file_header + info_header + gap + b"".join(rows))