"""Procedural animated ripple pattern drawn into an image."""

from __future__ import annotations

import math

import numpy as np

from .image import Image


def render_frame(image: Image, time: float) -> Image:
    """Draw the ripple pattern for ``time`` seconds into ``image`` and return it."""
    if image.width == 0 or image.height == 0:
        return image
    cx = math.sin(time)
    cy = math.cos(time * 0.9)

    fx = (
        np.arange(image.width, dtype=np.float32) / np.float32(image.width)
    ).astype(np.float64) - 0.5
    fy = (
        np.arange(image.height, dtype=np.float32) / np.float32(image.height)
    ).astype(np.float64) - 0.5
    dist = np.sqrt((fx[np.newaxis, :] - cx) ** 2 + (fy[:, np.newaxis] - cy) ** 2)

    channels = [
        (np.sin(dist * factor) * 127 + 128).astype(np.uint8).ravel().tolist()
        for factor in (45.0, 44.0, 46.0)
    ]
    for pixel, r, g, b in zip(image.framebuffer, *channels):
        pixel.r, pixel.g, pixel.b = r, g, b
    return image