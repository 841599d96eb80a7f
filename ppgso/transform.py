"""Matrix helpers and the model, view and projection transforms of the demo scenes.

Matrices are 4x4 numpy arrays of single-precision floats indexed as
``m[row, column]`` and applied to column vectors (``m @ v``).
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Sequence

import numpy as np

PI = math.pi

Matrix = np.ndarray


def _identity() -> Matrix:
    return np.identity(4, dtype=np.float32)


def _vec3(values: Sequence[float]) -> np.ndarray:
    vector = np.asarray(values, dtype=np.float64)
    if vector.shape != (3,):
        raise ValueError(f"Expected three components, got {vector.shape}")
    return vector


def _normalize(vector: np.ndarray) -> np.ndarray:
    length = float(np.linalg.norm(vector))
    if length == 0.0:
        raise ValueError("Cannot normalize a zero-length vector")
    return vector / length


def translate(matrix: Matrix, offset: Sequence[float]) -> Matrix:
    """Return ``matrix`` followed by a translation by ``offset``."""
    step = np.identity(4, dtype=np.float64)
    step[:3, 3] = _vec3(offset)
    return (np.asarray(matrix, dtype=np.float64) @ step).astype(np.float32)


def rotate(matrix: Matrix, angle: float, axis: Sequence[float]) -> Matrix:
    """Return ``matrix`` followed by a rotation of ``angle`` radians about ``axis``."""
    a = _normalize(_vec3(axis))
    c, s = math.cos(angle), math.sin(angle)
    cross = np.array([[0.0, -a[2], a[1]], [a[2], 0.0, -a[0]], [-a[1], a[0], 0.0]])
    step = np.identity(4, dtype=np.float64)
    step[:3, :3] = c * np.identity(3) + s * cross + (1.0 - c) * np.outer(a, a)
    return (np.asarray(matrix, dtype=np.float64) @ step).astype(np.float32)


def scale(matrix: Matrix, factors: Sequence[float]) -> Matrix:
    """Return ``matrix`` followed by a scale along each axis."""
    step = np.diag([*_vec3(factors), 1.0])
    return (np.asarray(matrix, dtype=np.float64) @ step).astype(np.float32)


def perspective(fovy: float, aspect: float, near: float, far: float) -> Matrix:
    """Right-handed perspective projection mapping depth to <-1, 1>."""
    if aspect == 0.0:
        raise ValueError("Aspect ratio must not be zero")
    if near == far:
        raise ValueError("Near and far planes must differ")
    half = math.tan(fovy / 2.0)
    if half == 0.0:
        raise ValueError("Field of view must not be zero")
    result = np.zeros((4, 4), dtype=np.float64)
    result[0, 0] = 1.0 / (aspect * half)
    result[1, 1] = 1.0 / half
    result[2, 2] = -(far + near) / (far - near)
    result[3, 2] = -1.0
    result[2, 3] = -(2.0 * far * near) / (far - near)
    return result.astype(np.float32)


def ortho(
    left: float, right: float, bottom: float, top: float, near: float, far: float
) -> Matrix:
    """Right-handed orthographic projection mapping the box to <-1, 1> on each axis."""
    if left == right or bottom == top or near == far:
        raise ValueError("Orthographic volume must not be flat")
    result = np.identity(4, dtype=np.float64)
    result[0, 0] = 2.0 / (right - left)
    result[1, 1] = 2.0 / (top - bottom)
    result[2, 2] = -2.0 / (far - near)
    result[0, 3] = -(right + left) / (right - left)
    result[1, 3] = -(top + bottom) / (top - bottom)
    result[2, 3] = -(far + near) / (far - near)
    return result.astype(np.float32)


def look_at(
    eye: Sequence[float], center: Sequence[float], up: Sequence[float]
) -> Matrix:
    """Right-handed view matrix for a camera at ``eye`` looking at ``center``."""
    eye_v = _vec3(eye)
    forward = _normalize(_vec3(center) - eye_v)
    side = _normalize(np.cross(forward, _vec3(up)))
    upward = np.cross(side, forward)
    result = np.identity(4, dtype=np.float64)
    result[0, :3] = side
    result[1, :3] = upward
    result[2, :3] = -forward
    result[0, 3] = -np.dot(side, eye_v)
    result[1, 3] = -np.dot(upward, eye_v)
    result[2, 3] = np.dot(forward, eye_v)
    return result.astype(np.float32)


class TransformMode(Enum):
    """Model transformations shown one after another."""

    IDENTITY = 0
    SCALE = 1
    SQUASH = 2
    ROTATE = 3
    TRANSLATE = 4
    ROTATE_TOP_RIGHT = 5
    ROTATE_TOP_LEFT = 6


class ProjectionMode(Enum):
    """Camera projections shown one after another."""

    PERSPECTIVE = 0
    PARALLEL = 1


def _from_columns(*columns: Sequence[float]) -> Matrix:
    return np.array(columns, dtype=np.float32).T


def model_matrix(mode: TransformMode, time: float) -> Matrix:
    """Model matrix of ``mode`` at ``time`` seconds."""
    s, c = math.sin(time), math.cos(time)
    if mode is TransformMode.IDENTITY:
        return _identity()
    if mode is TransformMode.SCALE:
        return _from_columns((s, 0, 0, 0), (0, s, 0, 0), (0, 0, s, 0), (0, 0, 0, 1))
    if mode is TransformMode.SQUASH:
        return _from_columns((s, 0, 0, 0), (0, c, 0, 0), (0, 0, 1, 0), (0, 0, 0, 1))
    rotation = _from_columns((c, s, 0, 0), (-s, c, 0, 0), (0, 0, 1, 0), (0, 0, 0, 1))
    if mode is TransformMode.ROTATE:
        return rotation
    if mode is TransformMode.TRANSLATE:
        return _from_columns(
            (1, 0, 0, 0), (0, 1, 0, 0), (0, 0, 1, 0), (s / 2.0, c / 2.0, 0, 1)
        )
    if mode is TransformMode.ROTATE_TOP_RIGHT:
        back = translate(_identity(), (1.0, 1.0, 0.0))
        to_origin = translate(_identity(), (-1.0, -1.0, 0.0))
        return (back @ rotation @ to_origin).astype(np.float32)
    if mode is TransformMode.ROTATE_TOP_LEFT:
        pivot = (-1.0, 1.0, 0.0)
        return (
            translate(_identity(), pivot)
            @ rotate(_identity(), time, (0.0, 0.0, 1.0))
            @ translate(_identity(), tuple(-p for p in pivot))
        ).astype(np.float32)
    return _identity()


def next_transform_mode(mode: TransformMode) -> TransformMode:
    """The mode that follows ``mode``, wrapping to the first."""
    members = list(TransformMode)
    return members[(members.index(mode) + 1) % len(members)]


def next_projection_mode(mode: ProjectionMode) -> ProjectionMode:
    """The projection that follows ``mode``, wrapping to the first."""
    members = list(ProjectionMode)
    return members[(members.index(mode) + 1) % len(members)]


def projection_matrices(mode: ProjectionMode) -> tuple[Matrix, Matrix]:
    """Projection and view matrices used for ``mode``."""
    if mode is ProjectionMode.PERSPECTIVE:
        projection = perspective((PI / 180.0) * 60.0, 1.0, 0.1, 10.0)
        view = translate(_identity(), (0.0, 0.0, -3.0))
        return projection, view
    projection = ortho(-2.0, 2.0, -2.0, 2.0, 0.1, 10.0)
    view = look_at((2.0, 2.0, 2.0), (0.0, 0.0, 0.0), (0.0, 1.0, 0.0))
    return projection, view


def cursor_to_viewport(cursor_x: float, cursor_y: float, size: float) -> tuple[float, float]:
    """Convert window coordinates in <0, size> to viewport coordinates in <-1, 1>."""
    if size == 0:
        raise ValueError("Window size must not be zero")
    x = (cursor_x / float(size) * 2.0) - 1.0
    y = -((cursor_y / float(size) * 2.0) - 1.0)
    return x, y