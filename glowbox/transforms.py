"""4x4 transformation matrices and quaternion helpers.

Matrices are numpy arrays in mathematical (row, column) order and act on
column vectors: ``matrix @ (x, y, z, 1)``. Quaternions are numpy arrays of
the form ``(w, x, y, z)``.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np

__all__ = [
    "ortho",
    "perspective",
    "quat_from_euler",
    "quat_multiply",
    "quat_normalize",
    "quat_to_matrix",
    "rotate",
    "scale",
    "translate",
]


def translate(offset: Sequence[float]) -> np.ndarray:
    """Matrix that moves points by ``offset``."""
    matrix = np.identity(4)
    matrix[:3, 3] = np.asarray(offset, dtype=np.float64)
    return matrix


def rotate(angle: float, axis: Sequence[float]) -> np.ndarray:
    """Matrix rotating by ``angle`` radians counter-clockwise about ``axis``."""
    axis_arr = np.asarray(axis, dtype=np.float64)
    length = np.linalg.norm(axis_arr)
    if length == 0:
        raise ValueError("rotation axis must be non-zero")
    k = axis_arr / length
    c, s = math.cos(angle), math.sin(angle)
    cross = np.array(
        [
            [0.0, -k[2], k[1]],
            [k[2], 0.0, -k[0]],
            [-k[1], k[0], 0.0],
        ]
    )
    matrix = np.identity(4)
    matrix[:3, :3] = c * np.identity(3) + s * cross + (1.0 - c) * np.outer(k, k)
    return matrix


def scale(factors: Sequence[float]) -> np.ndarray:
    """Matrix scaling each axis by the matching factor."""
    matrix = np.identity(4)
    matrix[:3, :3] = np.diag(np.asarray(factors, dtype=np.float64))
    return matrix


def perspective(fovy: float, aspect: float, near: float, far: float) -> np.ndarray:
    """Right-handed perspective projection mapping depth to [-1, 1]."""
    if aspect == 0:
        raise ValueError("aspect ratio must be non-zero")
    if near == far:
        raise ValueError("near and far planes must differ")
    tan_half = math.tan(fovy / 2.0)
    if tan_half == 0:
        raise ValueError("field of view must be non-zero")
    matrix = np.zeros((4, 4))
    matrix[0, 0] = 1.0 / (aspect * tan_half)
    matrix[1, 1] = 1.0 / tan_half
    matrix[2, 2] = -(far + near) / (far - near)
    matrix[2, 3] = -(2.0 * far * near) / (far - near)
    matrix[3, 2] = -1.0
    return matrix


def ortho(
    left: float, right: float, bottom: float, top: float, near: float, far: float
) -> np.ndarray:
    """Right-handed orthographic projection mapping the box to [-1, 1]^3."""
    if left == right or bottom == top or near == far:
        raise ValueError("orthographic box must have non-zero extent")
    matrix = np.identity(4)
    matrix[0, 0] = 2.0 / (right - left)
    matrix[1, 1] = 2.0 / (top - bottom)
    matrix[2, 2] = -2.0 / (far - near)
    matrix[0, 3] = -(right + left) / (right - left)
    matrix[1, 3] = -(top + bottom) / (top - bottom)
    matrix[2, 3] = -(far + near) / (far - near)
    return matrix


def quat_from_euler(angles: Sequence[float]) -> np.ndarray:
    """Quaternion from (pitch, yaw, roll) angles about x, y and z in radians."""
    half = np.asarray(angles, dtype=np.float64) * 0.5
    cx, cy, cz = np.cos(half)
    sx, sy, sz = np.sin(half)
    return np.array(
        [
            cx * cy * cz + sx * sy * sz,
            sx * cy * cz - cx * sy * sz,
            cx * sy * cz + sx * cy * sz,
            cx * cy * sz - sx * sy * cz,
        ]
    )


def quat_multiply(a: Sequence[float], b: Sequence[float]) -> np.ndarray:
    """Hamilton product ``a * b``: the rotation ``b`` followed by ``a``."""
    aw, ax, ay, az = (float(v) for v in a)
    bw, bx, by, bz = (float(v) for v in b)
    return np.array(
        [
            aw * bw - ax * bx - ay * by - az * bz,
            aw * bx + ax * bw + ay * bz - az * by,
            aw * by + ay * bw + az * bx - ax * bz,
            aw * bz + az * bw + ax * by - ay * bx,
        ]
    )


def quat_normalize(q: Sequence[float]) -> np.ndarray:
    """Unit-length copy of ``q``; the identity rotation if ``q`` has no length."""
    arr = np.asarray(q, dtype=np.float64)
    length = np.linalg.norm(arr)
    if length <= 0:
        return np.array([1.0, 0.0, 0.0, 0.0])
    return arr / length


def quat_to_matrix(q: Sequence[float]) -> np.ndarray:
    """4x4 rotation matrix for the unit quaternion ``q``."""
    w, x, y, z = (float(v) for v in q)
    matrix = np.identity(4)
    matrix[:3, :3] = [
        [1 - 2 * (y * y + z * z), 2 * (x * y - w * z), 2 * (x * z + w * y)],
        [2 * (x * y + w * z), 1 - 2 * (x * x + z * z), 2 * (y * z - w * x)],
        [2 * (x * z - w * y), 2 * (y * z + w * x), 1 - 2 * (x * x + y * y)],
    ]
    return matrix