"""Left-handed, row-vector 3D maths: vectors and 4x4 matrices as numpy arrays."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

Vector = Sequence[float] | np.ndarray


def _vec(v: Vector) -> np.ndarray:
    return np.asarray(v, dtype=float)


def normalize(v: Vector) -> np.ndarray:
    """Return ``v`` scaled to unit length; a zero vector stays zero."""
    arr = _vec(v)
    n = float(np.linalg.norm(arr))
    return arr / n if n > 0.0 else np.zeros_like(arr)


def cross(a: Vector, b: Vector) -> np.ndarray:
    return np.cross(_vec(a), _vec(b))


def length(v: Vector) -> float:
    return float(np.linalg.norm(_vec(v)))


def lerp(a: Vector, b: Vector, t: float) -> np.ndarray:
    """Linear interpolation: ``a`` at t=0, ``b`` at t=1."""
    va, vb = _vec(a), _vec(b)
    return va + (vb - va) * t


def translation(v: Vector) -> np.ndarray:
    m = np.identity(4)
    m[3, :3] = _vec(v)
    return m


def scaling(v: Vector) -> np.ndarray:
    x, y, z = _vec(v)
    return np.diag([x, y, z, 1.0])


def _rotation_x(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[1, 0, 0, 0], [0, c, s, 0], [0, -s, c, 0], [0, 0, 0, 1]], dtype=float)


def _rotation_y(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[c, 0, -s, 0], [0, 1, 0, 0], [s, 0, c, 0], [0, 0, 0, 1]], dtype=float)


def rotation_z(angle: float) -> np.ndarray:
    """Rotation about the z axis by ``angle`` radians."""
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[c, s, 0, 0], [-s, c, 0, 0], [0, 0, 1, 0], [0, 0, 0, 1]], dtype=float)


def rotation_roll_pitch_yaw(pitch: float, yaw: float, roll: float) -> np.ndarray:
    """Rotation applying roll (z), then pitch (x), then yaw (y); angles in radians."""
    return rotation_z(roll) @ _rotation_x(pitch) @ _rotation_y(yaw)


def transform_coord(v: Vector, m: np.ndarray) -> np.ndarray:
    """Transform point ``v`` by ``m`` and divide by the resulting w."""
    x, y, z = _vec(v)
    out = np.array([x, y, z, 1.0]) @ np.asarray(m, dtype=float)
    return out[:3] / out[3]


def look_at_lh(eye: Vector, focus: Vector, up: Vector) -> np.ndarray:
    """View matrix looking from ``eye`` towards ``focus``."""
    eye_v = _vec(eye)
    direction = _vec(focus) - eye_v
    if not np.any(direction) or not np.any(_vec(up)):
        raise ValueError("look direction and up vector must be non-zero")
    r2 = normalize(direction)
    r0 = normalize(cross(up, r2))
    r1 = cross(r2, r0)
    m = np.identity(4)
    m[:3, 0] = r0
    m[:3, 1] = r1
    m[:3, 2] = r2
    m[3, :3] = [-np.dot(r0, eye_v), -np.dot(r1, eye_v), -np.dot(r2, eye_v)]
    return m


def perspective_fov_lh(fov: float, aspect: float, near: float, far: float) -> np.ndarray:
    """Perspective projection; ``fov`` is the vertical field of view in radians."""
    if fov <= 0.0 or aspect == 0.0:
        raise ValueError("field of view must be positive and aspect ratio non-zero")
    if near <= 0.0 or far <= 0.0 or near == far:
        raise ValueError("near and far planes must be positive and distinct")
    h = 1.0 / math.tan(fov * 0.5)
    w = h / aspect
    depth = far / (far - near)
    m = np.zeros((4, 4))
    m[0, 0] = w
    m[1, 1] = h
    m[2, 2] = depth
    m[2, 3] = 1.0
    m[3, 2] = -depth * near
    return m


def orthographic_lh(width: float, height: float, near: float, far: float) -> np.ndarray:
    """Orthographic projection of a ``width`` x ``height`` view volume."""
    if width == 0.0 or height == 0.0:
        raise ValueError("view width and height must be non-zero")
    if near == far:
        raise ValueError("near and far planes must differ")
    depth = 1.0 / (far - near)
    m = np.identity(4)
    m[0, 0] = 2.0 / width
    m[1, 1] = 2.0 / height
    m[2, 2] = depth
    m[3, 2] = -depth * near
    return m