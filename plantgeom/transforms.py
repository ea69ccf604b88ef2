"""
4x4 affine matrices and their application to vertex blocks.

Primitives are built once in a reference frame and mapped into place with
these matrices. Matrices are float64; applying one to a vertex block returns
the block's own precision.
"""
from __future__ import annotations

import math
from typing import Optional

import numpy as np

Mat4 = np.ndarray


def mat_identity() -> Mat4:
    return np.eye(4)


def mat_mul(a: Mat4, b: Mat4) -> Mat4:
    return np.asarray(a, dtype=float) @ np.asarray(b, dtype=float)


def mat_translate(dx: float, dy: float, dz: float) -> Mat4:
    m = mat_identity()
    m[0, 3], m[1, 3], m[2, 3] = dx, dy, dz
    return m


def mat_scale(sx: float, sy: Optional[float] = None, sz: Optional[float] = None) -> Mat4:
    if sy is None:
        sy = sx
    if sz is None:
        sz = sx
    m = mat_identity()
    m[0, 0], m[1, 1], m[2, 2] = sx, sy, sz
    return m


def mat_rotate_x(a: float) -> Mat4:
    c, s = math.cos(a), math.sin(a)
    return np.array([
        [1, 0, 0, 0],
        [0, c, -s, 0],
        [0, s, c, 0],
        [0, 0, 0, 1],
    ], dtype=float)


def mat_rotate_y(a: float) -> Mat4:
    c, s = math.cos(a), math.sin(a)
    return np.array([
        [c, 0, s, 0],
        [0, 1, 0, 0],
        [-s, 0, c, 0],
        [0, 0, 0, 1],
    ], dtype=float)


def mat_rotate_z(a: float) -> Mat4:
    c, s = math.cos(a), math.sin(a)
    return np.array([
        [c, -s, 0, 0],
        [s, c, 0, 0],
        [0, 0, 1, 0],
        [0, 0, 0, 1],
    ], dtype=float)


def apply_mat(vertices: np.ndarray, m: Mat4) -> np.ndarray:
    """
    Map an (n, 3) vertex block through an affine matrix: v' = M * [x, y, z, 1].

    The matrix is cast to the precision of the vertices first so that a
    float32 block is transformed entirely in float32.
    """
    m = np.asarray(m)
    if m.shape != (4, 4):
        raise ValueError(f"Transform must be a 4x4 matrix (got shape {m.shape})")
    if np.any(m[3, :3] != 0) or m[3, 3] != 1:
        raise ValueError("Only affine transforms are supported")
    vertices = np.asarray(vertices)
    m = m.astype(vertices.dtype)
    return vertices @ m[:3, :3].T + m[:3, 3]
