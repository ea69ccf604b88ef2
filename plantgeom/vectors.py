"""Small Vec3 utilities.

A Vec3 is a numpy array of shape (3,) and a block of vertices an (n, 3) array.
All helpers keep the dtype of their inputs so single-precision meshes stay in
single precision.
"""
from __future__ import annotations

from typing import Any, Optional

import numpy as np

from .config import DEFAULT_DTYPE, SUPPORTED_DTYPES, resolve_dtype
from .errors import MeshShapeError, PrecisionError


def vec3(x: float, y: float, z: float, dtype: Any = None) -> np.ndarray:
    return np.array((x, y, z), dtype=DEFAULT_DTYPE if dtype is None else resolve_dtype(dtype))


def v_sub(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    return a - b


def v_cross(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    return np.array(
        (
            a[1] * b[2] - a[2] * b[1],
            a[2] * b[0] - a[0] * b[2],
            a[0] * b[1] - a[1] * b[0],
        ),
        dtype=a.dtype,
    )


def v_dot(a: np.ndarray, b: np.ndarray):
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def v_len(a: np.ndarray):
    return np.sqrt(v_dot(a, a))


def v_norm(a: np.ndarray) -> np.ndarray:
    l = v_len(a)
    if l == 0:
        return np.zeros(3, dtype=a.dtype)
    return a / l


def check_precision(expected: np.dtype, actual: np.dtype) -> None:
    if np.dtype(expected) != np.dtype(actual):
        raise PrecisionError(
            f"Cannot mix {np.dtype(actual).name} data into a {np.dtype(expected).name} mesh"
        )


def as_vertices(data: Any, dtype: Optional[Any] = None) -> np.ndarray:
    """
    Convert `data` into a contiguous (n, 3) vertex array.

    When `dtype` is None a float32/float64 input keeps its precision and any
    other input is converted to the default precision.
    """
    arr = np.asarray(data)
    if dtype is None:
        dt = arr.dtype if arr.dtype in SUPPORTED_DTYPES else DEFAULT_DTYPE
    else:
        dt = resolve_dtype(dtype)
    if arr.size == 0:
        return np.empty((0, 3), dtype=dt)
    if arr.ndim != 2 or arr.shape[1] != 3:
        raise MeshShapeError(f"Vertices must be an Nx3 array (got shape {arr.shape})")
    return np.ascontiguousarray(arr, dtype=dt)
