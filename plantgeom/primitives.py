"""
Procedural primitives used to assemble plant geometry.

Each primitive is built once in a reference frame (unit size, base at the
origin, growing along +z) and mapped into place by an affine transform, so
`solid_frustum(length=3.0, width=0.1, height=0.2, ratio=0.1)` and
`solid_frustum_from_transform(0.1, mat_scale(0.1, 0.05, 3.0))` produce the
same vertices.

Every generator accepts `mesh=`: when given, the primitive is appended to that
mesh (see Mesh.add) and the extended mesh is returned instead of a new one.
"""
from __future__ import annotations

import math
from typing import Any, Optional

import numpy as np

from .config import DEFAULT_DTYPE, resolve_dtype
from .mesh import Mesh
from .transforms import Mat4, apply_mat, mat_scale


def _require_positive(name: str, value: float) -> None:
    if not value > 0:
        raise ValueError(f"{name} must be > 0 (got {value})")


def _build(reference: np.ndarray, transform: Mat4, dtype: Any, mesh: Optional[Mesh]) -> Mesh:
    dt = DEFAULT_DTYPE if dtype is None else resolve_dtype(dtype)
    verts = apply_mat(reference.astype(dt), transform)
    prim = Mesh.from_vertices(verts)
    if mesh is None:
        return prim
    return mesh.add(prim)


# -----------------------
# Reference shapes
# -----------------------

def _reference_triangle() -> np.ndarray:
    return np.array([
        (0.0, -0.5, 0.0), (0.0, 0.5, 0.0), (0.0, 0.0, 1.0),
    ])


def _reference_rectangle() -> np.ndarray:
    p0, p1, p2, p3 = (0.0, -0.5, 0.0), (0.0, 0.5, 0.0), (0.0, 0.5, 1.0), (0.0, -0.5, 1.0)
    return np.array([p0, p1, p2, p0, p2, p3])


def _reference_ellipse(n: int) -> np.ndarray:
    # fan around the center of a unit-diameter disk in the yz plane, facing +x
    center = (0.0, 0.0, 0.5)
    verts = []
    for i in range(n):
        a0 = 2 * math.pi * i / n
        a1 = 2 * math.pi * (i + 1) / n
        verts.append(center)
        verts.append((0.0, 0.5 * math.cos(a0), 0.5 + 0.5 * math.sin(a0)))
        verts.append((0.0, 0.5 * math.cos(a1), 0.5 + 0.5 * math.sin(a1)))
    return np.array(verts)


def _reference_solid_frustum(ratio: float, n: int) -> np.ndarray:
    # unit radius at z=0, radius `ratio` at z=1; n // 4 segments, each made of
    # two side triangles, one bottom cap and one top cap triangle
    segments = n // 4
    bottom_center = (0.0, 0.0, 0.0)
    top_center = (0.0, 0.0, 1.0)
    verts = []
    for i in range(segments):
        a0 = 2 * math.pi * i / segments
        a1 = 2 * math.pi * (i + 1) / segments
        c0, s0, c1, s1 = math.cos(a0), math.sin(a0), math.cos(a1), math.sin(a1)
        b0, b1 = (c0, s0, 0.0), (c1, s1, 0.0)
        t0, t1 = (ratio * c0, ratio * s0, 1.0), (ratio * c1, ratio * s1, 1.0)
        verts += [b0, b1, t0]
        verts += [b1, t1, t0]
        verts += [bottom_center, b1, b0]
        verts += [top_center, t0, t1]
    return np.array(verts)


# -----------------------
# Primitive constructors
# -----------------------

def triangle(length: float = 1.0, width: float = 1.0, dtype: Any = None,
             mesh: Optional[Mesh] = None) -> Mesh:
    """Isosceles triangle in the yz plane: base `width` along y, apex at z = `length`."""
    _require_positive("length", length)
    _require_positive("width", width)
    return _build(_reference_triangle(), mat_scale(1.0, width, length), dtype, mesh)


def rectangle(length: float = 1.0, width: float = 1.0, dtype: Any = None,
              mesh: Optional[Mesh] = None) -> Mesh:
    """Rectangle made of two triangles in the yz plane, facing +x."""
    _require_positive("length", length)
    _require_positive("width", width)
    return _build(_reference_rectangle(), mat_scale(1.0, width, length), dtype, mesh)


def ellipse(length: float = 1.0, width: float = 1.0, n: int = 20, dtype: Any = None,
            mesh: Optional[Mesh] = None) -> Mesh:
    """Ellipse approximated by a fan of `n` triangles, axes `width` (y) and `length` (z)."""
    _require_positive("length", length)
    _require_positive("width", width)
    if n < 3:
        raise ValueError(f"n must be >= 3 (got {n})")
    return _build(_reference_ellipse(n), mat_scale(1.0, width, length), dtype, mesh)


def solid_frustum_from_transform(ratio: float, transform: Mat4, n: int = 40, dtype: Any = None,
                                 mesh: Optional[Mesh] = None) -> Mesh:
    """
    Closed frustum obtained by mapping the reference frustum through `transform`.

    Parameters
    ----------
    ratio:
        Radius of the top face relative to the bottom face.
    transform:
        4x4 affine matrix applied to the reference frustum (unit radius at
        z=0, radius `ratio` at z=1).
    n:
        Total number of triangles, a multiple of 4 (at least 12).

    Returns
    -------
    Mesh:
        New mesh, or `mesh` extended with the frustum when given.
    """
    if ratio < 0:
        raise ValueError(f"ratio must be >= 0 (got {ratio})")
    if n < 12 or n % 4 != 0:
        raise ValueError(f"n must be a multiple of 4 and >= 12 (got {n})")
    return _build(_reference_solid_frustum(ratio, n), transform, dtype, mesh)


def solid_frustum(length: float = 1.0, width: float = 1.0, height: float = 1.0, ratio: float = 1.0,
                  n: int = 40, dtype: Any = None, mesh: Optional[Mesh] = None) -> Mesh:
    """
    Closed frustum (truncated elliptic cone) with its base centered at the origin.

    `width` and `height` are the diameters of the base along y and x, `length`
    the distance to the top face along z and `ratio` the relative size of the
    top face. The side is approximated by n // 4 segments, each contributing
    two side triangles and one triangle to each cap.

    Example:
        stem = solid_frustum(length=2.0, width=1.0, height=1.0, ratio=0.5, n=40)
        stem.ntriangles  # 40
    """
    _require_positive("length", length)
    _require_positive("width", width)
    _require_positive("height", height)
    transform = mat_scale(height / 2, width / 2, length)
    return solid_frustum_from_transform(ratio, transform, n=n, dtype=dtype, mesh=mesh)
