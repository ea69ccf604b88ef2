"""
Triangle-soup meshes with per-triangle properties.

Every three consecutive vertices form one triangle; no vertex is shared
between triangles. Besides the vertex buffer a mesh carries a property table
with one value per triangle for each property. The reserved "normal" property
holds the unit normal of every triangle and is maintained incrementally as
vertices are appended.

Example:
    a = Mesh.from_vertices([(0, 0, 0), (1, 0, 0), (0, 1, 0)])
    b = Mesh.from_vertices([(0, 0, 1), (1, 0, 1), (0, 1, 1)])
    scene = merge_meshes([a, b])
    scene.area()  # 1.0
"""
from __future__ import annotations

import logging
import operator
from types import MappingProxyType
from typing import Any, Iterable, List, Mapping, Optional

import numpy as np

from .config import DEFAULT_DTYPE, DEFAULT_RTOL, NORMAL_KEY, SUPPORTED_DTYPES, resolve_dtype
from .errors import (
    EmptyMeshListError,
    MeshShapeError,
    PropertyLengthError,
    TriangleIndexError,
)
from .properties import (
    Broadcast,
    PerTriangle,
    PropertyData,
    PropertyTable,
    copy_properties,
    merge_properties,
    resolve,
)
from .vectors import as_vertices, check_precision, v_cross, v_len, v_norm, v_sub

logger = logging.getLogger(__name__)


def triangle_normal(v1: np.ndarray, v2: np.ndarray, v3: np.ndarray) -> np.ndarray:
    """Unit normal of a triangle following its winding (zero vector if degenerate)."""
    n = v_norm(v_cross(v_sub(v2, v1), v_sub(v3, v1)))
    n.flags.writeable = False
    return n


def area_triangle(v1: np.ndarray, v2: np.ndarray, v3: np.ndarray):
    """Area of a triangle, in the precision of its vertices."""
    half = v1.dtype.type(0.5)
    return half * v_len(v_cross(v_sub(v2, v1), v_sub(v3, v1)))


def _isapprox(x: np.ndarray, y: np.ndarray, atol: float, rtol: float) -> bool:
    if x.shape != y.shape:
        return False
    d = np.linalg.norm(x - y)
    if d == 0:
        return True
    return bool(np.isfinite(d) and d <= max(atol, rtol * max(np.linalg.norm(x), np.linalg.norm(y))))


class Mesh:
    """
    Dense triangular mesh representing a primitive or a 3D scene.

    A mesh stores its vertices in a single floating-point precision (float64
    unless configured otherwise). Use the alternative constructors to build a
    mesh from vertices or by merging existing meshes.

    Parameters
    ----------
    dtype:
        Floating-point precision of the mesh (numpy.float32 or numpy.float64).
    capacity:
        Number of triangles to reserve buffer space for. This is only a
        performance hint when many primitives are appended to one mesh.
    """

    __hash__ = None  # mutable, compared by value

    def __init__(self, dtype: Any = None, capacity: int = 0) -> None:
        self._dtype = resolve_dtype(DEFAULT_DTYPE if dtype is None else dtype)
        capacity = operator.index(capacity)
        if capacity < 0:
            raise ValueError(f"capacity must be >= 0 (got {capacity})")
        self._buffer = np.empty((3 * capacity, 3), dtype=self._dtype)
        self._nv = 0
        self._properties: PropertyTable = {}

    # ---- construction ----
    @classmethod
    def from_vertices(
        cls,
        vertices: Any,
        properties: Optional[Mapping[str, Iterable[Any]]] = None,
        dtype: Any = None,
    ) -> "Mesh":
        """
        Build a mesh from a sequence of vertices, three per triangle.

        Parameters
        ----------
        vertices:
            (n, 3) array-like of vertex coordinates, n a multiple of 3. A
            float32/float64 array keeps its precision unless `dtype` is given.
        properties:
            Optional initial per-triangle properties (one value per triangle).
            A "normal" entry is kept and only the missing normals are computed.
        dtype:
            Precision to convert the vertices to.

        Returns
        -------
        Mesh:
            Mesh with one normal per triangle.
        """
        verts = as_vertices(vertices, dtype)
        if len(verts) % 3 != 0:
            raise MeshShapeError(
                f"Number of vertices must be a multiple of 3 (got {len(verts)})"
            )
        nt = len(verts) // 3
        table: PropertyTable = {}
        for name, values in (properties or {}).items():
            values = resolve(PerTriangle(values), nt)
            ok = len(values) <= nt if name == NORMAL_KEY else len(values) == nt
            if not ok:
                raise PropertyLengthError(
                    f"Property {name!r} has {len(values)} values for {nt} triangles"
                )
            if name == NORMAL_KEY:
                values = [_as_normal(n, verts.dtype) for n in values]
            table[name] = values

        mesh = cls(verts.dtype, capacity=nt)
        mesh._append_vertices(verts)
        mesh._properties = table
        mesh.update_normals()
        return mesh

    @classmethod
    def from_meshes(cls, meshes: Iterable["Mesh"]) -> "Mesh":
        """
        Merge meshes into a new one.

        Vertices are concatenated in list order, so triangle i of the second
        mesh becomes triangle ntriangles(first) + i of the result. All meshes
        must share the same precision and track the same properties. The
        inputs are left untouched and the result shares no storage with them.
        """
        meshes = list(meshes)
        if not meshes:
            raise EmptyMeshListError("At least one mesh must be provided")
        first = meshes[0]
        for m in meshes[1:]:
            check_precision(first.dtype, m.dtype)

        total = sum(m.nvertices for m in meshes)
        merged = cls(first.dtype, capacity=total // 3)
        merged._append_vertices(first._active())
        merged._properties = copy_properties(first._properties)
        for m in meshes[1:]:
            merge_properties(merged._properties, m._properties)
            merged._append_vertices(m._active())
        logger.debug("Merged %d meshes into %d triangles", len(meshes), merged.ntriangles)
        return merged

    def copy(self) -> "Mesh":
        return Mesh.from_meshes([self])

    # ---- buffer management ----
    def _active(self) -> np.ndarray:
        return self._buffer[: self._nv]

    def _reserve(self, nvertices: int) -> None:
        if nvertices <= len(self._buffer):
            return
        new_size = max(nvertices, 2 * len(self._buffer))
        buffer = np.empty((new_size, 3), dtype=self._dtype)
        buffer[: self._nv] = self._active()
        self._buffer = buffer

    def _append_vertices(self, block: np.ndarray) -> None:
        n = len(block)
        if n == 0:
            return
        # block may be a view of the old buffer, which stays alive until copied
        self._reserve(self._nv + n)
        self._buffer[self._nv : self._nv + n] = block
        self._nv += n

    # ---- normals ----
    def update_normals(self) -> "Mesh":
        """
        Compute the normals of the triangles that do not have one yet.

        Normals are appended in triangle order starting from the first
        triangle without a normal, so repeated calls after appending vertices
        never recompute settled normals.
        """
        normals = self._properties.setdefault(NORMAL_KEY, [])
        nt = self.ntriangles
        start = len(normals)
        if start > nt:
            raise PropertyLengthError(
                f"Mesh has {start} normals for {nt} triangles"
            )
        vs = self._buffer
        for i in range(start, nt):
            j = 3 * i
            normals.append(triangle_normal(vs[j], vs[j + 1], vs[j + 2]))
        if nt > start:
            logger.debug("Computed normals for triangles %d..%d", start, nt - 1)
        return self

    # ---- mutation ----
    def add_property(self, name: str, data: PropertyData, ntriangles: Optional[int] = None) -> "Mesh":
        """
        Add per-triangle values for a property.

        If the property already exists the new values are appended to it,
        otherwise the property is created.

        Parameters
        ----------
        name:
            Name of the property (e.g. "absorbed_light").
        data:
            PerTriangle(values) or Broadcast(value).
        ntriangles:
            Number of triangles a Broadcast value is repeated for. Defaults to
            the number of triangles in the mesh.

        Raises
        ------
        PropertyLengthError:
            If the property would not end up with one value per triangle.
        """
        nt = self.ntriangles if ntriangles is None else operator.index(ntriangles)
        values = resolve(data, nt)
        current = self._properties.get(name, [])
        if len(current) + len(values) != self.ntriangles:
            raise PropertyLengthError(
                f"Property {name!r} would have {len(current) + len(values)} values "
                f"for {self.ntriangles} triangles"
            )
        if name == NORMAL_KEY:
            values = [_as_normal(n, self._dtype) for n in values]
        self._properties.setdefault(name, []).extend(values)
        return self

    def add(self, other: "Mesh", **properties: Any) -> "Mesh":
        """
        Append another mesh to this one, with optional per-triangle properties.

        The normals of `other` are settled and appended along with its
        vertices. Every keyword is stored as a property of the appended
        triangles: a PerTriangle value must hold one value per triangle of
        `other`, a scalar or tuple is broadcast to all of them. Lists and
        arrays are ambiguous and must be wrapped in PerTriangle (one value
        per triangle) or Broadcast (one shared value). Pass a value for
        every property this mesh already tracks (e.g. if the scene was created
        with "color", pass color= here too); omitted properties fall behind
        the triangle count.

        Example:
            scene.add(leaf, color=(0.1, 0.6, 0.2))
        """
        check_precision(self._dtype, other.dtype)
        if NORMAL_KEY in properties:
            raise ValueError("Normals are taken from the appended mesh")
        for name, value in properties.items():
            if isinstance(value, (list, np.ndarray)):
                raise TypeError(
                    f"Property {name!r}: wrap a {type(value).__name__} in PerTriangle "
                    f"(one value per triangle) or Broadcast (one shared value)"
                )
        other.update_normals()
        self.update_normals()
        nt = other.ntriangles

        resolved = {}
        for name, value in properties.items():
            if not isinstance(value, (PerTriangle, Broadcast)):
                value = Broadcast(value)
            values = resolve(value, nt)
            if len(values) != nt:
                raise PropertyLengthError(
                    f"Property {name!r} has {len(values)} values for {nt} triangles"
                )
            resolved[name] = values

        donor_normals = list(other._properties[NORMAL_KEY])
        self._append_vertices(other._active())
        self._properties[NORMAL_KEY].extend(donor_normals)
        for name, values in resolved.items():
            self._properties.setdefault(name, []).extend(values)

        lagging = sorted(k for k, v in self._properties.items() if len(v) != self.ntriangles)
        if lagging:
            logger.warning(
                "Properties %s out of sync after appending %d triangles (mesh has %d)",
                lagging, nt, self.ntriangles,
            )
        logger.debug("Appended %d triangles (total %d)", nt, self.ntriangles)
        return self

    # ---- accessors ----
    @property
    def dtype(self) -> np.dtype:
        """Floating-point precision of the mesh coordinates."""
        return self._dtype

    @property
    def vertices(self) -> np.ndarray:
        """Read-only (nvertices, 3) view of the vertex buffer."""
        v = self._active()
        v.flags.writeable = False
        return v

    @property
    def normals(self) -> np.ndarray:
        """(ntriangles, 3) array with the normal of each triangle.

        Reading the normals of a mesh without triangles leaves its property
        table as it is.
        """
        if NORMAL_KEY not in self._properties and self.ntriangles == 0:
            return np.empty((0, 3), dtype=self._dtype)
        self.update_normals()
        normals = self._properties[NORMAL_KEY]
        if not normals:
            return np.empty((0, 3), dtype=self._dtype)
        return np.stack(normals)

    @property
    def properties(self) -> Mapping[str, List[Any]]:
        """Read-only view of the property table (name -> list of per-triangle values)."""
        return MappingProxyType(self._properties)

    @property
    def nvertices(self) -> int:
        return self._nv

    @property
    def ntriangles(self) -> int:
        return self._nv // 3

    def get_triangle(self, i: int) -> np.ndarray:
        """Read-only (3, 3) view with the vertices of triangle `i` (0-based)."""
        i = operator.index(i)
        if not 0 <= i < self.ntriangles:
            raise TriangleIndexError(
                f"Triangle index {i} out of range for mesh with {self.ntriangles} triangles"
            )
        tri = self._buffer[3 * i : 3 * i + 3]
        tri.flags.writeable = False
        return tri

    # ---- analysis ----
    def areas(self) -> np.ndarray:
        """Area of every triangle, in triangle order."""
        vs = self._buffer
        return np.array(
            [area_triangle(vs[j], vs[j + 1], vs[j + 2]) for j in range(0, 3 * self.ntriangles, 3)],
            dtype=self._dtype,
        )

    def area(self):
        """Total surface area (sum of the triangle areas, left to right)."""
        total = self._dtype.type(0)
        for a in self.areas():
            total = total + a
        return total

    # ---- comparison ----
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mesh):
            return NotImplemented
        return bool(
            np.array_equal(self.vertices, other.vertices)
            and np.array_equal(self.normals, other.normals)
        )

    def isclose(self, other: "Mesh", atol: float = 0.0, rtol: Optional[float] = None) -> bool:
        """
        Approximate equality of vertices and normals.

        Each array passes if ||x - y|| <= max(atol, rtol * max(||x||, ||y||)).
        `rtol` defaults to sqrt(eps) unless an absolute tolerance is given, in
        which case it defaults to zero.
        """
        if rtol is None:
            rtol = 0.0 if atol > 0 else DEFAULT_RTOL
        return _isapprox(self.vertices, other.vertices, atol, rtol) and _isapprox(
            self.normals, other.normals, atol, rtol
        )

    def __repr__(self) -> str:
        return (
            f"Mesh(ntriangles={self.ntriangles}, dtype={self._dtype.name}, "
            f"properties={sorted(self._properties)})"
        )


def _as_normal(n: Any, dtype: np.dtype) -> np.ndarray:
    if isinstance(n, np.ndarray) and n.dtype in SUPPORTED_DTYPES:
        check_precision(dtype, n.dtype)
    arr = np.array(n, dtype=dtype)
    if arr.shape != (3,):
        raise MeshShapeError(f"Normals must be 3D vectors (got shape {arr.shape})")
    arr.flags.writeable = False
    return arr


def merge_meshes(meshes: Iterable[Mesh]) -> Mesh:
    """Merge a non-empty list of meshes into a new mesh (see Mesh.from_meshes)."""
    return Mesh.from_meshes(meshes)
