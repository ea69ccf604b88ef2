"""Exceptions raised by the mesh core.

Every error is raised before the mesh it concerns is modified.
"""


class MeshError(Exception):
    """Base class for invalid mesh construction or mutation."""


class MeshShapeError(MeshError, ValueError):
    """Vertex count is not a multiple of 3 or vertices are not 3D points."""


class EmptyMeshListError(MeshError, ValueError):
    """A merge was requested over an empty list of meshes."""


class PropertySchemaError(MeshError, ValueError):
    """Two property tables do not track the same set of properties."""


class PropertyLengthError(MeshError, ValueError):
    """A property array does not hold one value per triangle."""


class TriangleIndexError(MeshError, IndexError):
    """Triangle index outside of the mesh."""


class PrecisionError(MeshError, TypeError):
    """Floating-point precisions of two meshes or vertex blocks differ."""
